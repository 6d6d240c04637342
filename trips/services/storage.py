"""
Trip persistence: local JSON cache plus a per-user cloud document.

:class:`TripStore` keeps one in-memory :class:`AppData` per user and
synchronizes it the way an offline-first client does:

- load: the cloud document wins and refreshes the local cache; with no cloud
  document, an existing local cache is pushed up; cloud failures fall back to
  the local cache (offline mode).
- save: the local cache is always written; the cloud copy when reachable.
- schedule_save: debounced autosave, each call replaces the pending one.
"""

from __future__ import annotations

import asyncio
import json
import logging
import functools
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from config import get_autosave_delay_seconds, get_local_cache_dir
from core.http.retry import TRANSIENT_STORAGE_ERRORS, retry_async
from date_utils import get_current_utc_time
from db.models import UserTripsDocument
from trips.models import AppData

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class DocumentStore(Protocol):
    """Cloud persistence port: load/save one document by user id."""

    async def load(self, user_id: str) -> dict[str, Any] | None: ...

    async def save(self, user_id: str, payload: dict[str, Any]) -> None: ...


class MongoDocumentStore:
    """Cloud store backed by the ``user_trips`` collection."""

    @retry_async(max_retries=2, retry_delay=0.5, retry_exceptions=TRANSIENT_STORAGE_ERRORS)
    async def load(self, user_id: str) -> dict[str, Any] | None:
        doc = await UserTripsDocument.find_one(UserTripsDocument.user_id == user_id)
        if doc is None:
            return None
        return {"trips": doc.trips, "activeTripId": doc.active_trip_id}

    @retry_async(max_retries=2, retry_delay=0.5, retry_exceptions=TRANSIENT_STORAGE_ERRORS)
    async def save(self, user_id: str, payload: dict[str, Any]) -> None:
        doc = await UserTripsDocument.find_one(UserTripsDocument.user_id == user_id)
        if doc is None:
            doc = UserTripsDocument(user_id=user_id)
        doc.trips = payload.get("trips", [])
        doc.active_trip_id = payload.get("activeTripId")
        doc.updated_at = get_current_utc_time()
        await doc.save()


class LocalCache:
    """One JSON file per user; file I/O runs in a worker thread."""

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory or get_local_cache_dir()

    def path_for(self, user_id: str) -> Path:
        safe = _UNSAFE_FILENAME_CHARS.sub("_", user_id) or "_"
        return self._directory / f"{safe}.json"

    async def load(self, user_id: str) -> dict[str, Any] | None:
        path = self.path_for(user_id)

        def _read() -> dict[str, Any] | None:
            if not path.exists():
                return None
            with open(path, encoding="utf-8") as handle:
                return json.load(handle)

        try:
            return await asyncio.to_thread(_read)
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable local cache %s: %s", path, exc)
            return None

    async def save(self, user_id: str, payload: dict[str, Any]) -> None:
        path = self.path_for(user_id)
        temp_path = path.with_name(f"{path.name}.tmp")

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as handle:
                json.dump(payload, handle)
            os.replace(temp_path, path)

        await asyncio.to_thread(_write)


@dataclass(frozen=True)
class SaveResult:
    local: bool
    synced: bool

    def to_dict(self) -> dict[str, bool]:
        return {"local": self.local, "synced": self.synced}


class TripStore:
    """Per-user AppData with local caching, cloud sync and debounced autosave."""

    def __init__(
        self,
        cloud: DocumentStore | None,
        cache: LocalCache | None = None,
        *,
        autosave_delay: float | None = None,
    ) -> None:
        self._cloud = cloud
        self._cache = cache or LocalCache()
        self._autosave_delay = (
            get_autosave_delay_seconds() if autosave_delay is None else autosave_delay
        )
        self._data: dict[str, AppData] = {}
        self._loading: dict[str, asyncio.Task[AppData]] = {}
        self._pending_saves: dict[str, asyncio.Task[SaveResult]] = {}
        self._running_saves: set[asyncio.Task[SaveResult]] = set()

    @property
    def cloud_enabled(self) -> bool:
        return self._cloud is not None

    async def get(self, user_id: str) -> AppData:
        """The user's in-memory AppData, loading it on first access."""
        data = self._data.get(user_id)
        if data is not None:
            return data
        task = self._loading.get(user_id)
        if task is None:
            task = asyncio.create_task(self.load(user_id))
            self._loading[user_id] = task
        try:
            data = await asyncio.shield(task)
        finally:
            if task.done():
                self._loading.pop(user_id, None)
        return self._data.setdefault(user_id, data)

    async def load(self, user_id: str) -> AppData:
        local_payload = await self._cache.load(user_id)

        if self._cloud is not None:
            try:
                cloud_payload = await self._cloud.load(user_id)
            except Exception as exc:
                logger.warning("Cloud load failed for %s, using local cache: %s", user_id, exc)
            else:
                if cloud_payload is not None:
                    data = AppData.model_validate(cloud_payload)
                    await self._cache.save(user_id, data.to_json_dict())
                    return data
                if local_payload is not None:
                    logger.info("No cloud data for %s; uploading local cache", user_id)
                    try:
                        await self._cloud.save(user_id, local_payload)
                    except Exception as exc:
                        logger.warning("Initial cloud upload failed for %s: %s", user_id, exc)

        if local_payload is None:
            return AppData()
        return AppData.model_validate(local_payload)

    async def save(self, user_id: str, data: AppData | None = None) -> SaveResult:
        """Write the user's data locally and, when possible, to the cloud."""
        if data is None:
            data = self._data.get(user_id) or AppData()
        self._data[user_id] = data
        payload = data.to_json_dict()

        await self._cache.save(user_id, payload)
        if self._cloud is None:
            return SaveResult(local=True, synced=False)
        try:
            await self._cloud.save(user_id, payload)
        except Exception as exc:
            logger.warning("Cloud save failed for %s: %s", user_id, exc)
            return SaveResult(local=True, synced=False)
        return SaveResult(local=True, synced=True)

    def schedule_save(self, user_id: str) -> asyncio.Task[SaveResult]:
        """Save after the autosave delay; a newer call replaces a pending one.

        Only a save still waiting out its delay is replaced. Once a save has
        started writing it runs to completion.
        """
        pending = self._pending_saves.pop(user_id, None)
        if pending is not None:
            pending.cancel()
        task = asyncio.create_task(self._delayed_save(user_id))
        task.add_done_callback(functools.partial(self._autosave_done, user_id))
        self._pending_saves[user_id] = task
        return task

    async def _delayed_save(self, user_id: str) -> SaveResult:
        await asyncio.sleep(self._autosave_delay)
        task = asyncio.current_task()
        if self._pending_saves.get(user_id) is task:
            del self._pending_saves[user_id]
        self._running_saves.add(task)
        try:
            return await self.save(user_id)
        finally:
            self._running_saves.discard(task)

    @staticmethod
    def _autosave_done(user_id: str, task: asyncio.Task[SaveResult]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Autosave failed for %s: %s", user_id, exc, exc_info=exc)

    async def flush(self) -> None:
        """Run every pending autosave now and wait for running ones (shutdown)."""
        pending = list(self._pending_saves.items())
        self._pending_saves.clear()
        for user_id, task in pending:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            await self.save(user_id)
        if self._running_saves:
            await asyncio.gather(*self._running_saves, return_exceptions=True)

