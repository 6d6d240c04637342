"""
Device position sources.

A :class:`LocationSource` hands out :class:`PositionWatch` handles. A watch is
an async iterator of :class:`PositionFix` values that raises
:class:`DeviceLocationError` when the device reports an error, and that ends
as soon as :meth:`PositionWatch.cancel` is called.

:class:`PushLocationSource` is fed from the outside (the tracking endpoints
post fixes into it), which is how a browser or phone streams its position to
this service.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from core.exceptions import DeviceLocationError, DeviceLocationUnavailableError
from navigation.models import PositionFix

logger = logging.getLogger(__name__)


class PositionWatch(Protocol):
    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...

    def __aiter__(self) -> PositionWatch: ...

    async def __anext__(self) -> PositionFix: ...


class LocationSource(Protocol):
    def watch(self) -> PositionWatch:
        """Open a subscription; raises DeviceLocationUnavailableError."""
        ...


_CANCELLED = object()


class QueuePositionWatch:
    """Subscription backed by an asyncio queue of fixes and errors."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def push(self, item: PositionFix | DeviceLocationError) -> None:
        if self._cancelled:
            logger.debug("Dropping position update for cancelled watch")
            return
        self._queue.put_nowait(item)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._queue.put_nowait(_CANCELLED)

    def __aiter__(self) -> QueuePositionWatch:
        return self

    async def __anext__(self) -> PositionFix:
        if self._cancelled:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CANCELLED or self._cancelled:
            raise StopAsyncIteration
        if isinstance(item, DeviceLocationError):
            raise item
        return item  # type: ignore[return-value]


class PushLocationSource:
    """Location source whose fixes are pushed in by the caller.

    ``available`` mirrors whether the device granted location access; a
    source that is not available refuses to open a watch.
    """

    def __init__(self, *, available: bool = True) -> None:
        self.available = available
        self._watch: QueuePositionWatch | None = None

    def watch(self) -> QueuePositionWatch:
        if not self.available:
            msg = "Location is not available on this device"
            raise DeviceLocationUnavailableError(msg)
        if self._watch is not None:
            self._watch.cancel()
        self._watch = QueuePositionWatch()
        return self._watch

    @property
    def watching(self) -> bool:
        return self._watch is not None and not self._watch.cancelled

    def publish(self, fix: PositionFix) -> bool:
        """Deliver a fix to the open watch; False when nobody is watching."""
        if not self.watching:
            return False
        self._watch.push(fix)
        return True

    def publish_error(self, message: str) -> bool:
        if not self.watching:
            return False
        self._watch.push(DeviceLocationError(message))
        return True
