"""
Travel assistant: packing-list suggestions and short travel tips.

The service depends on the :class:`AssistantClient` port ("prompt -> text or
JSON"). :class:`GeminiAssistantClient` is the production adapter, calling the
Gemini ``generateContent`` REST endpoint through the shared aiohttp session.
Without an API key no client is built and the endpoints answer 503.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from config import get_gemini_api_key, get_gemini_base_url, get_gemini_model
from core.exceptions import ExternalServiceException, ServiceUnavailableException
from core.http.request import request_json
from core.http.session import get_session

logger = logging.getLogger(__name__)

CHECKLIST_CATEGORIES = ("Clothes", "Documents", "Car", "Hygiene", "Electronics", "Food")
TIPS_UNAVAILABLE = "Travel tips are not available right now."
TIPS_EMPTY = "No tips available."
TIPS_FAILED = "Could not reach the travel assistant."


class AssistantClient(Protocol):
    async def generate_text(self, prompt: str) -> str | None: ...

    async def generate_json(self, prompt: str, schema: dict[str, Any]) -> Any: ...


class GeminiAssistantClient:
    def __init__(self, api_key: str, model: str | None = None) -> None:
        self._api_key = api_key
        self._model = model or get_gemini_model()

    def _url(self) -> str:
        return f"{get_gemini_base_url()}/models/{self._model}:generateContent"

    async def _generate(self, prompt: str, generation_config: dict[str, Any] | None) -> str | None:
        body: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if generation_config:
            body["generationConfig"] = generation_config
        session = await get_session()
        data = await request_json(
            "POST",
            self._url(),
            session=session,
            json=body,
            headers={"x-goog-api-key": self._api_key},
            service_name="Gemini",
        )
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            return None
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        return text or None

    async def generate_text(self, prompt: str) -> str | None:
        return await self._generate(prompt, None)

    async def generate_json(self, prompt: str, schema: dict[str, Any]) -> Any:
        text = await self._generate(
            prompt,
            {"responseMimeType": "application/json", "responseSchema": schema},
        )
        if not text:
            return None
        return json.loads(text)


_CHECKLIST_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "text": {"type": "STRING", "description": "Item name"},
            "category": {"type": "STRING", "description": "Item category"},
        },
        "required": ["text", "category"],
    },
}


def get_assistant_client() -> AssistantClient | None:
    api_key = get_gemini_api_key()
    if not api_key:
        return None
    return GeminiAssistantClient(api_key)


class TravelAssistantService:
    def __init__(self, client: AssistantClient | None) -> None:
        self._client = client

    @property
    def available(self) -> bool:
        return self._client is not None

    def _require_client(self) -> AssistantClient:
        if self._client is None:
            msg = "Travel assistant is not configured"
            raise ServiceUnavailableException(msg)
        return self._client

    async def generate_smart_checklist(self, destination: str, days: int) -> list[dict[str, str]]:
        """Packing suggestions as ``[{text, category}]``; ``[]`` on any failure."""
        client = self._require_client()
        prompt = (
            f"Generate a list of essential items to bring on a road trip to "
            f"{destination} lasting {days} days. Categorize the items as: "
            f"{', '.join(repr(c) for c in CHECKLIST_CATEGORIES)}. Return JSON only."
        )
        try:
            payload = await client.generate_json(prompt, _CHECKLIST_SCHEMA)
        except (ExternalServiceException, ValueError) as exc:
            logger.warning("Checklist generation failed for %r: %s", destination, exc)
            return []
        except Exception:
            logger.exception("Unexpected checklist generation failure for %r", destination)
            return []

        if not isinstance(payload, list):
            return []
        return [
            {"text": str(entry["text"]), "category": str(entry["category"])}
            for entry in payload
            if isinstance(entry, dict) and entry.get("text") and entry.get("category")
        ]

    async def generate_travel_tips(self, destination: str) -> str:
        """Three short tips for the drive; a fallback sentence on failure."""
        if self._client is None:
            return TIPS_UNAVAILABLE
        prompt = (
            f"Give 3 short, valuable tips for a road trip to {destination}. "
            "Focus on safety or sights along the way."
        )
        try:
            text = await self._client.generate_text(prompt)
        except Exception as exc:
            logger.warning("Travel tips failed for %r: %s", destination, exc)
            return TIPS_FAILED
        return text or TIPS_EMPTY
