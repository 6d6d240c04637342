"""Address autocomplete API."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query

from core.api import api_route
from core.startup import get_navigation

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/places", tags=["places"])


@router.get("/suggest")
@api_route(logger)
async def suggest_places(
    q: Annotated[str, Query(description="Partial place name")] = "",
):
    """Up to five place names matching ``q``; empty for fewer than 3 characters."""
    return {"suggestions": await get_navigation().suggester.suggest(q)}
