"""Beanie ODM document models for MongoDB collections.

Usage:
    from db.models import UserTripsDocument

    doc = await UserTripsDocument.find_one(UserTripsDocument.user_id == "abc")
    doc.trips = [...]
    await doc.save()
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator

from date_utils import parse_timestamp


class UserTripsDocument(Document):
    """All trips of one user, stored as a single document (cloud copy of AppData)."""

    user_id: Indexed(str, unique=True)
    trips: list[dict[str, Any]] = Field(default_factory=list)
    active_trip_id: str | None = None
    updated_at: datetime | None = None

    @field_validator("updated_at", mode="before")
    @classmethod
    def parse_updated_at(cls, v: Any) -> datetime | None:
        if v is None:
            return None
        return parse_timestamp(v)

    class Settings:
        name = "user_trips"


# List of all document models for Beanie initialization
ALL_DOCUMENT_MODELS = [
    UserTripsDocument,
]
