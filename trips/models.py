"""Pydantic models for trips and the trip API.

Stored and transferred data uses camelCase keys (``startDate``,
``totalDistanceValue``...), so every model serializes by alias; Python code
uses the snake_case attribute names.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def new_id() -> str:
    return uuid.uuid4().hex


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class TripDetails(CamelModel):
    origin: str = ""
    destination: str = ""
    start_date: str = ""  # ISO 8601, may be naive
    notes: str = ""
    distance: str | None = None  # formatted, e.g. "520.0 km"
    duration: str | None = None  # formatted, e.g. "6h 30min"
    duration_value: float | None = None  # seconds

    # Route/GPS progress
    total_distance_value: float | None = None  # meters, first calculation only
    remaining_distance_value: float | None = None  # meters, every calculation
    last_gps_update: int | None = None  # epoch milliseconds


class ChecklistItem(CamelModel):
    id: str = Field(default_factory=new_id)
    text: str
    is_completed: bool = False
    category: str = "General"


class ExpenseCategory(str, Enum):
    FUEL = "Fuel"
    FOOD = "Food"
    LODGING = "Lodging"
    TOLL = "Toll"
    OTHER = "Other"


class Expense(CamelModel):
    id: str = Field(default_factory=new_id)
    description: str
    amount: float
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: str = ""


class MapMarker(CamelModel):
    id: str = Field(default_factory=new_id)
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    label: str = "My location"


class Trip(CamelModel):
    id: str = Field(default_factory=new_id)
    created_at: int = 0  # epoch milliseconds
    details: TripDetails = Field(default_factory=TripDetails)
    checklist: list[ChecklistItem] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    markers: list[MapMarker] = Field(default_factory=list)


class AppData(CamelModel):
    """Everything one user owns; the unit of load/save."""

    trips: list[Trip] = Field(default_factory=list)
    active_trip_id: str | None = None


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class TripDetailsUpdate(CamelModel):
    """Partial update of the user-editable detail fields."""

    origin: str | None = None
    destination: str | None = None
    start_date: str | None = None
    notes: str | None = None


class ChecklistItemCreate(CamelModel):
    text: str
    category: str | None = None


class ChecklistSuggestRequest(CamelModel):
    days: int = Field(default=5, ge=1, le=60)


class ExpenseCreate(CamelModel):
    description: str
    amount: float
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: str | None = None


class MarkerCreate(CamelModel):
    lat: float
    lng: float
    label: str | None = None
