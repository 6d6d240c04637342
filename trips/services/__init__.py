"""Trip services module."""

from trips.services.trip_items_service import (
    ChecklistService,
    ExpenseService,
    MarkerService,
)
from trips.services.trip_service import TripService, record_route_calculation

__all__ = (
    "ChecklistService",
    "ExpenseService",
    "MarkerService",
    "TripService",
    "record_route_calculation",
)
