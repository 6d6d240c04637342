"""Checklist, expense and map marker operations on a single trip."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime

from core.exceptions import ResourceNotFoundException, ValidationException
from date_utils import get_current_utc_time
from trips.models import (
    ChecklistItem,
    Expense,
    ExpenseCategory,
    MapMarker,
    Trip,
)

logger = logging.getLogger(__name__)

DEFAULT_CHECKLIST_CATEGORY = "General"
DEFAULT_MARKER_LABEL = "My location"


def _find(items, item_id: str, kind: str):
    for item in items:
        if item.id == item_id:
            return item
    msg = f"{kind} {item_id} not found"
    raise ResourceNotFoundException(msg, {"id": item_id})


class ChecklistService:
    @staticmethod
    def add_item(trip: Trip, text: str, category: str | None = None) -> ChecklistItem:
        if not text or not text.strip():
            msg = "Checklist item text must not be blank"
            raise ValidationException(msg)
        item = ChecklistItem(
            text=text.strip(),
            category=(category or "").strip() or DEFAULT_CHECKLIST_CATEGORY,
        )
        trip.checklist.append(item)
        return item

    @staticmethod
    def toggle_item(trip: Trip, item_id: str) -> ChecklistItem:
        item = _find(trip.checklist, item_id, "Checklist item")
        item.is_completed = not item.is_completed
        return item

    @staticmethod
    def delete_item(trip: Trip, item_id: str) -> None:
        trip.checklist.remove(_find(trip.checklist, item_id, "Checklist item"))

    @staticmethod
    def completion_percent(trip: Trip) -> float:
        if not trip.checklist:
            return 0.0
        done = sum(1 for item in trip.checklist if item.is_completed)
        return done / len(trip.checklist) * 100

    @staticmethod
    def merge_suggestions(trip: Trip, suggestions: list[dict[str, str]]) -> list[ChecklistItem]:
        """Append generated ``{text, category}`` suggestions, skipping blank ones."""
        added: list[ChecklistItem] = []
        for suggestion in suggestions:
            text = str(suggestion.get("text") or "").strip()
            if not text:
                continue
            item = ChecklistItem(
                text=text,
                category=str(suggestion.get("category") or "").strip()
                or DEFAULT_CHECKLIST_CATEGORY,
            )
            trip.checklist.append(item)
            added.append(item)
        return added


class ExpenseService:
    @staticmethod
    def add_expense(
        trip: Trip,
        description: str,
        amount: float,
        category: ExpenseCategory = ExpenseCategory.OTHER,
        date: str | None = None,
        now: datetime | None = None,
    ) -> Expense:
        if not description or not description.strip():
            msg = "Expense description must not be blank"
            raise ValidationException(msg)
        if amount is None or amount <= 0:
            msg = "Expense amount must be positive"
            raise ValidationException(msg, {"amount": amount})
        expense = Expense(
            description=description.strip(),
            amount=amount,
            category=category,
            date=date or (now or get_current_utc_time()).isoformat(),
        )
        trip.expenses.append(expense)
        return expense

    @staticmethod
    def delete_expense(trip: Trip, expense_id: str) -> None:
        trip.expenses.remove(_find(trip.expenses, expense_id, "Expense"))

    @staticmethod
    def total(trip: Trip) -> float:
        return sum(expense.amount for expense in trip.expenses)

    @staticmethod
    def totals_by_category(trip: Trip) -> dict[str, float]:
        """Sum per category, in category order, omitting categories with no spend."""
        sums: dict[ExpenseCategory, float] = defaultdict(float)
        for expense in trip.expenses:
            sums[expense.category] += expense.amount
        return {
            category.value: sums[category]
            for category in ExpenseCategory
            if sums.get(category, 0) > 0
        }


class MarkerService:
    @staticmethod
    def add_marker(trip: Trip, lat: float, lng: float, label: str | None = None) -> MapMarker:
        if not -90.0 <= lat <= 90.0 or not -180.0 <= lng <= 180.0:
            msg = f"Invalid marker coordinate ({lat}, {lng})"
            raise ValidationException(msg)
        marker = MapMarker(
            lat=lat,
            lng=lng,
            label=(label or "").strip() or DEFAULT_MARKER_LABEL,
        )
        trip.markers.append(marker)
        return marker

    @staticmethod
    def delete_marker(trip: Trip, marker_id: str) -> None:
        trip.markers.remove(_find(trip.markers, marker_id, "Marker"))
