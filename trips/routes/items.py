"""API routes for a trip's checklist, expenses and map markers."""

import logging

from fastapi import APIRouter

from core.api import UserId, api_route
from core.startup import get_trip_store
from trips.models import ChecklistItemCreate, ExpenseCreate, MarkerCreate
from trips.services.trip_items_service import (
    ChecklistService,
    ExpenseService,
    MarkerService,
)
from trips.services.trip_service import TripService

logger = logging.getLogger(__name__)
router = APIRouter()


async def _load_trip(user_id: str, trip_id: str):
    data = await get_trip_store().get(user_id)
    return TripService.get_trip(data, trip_id)


# ---------------------------------------------------------------------------
# Checklist
# ---------------------------------------------------------------------------


def _checklist_payload(trip) -> dict:
    return {
        "items": [item.to_json_dict() for item in trip.checklist],
        "completion": ChecklistService.completion_percent(trip),
    }


@router.get("/api/trips/{trip_id}/checklist", tags=["Checklist API"])
@api_route(logger)
async def get_checklist(trip_id: str, user_id: UserId):
    return _checklist_payload(await _load_trip(user_id, trip_id))


@router.post("/api/trips/{trip_id}/checklist", tags=["Checklist API"], status_code=201)
@api_route(logger)
async def add_checklist_item(trip_id: str, body: ChecklistItemCreate, user_id: UserId):
    trip = await _load_trip(user_id, trip_id)
    item = ChecklistService.add_item(trip, body.text, body.category)
    get_trip_store().schedule_save(user_id)
    return {"status": "success", "item": item.to_json_dict()}


@router.post("/api/trips/{trip_id}/checklist/{item_id}/toggle", tags=["Checklist API"])
@api_route(logger)
async def toggle_checklist_item(trip_id: str, item_id: str, user_id: UserId):
    trip = await _load_trip(user_id, trip_id)
    item = ChecklistService.toggle_item(trip, item_id)
    get_trip_store().schedule_save(user_id)
    return {"status": "success", "item": item.to_json_dict()}


@router.delete("/api/trips/{trip_id}/checklist/{item_id}", tags=["Checklist API"])
@api_route(logger)
async def delete_checklist_item(trip_id: str, item_id: str, user_id: UserId):
    trip = await _load_trip(user_id, trip_id)
    ChecklistService.delete_item(trip, item_id)
    get_trip_store().schedule_save(user_id)
    return {"status": "success", **_checklist_payload(trip)}


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------


def _expenses_payload(trip) -> dict:
    return {
        "expenses": [expense.to_json_dict() for expense in trip.expenses],
        "total": ExpenseService.total(trip),
        "byCategory": ExpenseService.totals_by_category(trip),
    }


@router.get("/api/trips/{trip_id}/expenses", tags=["Expenses API"])
@api_route(logger)
async def get_expenses(trip_id: str, user_id: UserId):
    return _expenses_payload(await _load_trip(user_id, trip_id))


@router.post("/api/trips/{trip_id}/expenses", tags=["Expenses API"], status_code=201)
@api_route(logger)
async def add_expense(trip_id: str, body: ExpenseCreate, user_id: UserId):
    trip = await _load_trip(user_id, trip_id)
    expense = ExpenseService.add_expense(
        trip,
        body.description,
        body.amount,
        body.category,
        body.date,
    )
    get_trip_store().schedule_save(user_id)
    return {"status": "success", "expense": expense.to_json_dict()}


@router.delete("/api/trips/{trip_id}/expenses/{expense_id}", tags=["Expenses API"])
@api_route(logger)
async def delete_expense(trip_id: str, expense_id: str, user_id: UserId):
    trip = await _load_trip(user_id, trip_id)
    ExpenseService.delete_expense(trip, expense_id)
    get_trip_store().schedule_save(user_id)
    return {"status": "success", **_expenses_payload(trip)}


# ---------------------------------------------------------------------------
# Map markers
# ---------------------------------------------------------------------------


@router.get("/api/trips/{trip_id}/markers", tags=["Markers API"])
@api_route(logger)
async def get_markers(trip_id: str, user_id: UserId):
    trip = await _load_trip(user_id, trip_id)
    return {"markers": [marker.to_json_dict() for marker in trip.markers]}


@router.post("/api/trips/{trip_id}/markers", tags=["Markers API"], status_code=201)
@api_route(logger)
async def add_marker(trip_id: str, body: MarkerCreate, user_id: UserId):
    trip = await _load_trip(user_id, trip_id)
    marker = MarkerService.add_marker(trip, body.lat, body.lng, body.label)
    get_trip_store().schedule_save(user_id)
    return {"status": "success", "marker": marker.to_json_dict()}


@router.delete("/api/trips/{trip_id}/markers/{marker_id}", tags=["Markers API"])
@api_route(logger)
async def delete_marker(trip_id: str, marker_id: str, user_id: UserId):
    trip = await _load_trip(user_id, trip_id)
    MarkerService.delete_marker(trip, marker_id)
    get_trip_store().schedule_save(user_id)
    return {"status": "success"}
