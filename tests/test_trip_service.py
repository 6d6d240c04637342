from datetime import UTC, datetime

import pytest

from core.exceptions import ResourceNotFoundException, ValidationException
from trips.models import AppData, ExpenseCategory, Trip, TripDetails, TripDetailsUpdate
from trips.services import (
    ChecklistService,
    ExpenseService,
    MarkerService,
    TripService,
    record_route_calculation,
)

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)
NOW_MS = 1777636800000


class TestTripService:
    def test_create_puts_trip_first_and_active(self) -> None:
        data = AppData()
        older = TripService.create_trip(data, now=NOW)
        newer = TripService.create_trip(data, now=NOW)

        assert [t.id for t in data.trips] == [newer.id, older.id]
        assert data.active_trip_id == newer.id
        assert newer.created_at == NOW_MS
        assert newer.details == TripDetails()

    def test_get_missing_trip_raises(self) -> None:
        with pytest.raises(ResourceNotFoundException):
            TripService.get_trip(AppData(), "nope")

    def test_delete_active_trip_clears_selection(self) -> None:
        data = AppData()
        keep = TripService.create_trip(data)
        drop = TripService.create_trip(data)

        TripService.delete_trip(data, drop.id)

        assert data.trips == [keep]
        assert data.active_trip_id is None
        assert TripService.active_trip(data) is None

    def test_delete_other_trip_keeps_selection(self) -> None:
        data = AppData()
        other = TripService.create_trip(data)
        active = TripService.create_trip(data)

        TripService.delete_trip(data, other.id)

        assert data.active_trip_id == active.id

    def test_select_trip(self) -> None:
        data = AppData()
        first = TripService.create_trip(data)
        TripService.create_trip(data)

        TripService.select_trip(data, first.id)

        assert TripService.active_trip(data) is first

    def test_update_details_only_touches_given_fields(self) -> None:
        data = AppData()
        trip = TripService.create_trip(data)
        trip.details.distance = "432.1 km"

        TripService.update_details(
            data,
            trip.id,
            TripDetailsUpdate(origin="Sao Paulo", destination="Rio de Janeiro"),
        )
        TripService.update_details(data, trip.id, TripDetailsUpdate(notes="Bring snacks"))

        assert trip.details.origin == "Sao Paulo"
        assert trip.details.destination == "Rio de Janeiro"
        assert trip.details.notes == "Bring snacks"
        assert trip.details.distance == "432.1 km"

    def test_reset_drops_everything(self) -> None:
        data = AppData()
        TripService.create_trip(data)

        TripService.reset(data)

        assert data == AppData()


class TestRecordRouteCalculation:
    def test_first_calculation_sets_total_and_remaining(self) -> None:
        trip = Trip()

        details = record_route_calculation(trip, "520.0 km", "6h 30min", 23400, 520000, now=NOW)

        assert details.distance == "520.0 km"
        assert details.duration == "6h 30min"
        assert details.duration_value == 23400
        assert details.total_distance_value == 520000
        assert details.remaining_distance_value == 520000
        assert details.last_gps_update == NOW_MS

    def test_total_distance_is_write_once(self) -> None:
        trip = Trip(details=TripDetails(total_distance_value=500000, remaining_distance_value=500000))

        record_route_calculation(trip, "600.0 km", "7h 0min", 25200, 600000, now=NOW)

        assert trip.details.total_distance_value == 500000
        assert trip.details.remaining_distance_value == 600000
        assert trip.details.distance == "600.0 km"
        assert trip.details.last_gps_update == NOW_MS

    def test_zero_total_counts_as_unset(self) -> None:
        trip = Trip(details=TripDetails(total_distance_value=0))

        record_route_calculation(trip, "1.0 km", "0min", 50, 1000, now=NOW)

        assert trip.details.total_distance_value == 1000


class TestChecklist:
    def test_add_toggle_delete(self) -> None:
        trip = Trip()

        item = ChecklistService.add_item(trip, "  Passport ", "Documents")
        plain = ChecklistService.add_item(trip, "Water")
        ChecklistService.toggle_item(trip, item.id)

        assert item.text == "Passport"
        assert item.is_completed is True
        assert plain.category == "General"
        assert ChecklistService.completion_percent(trip) == 50.0

        ChecklistService.toggle_item(trip, item.id)
        ChecklistService.delete_item(trip, plain.id)

        assert trip.checklist == [item]
        assert item.is_completed is False

    def test_blank_text_is_rejected(self) -> None:
        with pytest.raises(ValidationException):
            ChecklistService.add_item(Trip(), "   ")

    def test_empty_checklist_is_zero_percent(self) -> None:
        assert ChecklistService.completion_percent(Trip()) == 0.0

    def test_toggle_unknown_item_raises(self) -> None:
        with pytest.raises(ResourceNotFoundException):
            ChecklistService.toggle_item(Trip(), "missing")

    def test_merge_suggestions_skips_blank_entries(self) -> None:
        trip = Trip()

        added = ChecklistService.merge_suggestions(
            trip,
            [
                {"text": "Sunscreen", "category": "Hygiene"},
                {"text": "  "},
                {"text": "Charger", "category": ""},
            ],
        )

        assert [(i.text, i.category) for i in added] == [
            ("Sunscreen", "Hygiene"),
            ("Charger", "General"),
        ]
        assert trip.checklist == added


class TestExpenses:
    def test_totals(self) -> None:
        trip = Trip()
        ExpenseService.add_expense(trip, "Gas", 120.5, ExpenseCategory.FUEL, now=NOW)
        ExpenseService.add_expense(trip, "Toll", 30, ExpenseCategory.TOLL, now=NOW)
        ExpenseService.add_expense(trip, "More gas", 79.5, ExpenseCategory.FUEL, now=NOW)

        assert ExpenseService.total(trip) == 230.0
        assert ExpenseService.totals_by_category(trip) == {"Fuel": 200.0, "Toll": 30.0}
        assert list(ExpenseService.totals_by_category(trip)) == ["Fuel", "Toll"]

    def test_date_defaults_to_now(self) -> None:
        expense = ExpenseService.add_expense(Trip(), "Lunch", 25, ExpenseCategory.FOOD, now=NOW)

        assert expense.date == NOW.isoformat()

    @pytest.mark.parametrize(("description", "amount"), [("", 10), ("Gas", 0), ("Gas", -5)])
    def test_invalid_expense_is_rejected(self, description, amount) -> None:
        trip = Trip()

        with pytest.raises(ValidationException):
            ExpenseService.add_expense(trip, description, amount)

        assert trip.expenses == []

    def test_delete_expense(self) -> None:
        trip = Trip()
        expense = ExpenseService.add_expense(trip, "Hotel", 300, ExpenseCategory.LODGING)

        ExpenseService.delete_expense(trip, expense.id)

        assert ExpenseService.total(trip) == 0


class TestMarkers:
    def test_add_marker_defaults_label(self) -> None:
        trip = Trip()

        marker = MarkerService.add_marker(trip, -22.9, -43.2)

        assert marker.label == "My location"
        assert trip.markers == [marker]

    @pytest.mark.parametrize(("lat", "lng"), [(91, 0), (-91, 0), (0, 181), (0, -180.5)])
    def test_out_of_range_marker_is_rejected(self, lat, lng) -> None:
        with pytest.raises(ValidationException):
            MarkerService.add_marker(Trip(), lat, lng)

    def test_delete_marker(self) -> None:
        trip = Trip()
        marker = MarkerService.add_marker(trip, 1, 2, "Lunch stop")

        MarkerService.delete_marker(trip, marker.id)

        assert trip.markers == []
