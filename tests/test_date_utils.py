from datetime import UTC, datetime, timedelta, timezone

from date_utils import get_current_utc_time, parse_timestamp, to_epoch_millis


def test_parse_timestamp_handles_empty_and_invalid() -> None:
    assert parse_timestamp("") is None
    assert parse_timestamp(None) is None
    assert parse_timestamp("not-a-date") is None


def test_parse_timestamp_keeps_offset() -> None:
    parsed = parse_timestamp("2024-01-01T00:00:00-05:00")
    assert parsed is not None
    assert parsed.utcoffset() == timedelta(hours=-5)
    assert parsed == datetime(2024, 1, 1, 5, 0, tzinfo=UTC)


def test_parse_timestamp_treats_naive_input_as_utc() -> None:
    """Start dates from a datetime-local field carry no zone."""
    parsed = parse_timestamp("2026-05-01T08:00")
    assert parsed == datetime(2026, 5, 1, 8, 0, tzinfo=UTC)


def test_parse_timestamp_handles_datetime_input() -> None:
    aware = datetime(2024, 5, 15, 10, 30, 0, tzinfo=timezone(timedelta(hours=2)))
    assert parse_timestamp(aware) is aware
    assert parse_timestamp(datetime(2024, 5, 15, 10, 30)).tzinfo == UTC


def test_get_current_utc_time_returns_utc() -> None:
    now = get_current_utc_time()
    assert now.tzinfo == UTC
    assert isinstance(now, datetime)


def test_to_epoch_millis() -> None:
    assert to_epoch_millis(datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)) == 1000
    assert to_epoch_millis(datetime(1970, 1, 1, 0, 0, 1)) == 1000
