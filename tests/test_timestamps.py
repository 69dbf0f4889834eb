"""Unit tests for timestamp helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from rolewatch.utils.timestamps import (
    days_since,
    ensure_utc,
    format_timestamp,
    parse_iso_datetime,
    parse_provider_date,
    utc_now,
)

EXPECTED = datetime(2024, 11, 4, 12, 0, tzinfo=timezone.utc)


class TestUtcHelpers:
    """Tests for utc_now and ensure_utc."""

    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is not None
        assert utc_now().utcoffset() == timedelta(0)

    def test_ensure_utc_naive(self):
        assert ensure_utc(datetime(2024, 11, 4, 12, 0)) == EXPECTED

    def test_ensure_utc_converts_offset(self):
        eastern = timezone(timedelta(hours=-5))
        assert ensure_utc(datetime(2024, 11, 4, 7, 0, tzinfo=eastern)) == EXPECTED

    def test_ensure_utc_none(self):
        assert ensure_utc(None) is None


class TestParseIsoDatetime:
    """Tests for parse_iso_datetime."""

    @pytest.mark.parametrize(
        "value",
        [
            "2024-11-04T12:00:00Z",
            "2024-11-04T12:00:00+00:00",
            "2024-11-04T07:00:00-05:00",
            "2024-11-04T12:00:00",
        ],
    )
    def test_formats(self, value):
        assert parse_iso_datetime(value) == EXPECTED

    def test_fractional_seconds(self):
        assert parse_iso_datetime("2024-11-04T12:00:00.123Z").microsecond == 123000

    def test_date_only(self):
        assert parse_iso_datetime("2024-11-04") == datetime(2024, 11, 4, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday", "2024-13-45"])
    def test_invalid(self, value):
        assert parse_iso_datetime(value) is None


class TestParseProviderDate:
    """Tests for parse_provider_date."""

    def test_epoch_seconds(self):
        assert parse_provider_date(1730721600) == EXPECTED

    def test_epoch_milliseconds(self):
        assert parse_provider_date(1730721600000) == EXPECTED

    def test_digit_strings(self):
        assert parse_provider_date("1730721600") == EXPECTED
        assert parse_provider_date("1730721600000") == EXPECTED

    def test_float_seconds(self):
        assert parse_provider_date(1730721600.0) == EXPECTED

    def test_iso_string(self):
        assert parse_provider_date("2024-11-04T12:00:00Z") == EXPECTED

    def test_datetime_passthrough(self):
        assert parse_provider_date(datetime(2024, 11, 4, 12, 0)) == EXPECTED

    @pytest.mark.parametrize("value", [None, True, False, "not a date", [], {}])
    def test_unparseable(self, value):
        assert parse_provider_date(value) is None

    @pytest.mark.parametrize("value", ["²", "12³"])
    def test_non_ascii_digit_strings(self, value):
        assert parse_provider_date(value) is None


class TestFormatting:
    """Tests for format_timestamp and days_since."""

    def test_format_timestamp(self):
        assert format_timestamp(EXPECTED) == "2024-11-04T12:00:00Z"

    def test_format_timestamp_none(self):
        assert format_timestamp(None) == ""

    def test_days_since(self):
        assert days_since(EXPECTED - timedelta(days=2, hours=12), EXPECTED) == pytest.approx(2.5)

    def test_days_since_future_is_negative(self):
        assert days_since(EXPECTED + timedelta(days=1), EXPECTED) == pytest.approx(-1)

    def test_days_since_none(self):
        assert days_since(None, EXPECTED) is None
