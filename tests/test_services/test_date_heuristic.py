"""Tests for serial/formatted date conversion."""

from datetime import date, datetime

import pytest

from excel_file_manager.services.date_heuristic import (
    date_to_serial,
    format_date,
    is_formatted_date,
    is_serial_date,
    parse_formatted_date,
    serial_to_date,
)


class TestSerialConversion:
    def test_serial_to_date(self) -> None:
        assert serial_to_date(45000) == date(2023, 3, 15)

    def test_fraction_drops_time_of_day(self) -> None:
        assert serial_to_date(45000.75) == date(2023, 3, 15)

    def test_date_to_serial_is_integral_for_midnight(self) -> None:
        assert date_to_serial(date(2023, 3, 15)) == 45000.0

    def test_unix_epoch(self) -> None:
        assert date_to_serial(date(1970, 1, 1)) == 25569.0

    def test_datetime_keeps_time_fraction(self) -> None:
        assert date_to_serial(datetime(2023, 3, 15, 12)) == pytest.approx(45000.5)

    def test_out_of_range_serial_rejected(self) -> None:
        with pytest.raises(ValueError):
            serial_to_date(-1)


class TestIsSerialDate:
    @pytest.mark.parametrize("value", [45000.5, 0.25, 1.0001])
    def test_positive_fractions_are_dates(self, value: float) -> None:
        assert is_serial_date(value) is True

    @pytest.mark.parametrize(
        "value", [7, 45000, 0, -3.5, float("nan"), float("inf"), True, "45000.5", None]
    )
    def test_other_values_are_not_dates(self, value: object) -> None:
        assert is_serial_date(value) is False

    def test_half_is_misread_as_date(self) -> None:
        """Known limitation: a genuine 0.5 reads as the epoch day."""
        assert is_serial_date(0.5) is True
        assert format_date(serial_to_date(0.5)) == "Dec 30, 1899"


class TestFormattedDates:
    def test_format_date(self) -> None:
        assert format_date(date(2023, 3, 15)) == "Mar 15, 2023"
        assert format_date(date(2024, 12, 1)) == "Dec 1, 2024"

    def test_parse_formatted_date(self) -> None:
        assert parse_formatted_date("Mar 15, 2023") == date(2023, 3, 15)

    def test_month_is_case_insensitive(self) -> None:
        assert parse_formatted_date("mar 15, 2023") == date(2023, 3, 15)

    @pytest.mark.parametrize(
        "text",
        ["Feb 30, 2024", "Foo 1, 2024", "March 15, 2023", "Mar 15 2023", " Mar 15, 2023", ""],
    )
    def test_rejects_invalid_text(self, text: str) -> None:
        assert parse_formatted_date(text) is None
        assert is_formatted_date(text) is False
