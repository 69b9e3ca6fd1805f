"""Tests for the strict SGS payload parsers.

Covers exact DD/MM/YYYY date handling (leap years, out-of-range fields,
loose formats) and invariant decimal parsing.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from breconomy.exceptions import (
    EmptySeriesError,
    InvalidDateError,
    InvalidValueError,
    PayloadError,
)
from breconomy.parsing import (
    format_reference_date,
    parse_decimal,
    parse_latest_point,
    parse_reference_date,
)


class TestParseReferenceDate:
    """Exact-format DD/MM/YYYY parsing to UTC midnight."""

    def test_valid_date_is_utc_midnight(self) -> None:
        result = parse_reference_date("27/01/2026")
        assert result == datetime(2026, 1, 27, tzinfo=timezone.utc)
        assert result.utcoffset().total_seconds() == 0
        assert (result.hour, result.minute, result.second) == (0, 0, 0)

    @pytest.mark.parametrize("year", [2000, 2020, 2024, 2028])
    def test_feb_29_accepted_in_leap_years(self, year: int) -> None:
        result = parse_reference_date(f"29/02/{year}")
        assert (result.year, result.month, result.day) == (year, 2, 29)

    @pytest.mark.parametrize("year", [1900, 2023, 2025, 2026])
    def test_feb_29_rejected_in_common_years(self, year: int) -> None:
        with pytest.raises(InvalidDateError):
            parse_reference_date(f"29/02/{year}")

    @pytest.mark.parametrize(
        "raw",
        ["32/01/2026", "00/01/2026", "15/13/2026", "15/00/2026", "31/04/2026"],
    )
    def test_out_of_range_fields_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidDateError):
            parse_reference_date(raw)

    @pytest.mark.parametrize(
        "raw",
        [
            "2026-01-27",
            "1/2/2026",
            "27/1/2026",
            "27/01/26",
            " 27/01/2026",
            "27.01.2026",
            "",
            "\u0662\u0667/\u0660\u0661/\u0662\u0660\u0662\u0666",
        ],
    )
    def test_loose_formats_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidDateError):
            parse_reference_date(raw)

    def test_non_string_rejected(self) -> None:
        with pytest.raises(InvalidDateError):
            parse_reference_date(None)  # type: ignore[arg-type]

    def test_format_back_to_source_form(self) -> None:
        assert format_reference_date(datetime(2026, 3, 5, tzinfo=timezone.utc)) == "05/03/2026"


class TestParseDecimal:
    """Invariant-culture decimal parsing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("11.25", Decimal("11.25")),
            ("5.4310", Decimal("5.4310")),
            ("-0.12", Decimal("-0.12")),
            ("0", Decimal("0")),
            ("1e-3", Decimal("0.001")),
            (" 4.5 ", Decimal("4.5")),
        ],
    )
    def test_valid_values(self, raw: str, expected: Decimal) -> None:
        assert parse_decimal(raw) == expected

    def test_precision_is_preserved(self) -> None:
        result = parse_decimal("0.045513")
        assert isinstance(result, Decimal)
        assert str(result) == "0.045513"

    @pytest.mark.parametrize(
        "raw",
        [
            "abc",
            "11,25",
            "1.000,50",
            "NaN",
            "Infinity",
            "",
            "1_000",
            "\u0661\u0661.\u0662\u0665",
            None,
            11.25,
        ],
    )
    def test_invalid_values_rejected(self, raw) -> None:
        with pytest.raises(InvalidValueError):
            parse_decimal(raw)

    @pytest.mark.parametrize("raw", ["1e400", "-1e400", "1E+309"])
    def test_values_beyond_double_range_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidValueError, match="out of range"):
            parse_decimal(raw)

    def test_tiny_exponent_still_accepted(self) -> None:
        assert parse_decimal("1e-400") == Decimal("1e-400")


class TestParseLatestPoint:
    """Validation of the whole upstream payload."""

    def test_first_element_is_used(self) -> None:
        point = parse_latest_point(
            [{"data": "27/01/2026", "valor": "11.25"}, {"data": "26/01/2026", "valor": "11.00"}]
        )
        assert point.value == Decimal("11.25")
        assert point.reference_date == datetime(2026, 1, 27, tzinfo=timezone.utc)
        assert point.raw_date == "27/01/2026"

    @pytest.mark.parametrize("payload", [[], None, {}, "[]"])
    def test_empty_or_absent_series(self, payload) -> None:
        with pytest.raises(EmptySeriesError):
            parse_latest_point(payload)

    def test_non_object_element(self) -> None:
        with pytest.raises(PayloadError):
            parse_latest_point(["27/01/2026"])

    def test_bad_value_reported_before_date(self) -> None:
        with pytest.raises(InvalidValueError):
            parse_latest_point([{"data": "99/99/2026", "valor": "abc"}])

    def test_bad_date(self) -> None:
        with pytest.raises(InvalidDateError):
            parse_latest_point([{"data": "2026-01-27", "valor": "11.25"}])

    def test_missing_fields(self) -> None:
        with pytest.raises(InvalidValueError):
            parse_latest_point([{"data": "27/01/2026"}])
        with pytest.raises(InvalidDateError):
            parse_latest_point([{"valor": "11.25"}])
