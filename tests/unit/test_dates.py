"""Tests for the DD-MM-YYYY boundary format and relative time input."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from attimo.dates import DATE_FORMAT, DATETIME_FORMAT, format_date, is_valid_date, parse_time_input

NOW = datetime(2024, 3, 15, 12, 0, 0)


class TestFormatDate:
    def test_date_and_datetime(self) -> None:
        assert format_date(date(2024, 1, 2)) == "02-01-2024"
        assert format_date(datetime(2024, 12, 31, 23, 59)) == "31-12-2024"

    def test_format_constant(self) -> None:
        assert DATE_FORMAT == "%d-%m-%Y"
        assert datetime(2024, 1, 2, 3, 4, 5).strftime(DATETIME_FORMAT) == "2024-01-02 03:04:05"


class TestIsValidDate:
    @pytest.mark.parametrize("text", ["01-01-2024", "29-02-2024", "31-12-1999"])
    def test_valid(self, text: str) -> None:
        assert is_valid_date(text)

    @pytest.mark.parametrize("text", ["", "1-1-2024", "2024-01-01", "29-02-2023", "32-01-2024", "01-13-2024", "01-01-24"])
    def test_invalid(self, text: str) -> None:
        assert not is_valid_date(text)


class TestParseTimeInput:
    def test_empty_means_today(self) -> None:
        assert parse_time_input("", now=NOW) == "15-03-2024"
        assert parse_time_input("   ", now=NOW) == "15-03-2024"

    def test_minute_offsets(self) -> None:
        assert parse_time_input("+30", now=NOW) == "15-03-2024"
        assert parse_time_input("+720", now=NOW) == "16-03-2024"
        assert parse_time_input("-780", now=NOW) == "14-03-2024"

    def test_explicit_date_passes_through(self) -> None:
        assert parse_time_input(" 01-02-2024 ", now=NOW) == "01-02-2024"

    @pytest.mark.parametrize("text", ["+", "+abc", "--5", "2024-02-01", "tomorrow", "1-2-2024"])
    def test_rejects_unparseable_input(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_time_input(text, now=NOW)
