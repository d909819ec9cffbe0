"""Tests for timeparse — relative and until parsing, input validation."""
from __future__ import annotations

from datetime import datetime

import pytest

from errors import ParseErrorKind, ParseFailure
from timeparse import U32_MAX, is_valid_input, parse_relative, parse_time_in, parse_until


class TestParseRelative:
    @pytest.mark.parametrize("text, expected", [
        ("1:02:03", 3723),
        ("90", 90),
        ("10:00", 600),
        ("0", 0),
        ("1:30", 90),
        ("0:0:5", 5),
        ("1:00:00:00", 216000),
        ("007", 7),
    ])
    def test_fields_fold_right_to_left(self, text: str, expected: int) -> None:
        assert parse_relative(text) == expected

    def test_fields_are_not_range_checked(self) -> None:
        assert parse_relative("1:75") == 135

    @pytest.mark.parametrize("text", ["1:xx", "", "1:", ":5", "-5", "+5", " 5", "1.5", "1_0", "a"])
    def test_malformed_field(self, text: str) -> None:
        with pytest.raises(ParseFailure) as info:
            parse_relative(text)
        assert info.value.kind is ParseErrorKind.INVALID_NUMBER
        assert info.value.text == text

    def test_largest_u32_fits(self) -> None:
        assert parse_relative(str(U32_MAX)) == U32_MAX

    def test_overflow(self) -> None:
        with pytest.raises(ParseFailure) as info:
            parse_relative(str(U32_MAX + 1))
        assert info.value.kind is ParseErrorKind.OVERFLOW

    def test_huge_field_is_overflow(self) -> None:
        with pytest.raises(ParseFailure) as info:
            parse_relative("9" * 5000)
        assert info.value.kind is ParseErrorKind.OVERFLOW
        assert len(str(info.value)) < 200

    def test_huge_minutes_field_is_overflow(self) -> None:
        with pytest.raises(ParseFailure) as info:
            parse_relative("9" * 5000 + ":00")
        assert info.value.kind is ParseErrorKind.OVERFLOW

    def test_leading_zeros_do_not_count(self) -> None:
        assert parse_relative("0" * 5000 + "5") == 5

    def test_many_fields_overflow(self) -> None:
        with pytest.raises(ParseFailure) as info:
            parse_relative("1" + ":0" * 100)
        assert info.value.kind is ParseErrorKind.OVERFLOW

    def test_parse_failure_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_relative("x")


class TestParseUntil:
    NOW = datetime(2024, 5, 1, 12, 0, 0)

    def test_later_today(self) -> None:
        assert parse_until("18:30", self.NOW) == 6 * 3600 + 30 * 60

    def test_full_hms(self) -> None:
        assert parse_until("12:00:45", self.NOW) == 45

    def test_hour_only(self) -> None:
        # 08:00 already passed, so tomorrow
        assert parse_until("8", self.NOW) == 20 * 3600

    def test_earlier_rolls_to_tomorrow(self) -> None:
        assert parse_until("11:59:59", self.NOW) == 24 * 3600 - 1

    def test_current_second_is_zero(self) -> None:
        assert parse_until("12:00:00", self.NOW) == 0

    def test_keeps_sub_second_part_of_now(self) -> None:
        now = datetime(2024, 5, 1, 12, 0, 0, 700000)
        assert parse_until("12:00:10", now) == 10

    def test_midnight(self) -> None:
        assert parse_until("0", self.NOW) == 12 * 3600

    def test_defaults_to_current_time(self) -> None:
        seconds = parse_until("0:0:0")
        assert 0 <= seconds <= 24 * 3600

    @pytest.mark.parametrize("text", ["24", "12:60", "12:00:60", "99:99"])
    def test_out_of_range(self, text: str) -> None:
        with pytest.raises(ParseFailure) as info:
            parse_until(text, self.NOW)
        assert info.value.kind is ParseErrorKind.INVALID_CLOCK_FIELD

    @pytest.mark.parametrize("text", ["9" * 5000, "12:" + "9" * 5000, "0" * 5000 + "99"])
    def test_huge_field(self, text: str) -> None:
        with pytest.raises(ParseFailure) as info:
            parse_until(text, self.NOW)
        assert info.value.kind is ParseErrorKind.INVALID_CLOCK_FIELD

    def test_leading_zeros_do_not_count(self) -> None:
        assert parse_until("0" * 5000 + "18", self.NOW) == 6 * 3600

    @pytest.mark.parametrize("text", ["", "ab", "12:xx", "1:2:3:4", "-1", "12:"])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(ParseFailure) as info:
            parse_until(text, self.NOW)
        assert info.value.kind is ParseErrorKind.INVALID_CLOCK_FIELD


class TestParseTimeIn:
    def test_dispatches_on_until(self) -> None:
        now = datetime(2024, 5, 1, 12, 0, 0)
        assert parse_time_in("13", until=False, now=now) == 13
        assert parse_time_in("13", until=True, now=now) == 3600


class TestIsValidInput:
    def test_time_field(self) -> None:
        assert is_valid_input("10:00", colon_allowed=True)
        assert is_valid_input("90", colon_allowed=True)
        assert not is_valid_input("10:0a", colon_allowed=True)
        assert not is_valid_input("", colon_allowed=True)

    def test_step_field(self) -> None:
        assert is_valid_input("3", colon_allowed=False)
        assert not is_valid_input("1:0", colon_allowed=False)
        assert not is_valid_input("-1", colon_allowed=False)
