"""Tests for quick entry and completion toggling."""

from datetime import date

import pytest

from taskido.core.editing import (
    add_months,
    expand_quick_entry,
    new_task_line,
    next_weekday,
    shift,
    toggle_line,
)


# 2024-01-15 is a Monday
@pytest.fixture
def today():
    return date(2024, 1, 15)


class TestDateMath:
    def test_add_months_clamps(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_add_months_crosses_year(self):
        assert add_months(date(2024, 12, 15), 1) == date(2025, 1, 15)
        assert add_months(date(2024, 1, 15), -1) == date(2023, 12, 15)

    def test_shift_units(self, today):
        assert shift(today, 3, "days") == date(2024, 1, 18)
        assert shift(today, 1, "week") == date(2024, 1, 22)
        assert shift(today, 2, "months") == date(2024, 3, 15)
        assert shift(today, 1, "year") == date(2025, 1, 15)

    def test_shift_unknown_unit(self, today):
        with pytest.raises(ValueError):
            shift(today, 1, "fortnight")

    def test_next_weekday(self, today):
        assert next_weekday(today, "friday") == date(2024, 1, 19)
        assert next_weekday(today, "sunday") == date(2024, 1, 21)
        # Same weekday means next week
        assert next_weekday(today, "monday") == date(2024, 1, 22)


class TestExpandQuickEntry:
    def test_due_tomorrow(self, today):
        assert expand_quick_entry("Pay rent due tomorrow ", today) == "Pay rent 📅 2024-01-16 "

    def test_in_n_units(self, today):
        assert expand_quick_entry("Gym due in 2 weeks ", today) == "Gym 📅 2024-01-29 "

    def test_weekday(self, today):
        assert expand_quick_entry("Standup scheduled friday ", today) == "Standup ⏳ 2024-01-19 "

    def test_every_occurrence(self, today):
        result = expand_quick_entry("due today and start today ", today)
        assert result == "📅 2024-01-15 and 🛫 2024-01-15 "

    def test_recurrence_keyword(self, today):
        assert expand_quick_entry("Water repeat every week ", today) == "Water 🔁 every week "

    def test_word_still_being_typed(self, today):
        assert expand_quick_entry("Pay due", today) == "Pay due"

    def test_whole_words_only(self, today):
        assert expand_quick_entry("overdue restart ", today) == "overdue restart "


class TestNewTaskLine:
    def test_builds_line(self):
        assert new_task_line("  Buy milk ") == "- [ ] Buy milk"

    def test_empty_text(self):
        with pytest.raises(ValueError):
            new_task_line("   ")


class TestToggleLine:
    def test_open_to_done(self, today):
        assert toggle_line("- [ ] Buy milk", today) == "- [x] Buy milk ✅ 2024-01-15"

    def test_done_stamp_goes_before_block_id(self, today):
        assert toggle_line("- [ ] Buy milk ^abc", today) == "- [x] Buy milk ✅ 2024-01-15 ^abc"

    def test_done_to_open(self, today):
        assert toggle_line("- [x] Buy milk ✅ 2024-01-10", today) == "- [ ] Buy milk"

    def test_keeps_indent_and_custom_marker(self, today):
        assert toggle_line("  * [/] half", today) == "  * [x] half ✅ 2024-01-15"

    def test_toggle_twice_restores_line(self, today):
        line = "1. [ ] Call 📅 2024-01-20"
        assert toggle_line(toggle_line(line, today), today) == line

    def test_not_a_task(self, today):
        with pytest.raises(ValueError, match="Not a task line"):
            toggle_line("just text", today)
