"""Tests for timeline aggregation."""

from datetime import date, datetime

import pytest

from taskido.core.status import DEFAULT_STATUS_ORDER
from taskido.core.tasks import Status, parse_line
from taskido.core.timeline import (
    TimelineOptions,
    aggregate,
    count_statuses,
    involved_dates,
    select_counter,
)


@pytest.fixture
def today():
    return date(2024, 1, 15)


def task(line: str, **kwargs):
    return parse_line(line, "Tasks.md", **kwargs)


@pytest.fixture
def sample_tasks():
    return [
        task("- [ ] Rent 📅 2024-01-10"),
        task("- [ ] Call 📅 2024-01-15"),
        task("- [ ] Trip ⏳ 2024-02-01 🔺"),
        task("- [ ] Someday"),
        task("- [x] Report ✅ 2024-01-12"),
        task("- [-] Party 📅 2024-01-20"),
        task("- [ ] Renew 🛫 2023-12-01 📅 2025-01-05"),
    ]


class TestEmpty:
    def test_empty_list_still_has_today(self):
        today = date(2024, 3, 1)
        timeline = aggregate([], today)

        assert timeline.years == [2024]
        assert timeline.day_buckets == {"2024-03-01": []}
        assert timeline.counters.to_dict() == {
            "todo": 0, "overdue": 0, "unplanned": 0, "done": 0, "cancelled": 0,
        }
        assert timeline.entry_date == today
        assert timeline.bucket(today).is_today

    def test_accepts_datetime(self):
        timeline = aggregate([], datetime(2024, 3, 1, 9, 0))
        assert timeline.today == date(2024, 3, 1)


class TestBuckets:
    def test_years_cover_all_dates(self, sample_tasks, today):
        timeline = aggregate(sample_tasks, today)
        assert timeline.years == [2023, 2024, 2025]

    def test_years_are_contiguous(self):
        tasks = [task("- [ ] old 📅 2021-05-01"), task("- [ ] new 📅 2024-05-01")]
        timeline = aggregate(tasks, date(2024, 1, 1))
        assert timeline.years == [2021, 2022, 2023, 2024]
        empty_year = timeline.year_views[1]
        assert empty_year.year == 2022
        assert empty_year.days == []
        assert empty_year.task_count == 0

    def test_day_keys_in_date_order(self, sample_tasks, today):
        keys = list(aggregate(sample_tasks, today).day_buckets)
        assert keys == sorted(keys)
        assert keys[0] == "2023-12-01"
        assert "2024-01-15" in keys

    def test_task_appears_on_every_date(self, sample_tasks, today):
        timeline = aggregate(sample_tasks, today)
        assert [t.display_text for t in timeline.bucket("2023-12-01").tasks] == ["Renew"]
        assert [t.display_text for t in timeline.bucket("2025-01-05").tasks] == ["Renew"]

    def test_undated_tasks_are_only_counted(self, sample_tasks, today):
        timeline = aggregate(sample_tasks, today)
        bucketed = {t.display_text for tasks in timeline.day_buckets.values() for t in tasks}
        assert "Someday" not in bucketed
        assert timeline.counters.unplanned == 1

    def test_bucket_statuses(self, sample_tasks, today):
        timeline = aggregate(sample_tasks, today)
        assert timeline.bucket(today).statuses == [Status.DUE]

    def test_year_view_statuses(self, sample_tasks, today):
        view = aggregate(sample_tasks, today).year_views[0]
        assert view.year == 2023
        assert view.statuses == [Status.START]
        assert view.task_count == 1

    def test_same_day_sorted_by_order(self, today):
        tasks = [
            task("- [ ] later 📅 2024-01-20", front_matter={"order": 5}),
            task("- [ ] sooner 📅 2024-01-20", front_matter={"order": 1}),
        ]
        bucket = aggregate(tasks, today).bucket("2024-01-20")
        assert [t.display_text for t in bucket.tasks] == ["sooner", "later"]

    def test_custom_sort(self, today):
        tasks = [
            task("- [ ] low 📅 2024-01-20 🔽"),
            task("- [ ] high 📅 2024-01-20 ⏫"),
        ]
        options = TimelineOptions(sort="priority")
        bucket = aggregate(tasks, today, options).bucket("2024-01-20")
        assert [t.display_text for t in bucket.tasks] == ["high", "low"]

    def test_involved_dates_include_today(self, today):
        assert involved_dates([task("- [ ] a 📅 2024-01-01")], today) == [date(2024, 1, 1), today]


class TestCounters:
    def test_counts(self, sample_tasks, today):
        counters = aggregate(sample_tasks, today).counters
        assert counters.overdue == 1
        assert counters.unplanned == 1
        assert counters.done == 1
        assert counters.cancelled == 1
        assert counters.todo == 3
        assert counters.total == 7

    def test_conservation(self, sample_tasks, today):
        c = aggregate(sample_tasks, today).counters
        assert c.todo + c.overdue + c.unplanned + c.done + c.cancelled == c.total

    def test_counts_follow_status_order(self, today):
        tasks = [task("- [ ] late 📅 2024-01-01")]
        options = TimelineOptions(status_order=(Status.DUE, Status.DONE))
        counters = aggregate(tasks, today, options).counters
        assert counters.overdue == 0
        assert counters.unplanned == 1
        assert counters.todo == 0

    def test_default_options_use_default_order(self):
        assert TimelineOptions().status_order == DEFAULT_STATUS_ORDER

    def test_count_statuses_on_unclassified(self):
        counters = count_statuses([task("- [ ] a")])
        assert counters.total == 1
        assert counters.todo == 1

    def test_select_counter(self, sample_tasks, today):
        timeline = aggregate(sample_tasks, today)
        assert [t.display_text for t in select_counter(timeline, "overdue")] == ["Rent"]
        assert [t.display_text for t in select_counter(timeline, "todo")] == ["Call", "Trip", "Renew"]

    def test_select_unknown_counter(self, sample_tasks, today):
        with pytest.raises(ValueError):
            select_counter(aggregate(sample_tasks, today), "later")


class TestOptions:
    def test_forward_moves_overdue_to_today(self, sample_tasks, today):
        timeline = aggregate(sample_tasks, today, TimelineOptions(forward=True))
        assert timeline.bucket("2024-01-10").tasks == []
        assert [t.display_text for t in timeline.bucket(today).tasks] == ["Call", "Rent"]

    def test_forward_off_keeps_overdue_on_its_day(self, sample_tasks, today):
        timeline = aggregate(sample_tasks, today)
        assert [t.display_text for t in timeline.bucket("2024-01-10").tasks] == ["Rent"]

    @pytest.mark.parametrize(
        "position,expected",
        [
            ("today", date(2024, 1, 15)),
            ("top", date(2023, 12, 1)),
            ("bottom", date(2025, 1, 5)),
        ],
    )
    def test_entry_position(self, sample_tasks, today, position, expected):
        timeline = aggregate(sample_tasks, today, TimelineOptions(entry_position=position))
        assert timeline.entry_date == expected
        entries = [b for v in timeline.year_views for b in v.days if b.is_entry]
        assert [b.date for b in entries] == [expected]

    def test_full_recompute(self, sample_tasks):
        first = aggregate(sample_tasks, date(2024, 1, 9))
        second = aggregate(sample_tasks, date(2024, 1, 11))
        assert first.counters.overdue == 0
        assert second.counters.overdue == 1
