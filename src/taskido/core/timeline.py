"""Timeline aggregation - pure bucketing and counting, no I/O dependencies."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime

from .filters import by_exact_date, by_year, sort_tasks
from .status import DEFAULT_STATUS_ORDER, classify_all
from .tasks import Status, TaskRecord

ENTRY_POSITIONS = ("today", "top", "bottom")
COUNTER_NAMES = ("todo", "overdue", "unplanned", "done", "cancelled")


@dataclass(frozen=True)
class TimelineOptions:
    """Settings threaded through one aggregation pass."""

    status_order: tuple[Status, ...] = DEFAULT_STATUS_ORDER
    sort: str = "order"
    forward: bool = False
    entry_position: str = "today"


@dataclass
class Counters:
    """Global counters. todo is the complement of the other four."""

    todo: int = 0
    overdue: int = 0
    unplanned: int = 0
    done: int = 0
    cancelled: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "todo": self.todo,
            "overdue": self.overdue,
            "unplanned": self.unplanned,
            "done": self.done,
            "cancelled": self.cancelled,
        }


@dataclass
class DayBucket:
    """Tasks associated with one calendar day."""

    date: date
    tasks: list[TaskRecord] = field(default_factory=list)
    is_today: bool = False
    is_entry: bool = False

    @property
    def key(self) -> str:
        return self.date.isoformat()

    @property
    def statuses(self) -> list[Status]:
        """Distinct statuses present, in first-seen order."""
        return list(dict.fromkeys(t.status for t in self.tasks if t.status))


@dataclass
class YearView:
    """One year of the timeline."""

    year: int
    days: list[DayBucket] = field(default_factory=list)
    statuses: list[Status] = field(default_factory=list)
    task_count: int = 0


@dataclass
class Timeline:
    """The aggregated view of one task list snapshot."""

    today: date
    tasks: list[TaskRecord]
    years: list[int]
    year_views: list[YearView]
    counters: Counters
    entry_date: date

    @property
    def day_buckets(self) -> dict[str, list[TaskRecord]]:
        """Date string to tasks, in date order."""
        return {day.key: day.tasks for view in self.year_views for day in view.days}

    def bucket(self, day: date | str) -> DayBucket | None:
        key = day if isinstance(day, str) else day.isoformat()
        for view in self.year_views:
            for bucket in view.days:
                if bucket.key == key:
                    return bucket
        return None


def involved_dates(tasks: Sequence[TaskRecord], today: date) -> list[date]:
    """Every date any task carries, plus today, sorted ascending."""
    dates = {today}
    for t in tasks:
        dates.update(t.dates.values())
    return sorted(dates)


def count_statuses(tasks: Sequence[TaskRecord]) -> Counters:
    """Counters over classified tasks."""
    overdue = sum(1 for t in tasks if t.status == Status.OVERDUE)
    unplanned = sum(1 for t in tasks if t.status == Status.UNPLANNED)
    done = sum(1 for t in tasks if t.status == Status.DONE)
    cancelled = sum(1 for t in tasks if t.status == Status.CANCELLED)
    total = len(tasks)
    return Counters(
        todo=total - (unplanned + done + cancelled + overdue),
        overdue=overdue,
        unplanned=unplanned,
        done=done,
        cancelled=cancelled,
        total=total,
    )


def _entry_date(dates: list[date], today: date, position: str) -> date:
    if position == "top":
        return dates[0]
    if position == "bottom":
        return dates[-1]
    return today


def aggregate(
    tasks: Sequence[TaskRecord],
    today: date | datetime,
    options: TimelineOptions | None = None,
) -> Timeline:
    """
    Bucket tasks into years and days and compute counters.

    Always a full recompute from the given snapshot. today is always a
    bucket, so an empty task list still yields one year and one day.

    Pure function - no I/O.
    """
    options = options or TimelineOptions()
    if isinstance(today, datetime):
        today = today.date()

    classified = classify_all(tasks, today, options.status_order)
    dates = involved_dates(classified, today)
    years = list(range(dates[0].year, dates[-1].year + 1))
    entry = _entry_date(dates, today, options.entry_position)

    year_views = []
    for year in years:
        tasks_of_year = [t for t in classified if by_year(year)(t)]
        view = YearView(
            year=year,
            statuses=list(dict.fromkeys(t.status for t in tasks_of_year)),
            task_count=len(tasks_of_year),
        )
        for day in (d for d in dates if d.year == year):
            day_tasks = [t for t in tasks_of_year if by_exact_date(day)(t)]
            if options.forward and day != today:
                day_tasks = [t for t in day_tasks if t.status != Status.OVERDUE]
            elif options.forward:
                # Overdue tasks move to today
                day_tasks += [
                    t for t in classified
                    if t.status == Status.OVERDUE and not by_exact_date(day)(t)
                ]
            view.days.append(
                DayBucket(
                    date=day,
                    tasks=sort_tasks(day_tasks, options.sort),
                    is_today=day == today,
                    is_entry=day == entry,
                )
            )
        year_views.append(view)

    return Timeline(
        today=today,
        tasks=classified,
        years=years,
        year_views=year_views,
        counters=count_statuses(classified),
        entry_date=entry,
    )


def select_counter(timeline: Timeline, name: str) -> list[TaskRecord]:
    """Tasks behind one of the counters."""
    excluded = {Status.OVERDUE, Status.UNPLANNED, Status.DONE, Status.CANCELLED}
    match name:
        case "todo":
            return [t for t in timeline.tasks if t.status not in excluded]
        case "overdue" | "unplanned" | "done" | "cancelled":
            return [t for t in timeline.tasks if t.status == Status(name)]
        case _:
            raise ValueError(f"Unknown counter: {name}")
