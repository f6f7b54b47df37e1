"""Composable task predicates and sorting - no I/O dependencies."""

from collections.abc import Callable, Iterable
from datetime import date, datetime
from typing import Any

from .annotations import DateKind, Priority
from .tasks import Status, TaskRecord

TaskPredicate = Callable[[TaskRecord], bool]

_DATE_FIELDS = {k.value for k in DateKind}


def to_date(value: date | datetime | str) -> date:
    """Reduce a date, datetime or ISO string to day granularity."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def by_exact_date(day: date | datetime | str) -> TaskPredicate:
    """Any date field falls on the given day."""
    target = to_date(day)
    return lambda t: any(d == target for d in t.dates.values())


def by_date_range(
    start: date | datetime | str | None,
    end: date | datetime | str | None,
) -> TaskPredicate:
    """Any date field falls within [start, end]. A None bound is open."""
    lo = to_date(start) if start else None
    hi = to_date(end) if end else None

    def predicate(t: TaskRecord) -> bool:
        return any((lo is None or d >= lo) and (hi is None or d <= hi) for d in t.dates.values())

    return predicate


def by_year(year: int) -> TaskPredicate:
    """Any date field falls in the given year."""
    return lambda t: any(d.year == year for d in t.dates.values())


def by_priority(priorities: Iterable[Priority | str]) -> TaskPredicate:
    """Task priority is one of the given priorities."""
    wanted = {p if isinstance(p, Priority) else Priority(p) for p in priorities}
    return lambda t: t.priority in wanted


def by_status(statuses: Iterable[Status | str]) -> TaskPredicate:
    """Classified status is one of the given statuses."""
    wanted = {s if isinstance(s, Status) else Status(s) for s in statuses}
    return lambda t: t.status in wanted


def by_field(name: str, value: Any) -> TaskPredicate:
    """
    Match a record field against a value.

    'tags' tests membership, 'fm.<key>' reads a front matter key, date
    kinds compare at day granularity, anything else compares for equality.
    """
    if name == "tags":
        return lambda t: value in t.tags
    if name.startswith("fm."):
        key = name[3:]
        return lambda t: t.front_matter.get(key) == value
    if name in _DATE_FIELDS:
        kind = DateKind(name)
        target = to_date(value)
        return lambda t: t.dates.get(kind) == target
    return lambda t: _field_value(t, name) == value


def all_of(*predicates: TaskPredicate) -> TaskPredicate:
    """Boolean AND of predicates. No predicates matches everything."""
    return lambda t: all(p(t) for p in predicates)


def apply_quick_filter(
    tasks: list[TaskRecord],
    start: date | str | None = None,
    end: date | str | None = None,
    priorities: Iterable[Priority | str] = (),
) -> list[TaskRecord]:
    """Date range filter when both bounds are set, then a priority filter."""
    if start and end:
        tasks = [t for t in tasks if by_date_range(start, end)(t)]
    priorities = list(priorities)
    if priorities:
        tasks = [t for t in tasks if by_priority(priorities)(t)]
    return tasks


# ============== Sorting ==============


def _field_value(task: TaskRecord, name: str) -> Any:
    match name:
        case "order":
            return task.order
        case "priority":
            return task.priority.rank if task.priority else None
        case "path":
            return task.path
        case "line":
            return task.line
        case "text":
            return task.display_text.lower()
        case "status":
            return list(Status).index(task.status) if task.status else None
        case "recurrence":
            return task.recurrence or None
        case _ if name in _DATE_FIELDS:
            return task.dates.get(DateKind(name))
        case _:
            raise ValueError(f"Unknown task field: {name}")


def sort_key(expression: str) -> Callable[[TaskRecord], tuple]:
    """
    Build a sort key from an expression like 'order' or 'priority,-due'.

    Each comma-separated field sorts ascending, or descending with a
    leading '-'. Missing values sort last either way.
    """
    fields: list[tuple[str, bool]] = []
    for part in expression.split(","):
        part = part.strip()
        if not part:
            continue
        descending = part.startswith("-")
        name = part.lstrip("-").strip()
        _field_value_check(name)
        fields.append((name, descending))

    def key(task: TaskRecord) -> tuple:
        parts = []
        for name, descending in fields:
            value = _field_value(task, name)
            if value is None:
                parts.append((1,))
            else:
                parts.append((0, _Reversed(value) if descending else value))
        return tuple(parts)

    return key


def sort_tasks(tasks: Iterable[TaskRecord], expression: str = "order") -> list[TaskRecord]:
    """Stable sort; equal keys keep their input order."""
    return sorted(tasks, key=sort_key(expression))


_KNOWN_FIELDS = {"order", "priority", "path", "line", "text", "status", "recurrence"}


def _field_value_check(name: str) -> None:
    if name not in _KNOWN_FIELDS and name not in _DATE_FIELDS:
        raise ValueError(f"Unknown sort field: {name!r}")


class _Reversed:
    """Inverts comparison so a field can sort descending inside a tuple key."""

    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Reversed) and self.value == other.value

    def __lt__(self, other: "_Reversed") -> bool:
        return other.value < self.value
