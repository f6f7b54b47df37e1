"""Temporal status classification - no I/O dependencies."""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace
from datetime import date, datetime

from .tasks import Status, TaskRecord

DEFAULT_STATUS_ORDER: tuple[Status, ...] = (
    Status.OVERDUE,
    Status.DUE,
    Status.SCHEDULED,
    Status.START,
    Status.PROCESS,
    Status.UNPLANNED,
    Status.DONE,
    Status.CANCELLED,
)


def _is_done(task: TaskRecord, today: date) -> bool:
    return task.completed and not task.cancelled


def _is_cancelled(task: TaskRecord, today: date) -> bool:
    return task.cancelled


def _is_overdue(task: TaskRecord, today: date) -> bool:
    return not task.is_closed and task.due is not None and task.due < today


def _is_due(task: TaskRecord, today: date) -> bool:
    return not task.is_closed and task.due is not None and task.due == today


def _is_scheduled(task: TaskRecord, today: date) -> bool:
    return not task.is_closed and task.scheduled is not None and task.scheduled <= today


def _is_start(task: TaskRecord, today: date) -> bool:
    return not task.is_closed and task.start is not None and task.start <= today


def _is_process(task: TaskRecord, today: date) -> bool:
    if task.is_closed or not task.dates:
        return False
    return not (
        _is_overdue(task, today)
        or _is_due(task, today)
        or _is_scheduled(task, today)
        or _is_start(task, today)
    )


def _is_unplanned(task: TaskRecord, today: date) -> bool:
    return not task.is_closed and not task.dates


PREDICATES: dict[Status, Callable[[TaskRecord, date], bool]] = {
    Status.OVERDUE: _is_overdue,
    Status.DUE: _is_due,
    Status.SCHEDULED: _is_scheduled,
    Status.START: _is_start,
    Status.PROCESS: _is_process,
    Status.UNPLANNED: _is_unplanned,
    Status.DONE: _is_done,
    Status.CANCELLED: _is_cancelled,
}


def normalize_status_order(order: Iterable[Status | str]) -> tuple[Status, ...]:
    """
    Convert a user-supplied status order to Status members.

    Raises ValueError for unknown names or duplicates.
    """
    result: list[Status] = []
    for item in order:
        status = item if isinstance(item, Status) else Status(str(item).strip().lower())
        if status in result:
            raise ValueError(f"Duplicate status in order: {status.value}")
        result.append(status)
    return tuple(result)


def _as_date(today: date | datetime) -> date:
    return today.date() if isinstance(today, datetime) else today


def classify(
    task: TaskRecord,
    today: date | datetime,
    status_order: Sequence[Status] = DEFAULT_STATUS_ORDER,
) -> Status:
    """
    Derive a task's status. The first status in status_order whose
    predicate holds wins; falls through to unplanned.

    Pure function - no I/O.
    """
    today = _as_date(today)
    for status in status_order:
        if PREDICATES[status](task, today):
            return status
    return Status.UNPLANNED


def classify_all(
    tasks: Iterable[TaskRecord],
    today: date | datetime,
    status_order: Sequence[Status] = DEFAULT_STATUS_ORDER,
) -> list[TaskRecord]:
    """Return copies of tasks with status filled in for this pass."""
    today = _as_date(today)
    return [replace(t, status=classify(t, today, status_order)) for t in tasks]
