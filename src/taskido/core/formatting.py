"""Plain-text rendering of tasks and timelines - no I/O dependencies."""

from collections.abc import Iterable
from datetime import date

from .annotations import DateKind, SYMBOL_FOR_KIND
from .tasks import TaskRecord
from .timeline import Counters, DayBucket, Timeline

DATE_VERBS = {
    DateKind.CREATED: "created",
    DateKind.START: "starts",
    DateKind.SCHEDULED: "scheduled",
    DateKind.DUE: "due",
    DateKind.DONE: "done",
}


def relative_label(day: date, today: date) -> str:
    """Human-readable distance from today."""
    days = (day - today).days
    if days == 0:
        return "Today"
    if days == 1:
        return "Tomorrow"
    if days == -1:
        return "Yesterday"
    if days > 0:
        return f"in {days} days"
    return f"{-days} days ago"


def format_task_line(
    task: TaskRecord,
    today: date,
    hide_tags: Iterable[str] = (),
) -> str:
    """
    Format a single task for display in the timeline.

    Pure function - no I/O.
    """
    status = task.status.value if task.status else ""
    parts = [f"[{task.status_marker}] {task.display_text or task.raw_text.strip()}"]

    for kind in DateKind:
        day = task.dates.get(kind)
        if day:
            parts.append(f"{SYMBOL_FOR_KIND[kind]} {DATE_VERBS[kind]} {relative_label(day, today)}")
    if task.recurrence:
        parts.append(f"🔁 {task.recurrence}")
    if task.priority:
        parts.append(f"{task.priority.value} priority")

    location = task.path
    if task.section and task.section.subpath:
        location += task.section.subpath
    parts.append(f"({location})")

    hidden = set(hide_tags)
    tags = [t for t in task.tags if t not in hidden]
    if tags:
        parts.append(" ".join(tags))

    line = "  ".join(parts)
    return f"{status:<10} {line}" if status else line


def format_counters(counters: Counters) -> str:
    return (
        f"Todo {counters.todo} | Overdue {counters.overdue} | "
        f"Unplanned {counters.unplanned}"
    )


def format_day(
    bucket: DayBucket,
    today: date,
    date_format: str,
    hide_tags: Iterable[str] = (),
) -> list[str]:
    lines = []
    header = bucket.date.strftime(date_format)
    if bucket.is_today:
        header += " (today)"
    lines.append(f"## {header}")
    for task in bucket.tasks:
        lines.append(f"  {format_task_line(task, today, hide_tags)}")
    return lines


def format_timeline(
    timeline: Timeline,
    date_format: str = "%a, %b %d",
    hide_tags: Iterable[str] = (),
    today_focus: bool = False,
) -> str:
    """
    Render a timeline as text: year headers, day headers, tasks.

    Days without tasks are skipped, except the entry day which carries
    the counters. today_focus renders only today's bucket.
    """
    hide_tags = list(hide_tags)
    lines: list[str] = []

    for view in timeline.year_views:
        days = [
            d for d in view.days
            if (d.tasks or d.is_entry) and (not today_focus or d.is_today)
        ]
        if not days:
            continue
        if view.task_count and not today_focus:
            lines.append(f"# {view.year}")
        for bucket in days:
            if bucket.is_entry:
                lines.append(format_counters(timeline.counters))
            if bucket.tasks:
                lines.extend(format_day(bucket, timeline.today, date_format, hide_tags))
            lines.append("")

    return "\n".join(lines).rstrip() + "\n"
