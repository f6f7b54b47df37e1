"""Functional core - pure business logic with no I/O."""

from .annotations import Annotations, DateKind, Priority, extract_annotations
from .notes import LinkRef, ListItem, NoteMetadata, Position, SectionRef, TagRef
from .tasks import Status, TaskRecord, parse_line
from .status import DEFAULT_STATUS_ORDER, classify, classify_all, normalize_status_order
from .filters import (
    all_of,
    apply_quick_filter,
    by_date_range,
    by_exact_date,
    by_field,
    by_priority,
    by_status,
    by_year,
    sort_tasks,
)
from .timeline import Counters, DayBucket, Timeline, TimelineOptions, YearView, aggregate, select_counter
from .editing import expand_quick_entry, new_task_line, toggle_line
from .formatting import format_task_line, format_timeline

__all__ = [
    # Annotations
    "Annotations",
    "DateKind",
    "Priority",
    "extract_annotations",
    # Notes
    "LinkRef",
    "ListItem",
    "NoteMetadata",
    "Position",
    "SectionRef",
    "TagRef",
    # Tasks
    "Status",
    "TaskRecord",
    "parse_line",
    # Status
    "DEFAULT_STATUS_ORDER",
    "classify",
    "classify_all",
    "normalize_status_order",
    # Filters
    "all_of",
    "apply_quick_filter",
    "by_date_range",
    "by_exact_date",
    "by_field",
    "by_priority",
    "by_status",
    "by_year",
    "sort_tasks",
    # Timeline
    "Counters",
    "DayBucket",
    "Timeline",
    "TimelineOptions",
    "YearView",
    "aggregate",
    "select_counter",
    # Editing
    "expand_quick_entry",
    "new_task_line",
    "toggle_line",
    # Formatting
    "format_task_line",
    "format_timeline",
]
