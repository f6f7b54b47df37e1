"""Pure task domain logic - no I/O dependencies."""

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from .annotations import DateKind, Priority, extract_annotations
from .notes import LinkRef, Position, SectionRef, front_matter_tags

# indentation (incl. blockquotes), list marker, one-char checkbox, body
TASK_RE = re.compile(r"^([\s\t>]*)([-*+]|[0-9]+[.)]) +\[(.)\] *(.*)$")
BLOCK_LINK_RE = re.compile(r" \^[a-zA-Z0-9-]+$")

DONE_MARKER = "x"
CANCELLED_MARKER = "-"
TODO_MARKER = " "


class Status(str, Enum):
    """Temporal status of a task relative to a reference day."""

    OVERDUE = "overdue"
    DUE = "due"
    SCHEDULED = "scheduled"
    START = "start"
    PROCESS = "process"
    UNPLANNED = "unplanned"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class TaskRecord:
    """A checkbox line found in a note."""

    raw_text: str
    display_text: str
    list_marker: str
    status_marker: str
    path: str
    position: Position
    completed: bool = False
    priority: Priority | None = None
    recurrence: str = ""
    dates: dict[DateKind, date] = field(default_factory=dict)
    tags: tuple[str, ...] = ()
    block_id: str = ""
    section: SectionRef | None = None
    outlinks: tuple[LinkRef, ...] = ()
    front_matter: dict[str, Any] = field(default_factory=dict)
    order: int = 0
    status: Status | None = None

    @property
    def due(self) -> date | None:
        return self.dates.get(DateKind.DUE)

    @property
    def scheduled(self) -> date | None:
        return self.dates.get(DateKind.SCHEDULED)

    @property
    def start(self) -> date | None:
        return self.dates.get(DateKind.START)

    @property
    def created(self) -> date | None:
        return self.dates.get(DateKind.CREATED)

    @property
    def done(self) -> date | None:
        return self.dates.get(DateKind.DONE)

    @property
    def line(self) -> int:
        return self.position.start_line

    @property
    def cancelled(self) -> bool:
        return self.status_marker == CANCELLED_MARKER

    @property
    def is_closed(self) -> bool:
        """Completed or cancelled; no temporal status applies."""
        return self.completed or self.cancelled

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "text": self.display_text,
            "raw": self.raw_text,
            "path": self.path,
            "line": self.line,
            "position": self.position.to_dict(),
            "marker": self.status_marker,
            "completed": self.completed,
            "status": self.status.value if self.status else None,
            "priority": self.priority.value if self.priority else None,
            "recurrence": self.recurrence or None,
            "dates": {k.value: v.isoformat() for k, v in self.dates.items()},
            "tags": list(self.tags),
            "block_id": self.block_id or None,
            "section": self.section.heading if self.section else None,
            "order": self.order,
        }


def _order_from(front_matter: dict[str, Any]) -> int:
    value = front_matter.get("order")
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def parse_line(
    line: str,
    path: str,
    section: SectionRef | None = None,
    position: Position | None = None,
    outlinks: tuple[LinkRef, ...] | list[LinkRef] = (),
    front_matter: dict[str, Any] | None = None,
    tags: tuple[str, ...] | list[str] = (),
) -> TaskRecord | None:
    """
    Parse a raw list line into a TaskRecord.

    Returns None when the line is not a markdown checkbox item.
    tags are the note store's cached tags for this line; they are merged
    with inline and front matter tags.

    Pure function - no I/O.
    """
    line = line.rstrip("\r\n")
    match = TASK_RE.match(line)
    if match is None:
        return None

    list_marker = match.group(2)
    status_marker = match.group(3)
    body = match.group(4).strip()

    block_id = ""
    block_match = BLOCK_LINK_RE.search(body)
    if block_match:
        block_id = block_match.group(0).strip()
        body = body[: block_match.start()].strip()

    annotations = extract_annotations(body)

    front_matter = front_matter or {}
    all_tags = [*annotations.tags, *tags, *front_matter_tags(front_matter)]

    if position is None:
        position = Position(0, 0, 0, len(line), 0, len(line))

    return TaskRecord(
        raw_text=line,
        display_text=annotations.text,
        list_marker=list_marker,
        status_marker=status_marker,
        path=path,
        position=position,
        completed=status_marker == DONE_MARKER,
        priority=annotations.priority,
        recurrence=annotations.recurrence,
        dates=annotations.dates,
        tags=tuple(dict.fromkeys(all_tags)),
        block_id=block_id,
        section=section,
        outlinks=tuple(outlinks),
        front_matter=front_matter,
        order=_order_from(front_matter),
    )


def is_task_line(line: str) -> bool:
    """Check if a line matches the checkbox grammar."""
    return TASK_RE.match(line.rstrip("\r\n")) is not None
