"""Inline task annotations - dates, priority, recurrence and tags.

Annotations are single-glyph sigils placed anywhere in a task body:

    - [ ] Water plants 🔁 every week 🛫 2024-01-01 📅 2024-01-08 ⏫ #home

They are stripped in a single pass over the sigil positions, so any order
and any subset is accepted. Anything not recognized is left in the text.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class DateKind(str, Enum):
    """The kinds of date a task can carry."""

    CREATED = "created"
    START = "start"
    SCHEDULED = "scheduled"
    DUE = "due"
    DONE = "done"


class Priority(str, Enum):
    """Task priority, highest first."""

    HIGHEST = "highest"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    LOWEST = "lowest"

    @property
    def rank(self) -> int:
        """1 for highest through 5 for lowest."""
        return list(Priority).index(self) + 1


DUE_SYMBOL = "📅"
SCHEDULED_SYMBOL = "⏳"
START_SYMBOL = "🛫"
DONE_SYMBOL = "✅"
CREATED_SYMBOL = "➕"
RECURRENCE_SYMBOL = "🔁"
TAG_SIGIL = "#"

DATE_SYMBOLS: dict[str, DateKind] = {
    DUE_SYMBOL: DateKind.DUE,
    "📆": DateKind.DUE,
    "🗓": DateKind.DUE,
    SCHEDULED_SYMBOL: DateKind.SCHEDULED,
    "⌛": DateKind.SCHEDULED,
    START_SYMBOL: DateKind.START,
    DONE_SYMBOL: DateKind.DONE,
    CREATED_SYMBOL: DateKind.CREATED,
}

PRIORITY_SYMBOLS: dict[str, Priority] = {
    "🔺": Priority.HIGHEST,
    "⏫": Priority.HIGH,
    "🔼": Priority.MEDIUM,
    "🔽": Priority.LOW,
    "⏬": Priority.LOWEST,
}

# Canonical sigil to write for each date kind
SYMBOL_FOR_KIND: dict[DateKind, str] = {
    DateKind.DUE: DUE_SYMBOL,
    DateKind.SCHEDULED: SCHEDULED_SYMBOL,
    DateKind.START: START_SYMBOL,
    DateKind.DONE: DONE_SYMBOL,
    DateKind.CREATED: CREATED_SYMBOL,
}

_ALL_SIGILS = sorted([*DATE_SYMBOLS, *PRIORITY_SYMBOLS, RECURRENCE_SYMBOL], key=len, reverse=True)

# A sigil may be followed by an emoji variation selector
SIGIL_RE = re.compile("(" + "|".join(re.escape(s) for s in _ALL_SIGILS) + ")\ufe0f?")
DATE_ARG_RE = re.compile(r"\s*(\d{4}-\d{2}-\d{2})(?!\d)")
# At least one non-digit in the body, so "#123" issue references are not tags
TAG_RE = re.compile(r"(?<!\S)(#(?=[\w/-]*[^\W\d])[\w/-]+)")


@dataclass
class Annotations:
    """Everything recognized in a task body, plus the cleaned text."""

    text: str
    dates: dict[DateKind, date] = field(default_factory=dict)
    priority: Priority | None = None
    recurrence: str = ""
    tags: list[str] = field(default_factory=list)


def parse_date(value: str) -> date | None:
    """Parse a YYYY-MM-DD string, returning None for impossible dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def find_tags(text: str) -> list[str]:
    """Inline tags in order of appearance, without duplicates."""
    return list(dict.fromkeys(TAG_RE.findall(text)))


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def extract_annotations(body: str) -> Annotations:
    """
    Strip recognized annotation tokens from a task body.

    Pure function - no I/O. Never raises on malformed input: a date sigil
    followed by something that is not a valid date stays in the text.
    """
    matches = list(SIGIL_RE.finditer(body))
    removals: list[tuple[int, int]] = []
    dates: dict[DateKind, date] = {}
    priority: Priority | None = None
    recurrence = ""

    for i, m in enumerate(matches):
        sigil = m.group(1)
        next_start = matches[i + 1].start() if i + 1 < len(matches) else len(body)

        if sigil in DATE_SYMBOLS:
            arg = DATE_ARG_RE.match(body, m.end())
            if not arg:
                continue
            parsed = parse_date(arg.group(1))
            if parsed is None:
                continue
            # Last occurrence of a kind wins
            dates[DATE_SYMBOLS[sigil]] = parsed
            removals.append((m.start(), arg.end()))

        elif sigil in PRIORITY_SYMBOLS:
            priority = PRIORITY_SYMBOLS[sigil]
            removals.append((m.start(), m.end()))

        else:
            # Recurrence runs to the next sigil or inline tag
            segment = body[m.end():next_start]
            tag = TAG_RE.search(segment)
            if tag:
                segment = segment[: tag.start()]
            rule = segment.strip()
            if not rule:
                continue
            recurrence = rule
            removals.append((m.start(), m.end() + len(segment)))

    if removals:
        pieces = []
        cursor = 0
        for start, end in removals:
            pieces.append(body[cursor:start])
            cursor = end
        pieces.append(body[cursor:])
        text = collapse_whitespace(" ".join(pieces))
    else:
        text = body.strip()

    return Annotations(
        text=text,
        dates=dates,
        priority=priority,
        recurrence=recurrence,
        tags=find_tags(text),
    )
