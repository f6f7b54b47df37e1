"""Pure text edits for task lines - quick entry and completion toggling."""

import calendar
import re
from datetime import date, timedelta

from .annotations import (
    DONE_SYMBOL,
    DUE_SYMBOL,
    RECURRENCE_SYMBOL,
    SCHEDULED_SYMBOL,
    START_SYMBOL,
)
from .tasks import BLOCK_LINK_RE, DONE_MARKER, TASK_RE, TODO_MARKER

KEYWORD_SYMBOLS = {
    "due": DUE_SYMBOL,
    "start": START_SYMBOL,
    "scheduled": SCHEDULED_SYMBOL,
    "done": DONE_SYMBOL,
    "repeat": RECURRENCE_SYMBOL,
    "recurring": RECURRENCE_SYMBOL,
}

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_KEYWORD_RE = re.compile(r"(?<!\w)(" + "|".join(KEYWORD_SYMBOLS) + r")(?= )")
_RELATIVE_DAY_RE = re.compile(r"(?<!\w)(today|tomorrow|yesterday)(?= )")
_IN_N_RE = re.compile(r"(?<!\w)in\W(\d{1,3})\W(days?|weeks?|months?|years?) ")
_WEEKDAY_RE = re.compile(r"(?<!\w)(" + "|".join(WEEKDAYS) + r")(?= )")
_DONE_TOKEN_RE = re.compile(r"\s*" + DONE_SYMBOL + "\ufe0f?" + r"\s*\d{4}-\d{2}-\d{2}")


def add_months(day: date, months: int) -> date:
    """Calendar month arithmetic, clamping to the last day of the month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def shift(day: date, amount: int, unit: str) -> date:
    """Move a date by amount units (day, week, month or year)."""
    unit = unit.rstrip("s")
    match unit:
        case "day":
            return day + timedelta(days=amount)
        case "week":
            return day + timedelta(weeks=amount)
        case "month":
            return add_months(day, amount)
        case "year":
            return add_months(day, amount * 12)
        case _:
            raise ValueError(f"Unknown date unit: {unit}")


def next_weekday(today: date, name: str) -> date:
    """The named weekday later this week, or in the following week."""
    wanted = WEEKDAYS.index(name) + 1
    monday = today - timedelta(days=today.isoweekday() - 1)
    if today.isoweekday() < wanted:
        return monday + timedelta(days=wanted - 1)
    return monday + timedelta(weeks=1, days=wanted - 1)


def expand_quick_entry(text: str, today: date) -> str:
    """
    Expand shorthand in a typed task into annotation syntax.

    'Pay rent due tomorrow ' -> 'Pay rent 📅 2024-01-16 '
    Keywords are only expanded when followed by a space, so a word still
    being typed is left alone.
    """
    text = _KEYWORD_RE.sub(lambda m: KEYWORD_SYMBOLS[m.group(1)], text)

    relative = {
        "today": today,
        "tomorrow": today + timedelta(days=1),
        "yesterday": today - timedelta(days=1),
    }
    text = _RELATIVE_DAY_RE.sub(lambda m: relative[m.group(1)].isoformat(), text)

    text = _IN_N_RE.sub(
        lambda m: shift(today, int(m.group(1)), m.group(2)).isoformat() + " ",
        text,
    )
    text = _WEEKDAY_RE.sub(lambda m: next_weekday(today, m.group(1)).isoformat(), text)
    return text


def new_task_line(text: str) -> str:
    """Build a markdown task line from task text."""
    text = text.strip()
    if not text:
        raise ValueError("Task text is required")
    return f"- [ ] {text}"


def toggle_line(line: str, today: date) -> str:
    """
    Toggle completion of a raw task line.

    Open (or any custom marker) -> [x] with a done date appended.
    Completed -> [ ] with its done date removed.
    """
    line = line.rstrip("\r\n")
    match = TASK_RE.match(line)
    if match is None:
        raise ValueError(f"Not a task line: {line!r}")

    prefix = line[: match.start(3)]
    rest = line[match.end(3):]

    if match.group(3) == DONE_MARKER:
        return prefix + TODO_MARKER + _DONE_TOKEN_RE.sub("", rest)

    rest = rest.rstrip()
    stamp = f" {DONE_SYMBOL} {today.isoformat()}"
    block = BLOCK_LINK_RE.search(rest)
    if block:
        return prefix + DONE_MARKER + rest[: block.start()] + stamp + rest[block.start():]
    return prefix + DONE_MARKER + rest + stamp
