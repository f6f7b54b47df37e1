"""File-based note store adapter - a directory of markdown notes."""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any

import frontmatter
import yaml
from frontmatter.default_handlers import YAMLHandler

from taskido.core.annotations import TAG_RE
from taskido.core.notes import LinkRef, ListItem, NoteMetadata, Position, SectionRef, TagRef
from taskido.core.tasks import TASK_RE

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
LIST_ITEM_RE = re.compile(r"^([ \t>]*)([-*+]|[0-9]+[.)])( +|$)")
FENCE_RE = re.compile(r"^\s*(```|~~~)")
INLINE_CODE_RE = re.compile(r"`[^`]*`")
WIKILINK_RE = re.compile(r"\[\[([^\]|#]+)(?:#[^\]|]*)?(?:\|([^\]]+))?\]\]")
MD_LINK_RE = re.compile(r"(?<!!)\[([^\]]*)\]\(([^)\s]+)\)")


class NoteNotFoundError(FileNotFoundError):
    """Raised when a note does not exist in the vault."""

    pass


def _split_lines(content: str) -> tuple[list[str], str]:
    """Split on '\\n' only, returning the lines and the note's line ending."""
    newline = "\r\n" if "\r\n" in content else "\n"
    return [l.rstrip("\r") for l in content.split("\n")], newline


class FileVault:
    """
    File-based note store.

    Implements NoteStore protocol. Paths are vault-relative, '/'-separated.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root).expanduser()

    def _path(self, path: str) -> Path:
        return self.root / path

    def list_notes(self) -> list[str]:
        """List markdown notes, skipping hidden directories."""
        if not self.root.is_dir():
            logger.warning(f"Vault directory not found: {self.root}")
            return []
        notes = []
        for p in self.root.rglob("*.md"):
            rel = p.relative_to(self.root)
            if any(part.startswith(".") for part in rel.parts):
                continue
            if p.is_file():
                notes.append(rel.as_posix())
        return sorted(notes)

    def exists(self, path: str) -> bool:
        return self._path(path).is_file()

    def read(self, path: str) -> str:
        """Note content with its line endings untouched."""
        full = self._path(path)
        if not full.is_file():
            raise NoteNotFoundError(f"No such note: {path}")
        try:
            with open(full, encoding="utf-8", newline="") as f:
                return f.read()
        except UnicodeDecodeError:
            with open(full, encoding="utf-8", errors="replace", newline="") as f:
                return f.read()

    def metadata(self, path: str, content: str) -> NoteMetadata:
        return build_metadata(path, content)

    def append_task(self, path: str, line: str, section: str) -> None:
        """
        Insert a task line right after the section heading.

        A missing note is created with the heading and the task. A note
        without the heading gets both appended at the end.
        """
        if not self.exists(path):
            logger.info(f"Creating {path} for new task")
            self._write(path, f"{section}\n{line}\n" if section else f"{line}\n")
            return

        lines, newline = _split_lines(self.read(path))
        if section and section in lines:
            lines.insert(lines.index(section) + 1, line)
        else:
            while lines and lines[-1] == "":
                lines.pop()
            if section:
                lines.append(section)
            lines.extend([line, ""])
        self._write(path, newline.join(lines))

    def replace_line(self, path: str, line_no: int, new_line: str) -> None:
        lines, newline = _split_lines(self.read(path))
        if not 0 <= line_no < len(lines):
            raise ValueError(f"Line {line_no} out of range for {path}")
        lines[line_no] = new_line.rstrip("\r\n")
        self._write(path, newline.join(lines))

    def _write(self, path: str, content: str) -> None:
        """Atomic write: temp file + rename. Line endings are written as given."""
        full = self._path(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=full.parent, prefix=".tmp_", suffix=".md")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, full)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise


# ============== Metadata Cache ==============


def parse_front_matter(content: str, path: str = "") -> tuple[dict[str, Any], int]:
    """
    Parse a leading '---' YAML block.

    Returns (data, number of lines consumed). Malformed YAML is logged
    and treated as empty. A block without a closing fence is not
    front matter.
    """
    handler = YAMLHandler()
    if not handler.detect(content):
        return {}, 0
    try:
        _, body = handler.split(content)
    except ValueError:
        return {}, 0
    # The split leaves the rest of the closing fence line at the start of body
    consumed = content[: len(content) - len(body)].count("\n") + 1

    try:
        data, _ = frontmatter.parse(content, handler=handler)
    except yaml.YAMLError as e:
        logger.warning(f"Invalid front matter in {path}: {e}")
        return {}, consumed
    return data, consumed


def _span(line_no: int, offsets: list[int], start: int, end: int) -> Position:
    return Position(line_no, start, line_no, end, offsets[line_no] + start, offsets[line_no] + end)


def _blank_code(line: str) -> str:
    """Blank out inline code spans, keeping columns stable."""
    return INLINE_CODE_RE.sub(lambda m: " " * len(m.group(0)), line)


def build_metadata(path: str, content: str) -> NoteMetadata:
    """
    Build the caches a note store supplies for one note: front matter,
    headings, inline tags, links and list items with their positions.
    """
    # Lines are numbered by '\n' only, the same way edits are written back
    raw_lines = content.split("\n")
    lines = [l.rstrip("\r") for l in raw_lines]
    offsets = []
    offset = 0
    for raw in raw_lines:
        offsets.append(offset)
        offset += len(raw) + 1

    front_matter, body_start = parse_front_matter(content, path)
    meta = NoteMetadata(front_matter=front_matter)

    in_fence = False
    # (indent width, start line) of open list items
    stack: list[tuple[int, int]] = []

    for i in range(body_start, len(lines)):
        line = lines[i]
        if FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue

        heading = HEADING_RE.match(line)
        if heading:
            stack.clear()
            meta.sections.append(
                SectionRef(
                    path=path,
                    heading=heading.group(2),
                    position=_span(i, offsets, 0, len(line)),
                    level=len(heading.group(1)),
                )
            )
            continue

        scan = _blank_code(line)
        for m in TAG_RE.finditer(scan):
            meta.tags.append(TagRef(tag=m.group(1), position=_span(i, offsets, m.start(1), m.end(1))))
        for m in WIKILINK_RE.finditer(scan):
            meta.links.append(
                LinkRef(target=m.group(1).strip(), position=_span(i, offsets, m.start(), m.end()), display=m.group(2) or "")
            )
        for m in MD_LINK_RE.finditer(scan):
            meta.links.append(LinkRef(target=m.group(2), position=_span(i, offsets, m.start(), m.end()), display=m.group(1)))

        item = LIST_ITEM_RE.match(line)
        if item:
            indent = len(item.group(1).expandtabs(4))
            while stack and stack[-1][0] >= indent:
                stack.pop()
            parent = stack[-1][1] if stack else -1
            task = TASK_RE.match(line)
            meta.list_items.append(
                ListItem(
                    position=_span(i, offsets, 0, len(line)),
                    parent=parent,
                    task=task.group(3) if task else None,
                )
            )
            stack.append((indent, i))
        elif line.strip() and not line[:1].isspace():
            # Unindented prose ends the current list
            stack.clear()

    return meta
