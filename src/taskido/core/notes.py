"""Note metadata model - the per-file caches a note store supplies to the parser."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Position:
    """A source span inside a note. Lines and columns are 0-based."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    start_offset: int = 0
    end_offset: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "start_line": self.start_line,
            "start_col": self.start_col,
            "end_line": self.end_line,
            "end_col": self.end_col,
        }


@dataclass(frozen=True)
class SectionRef:
    """A heading section of a note."""

    path: str
    heading: str
    position: Position
    level: int = 0
    kind: str = "heading"

    @property
    def subpath(self) -> str:
        return f"#{self.heading}" if self.heading else ""


@dataclass(frozen=True)
class TagRef:
    """An inline tag found in a note."""

    tag: str
    position: Position


@dataclass(frozen=True)
class LinkRef:
    """An outbound link found in a note."""

    target: str
    position: Position
    display: str = ""


@dataclass(frozen=True)
class ListItem:
    """
    A list item in a note.

    parent is the start line of the enclosing list item, or a negative
    number when the item is top-level. task is the checkbox character,
    or None for a plain list item.
    """

    position: Position
    parent: int = -1
    task: str | None = None


@dataclass
class NoteMetadata:
    """All cached metadata for one note."""

    front_matter: dict[str, Any] = field(default_factory=dict)
    sections: list[SectionRef] = field(default_factory=list)
    tags: list[TagRef] = field(default_factory=list)
    links: list[LinkRef] = field(default_factory=list)
    list_items: list[ListItem] = field(default_factory=list)

    def file_tags(self) -> list[str]:
        """Inline tags plus front matter tags, each with a leading '#'."""
        tags = [t.tag for t in self.tags]
        tags.extend(front_matter_tags(self.front_matter))
        return list(dict.fromkeys(tags))


def _with_sigil(tag: str) -> str:
    tag = tag.strip()
    return tag if tag.startswith("#") else "#" + tag


def front_matter_tags(front_matter: dict[str, Any] | None) -> list[str]:
    """
    Tags declared in front matter, normalized to start with '#'.

    Reads the singular 'tag' string field and the plural 'tags' field,
    which may be a list or a comma/space separated string.
    """
    if not front_matter:
        return []

    tags: list[str] = []
    single = front_matter.get("tag")
    if isinstance(single, str) and single.strip():
        tags.append(_with_sigil(single))

    plural = front_matter.get("tags")
    if isinstance(plural, str):
        plural = plural.replace(",", " ").split()
    if isinstance(plural, (list, tuple)):
        for t in plural:
            if isinstance(t, str) and t.strip():
                tags.append(_with_sigil(t))

    return list(dict.fromkeys(tags))
