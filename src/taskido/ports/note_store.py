"""Note store interface."""

from typing import Protocol

from taskido.core.notes import NoteMetadata


class NoteStore(Protocol):
    """Interface for reading notes and writing task edits back to them."""

    def list_notes(self) -> list[str]:
        """List note paths, relative to the store root."""
        ...

    def exists(self, path: str) -> bool:
        """Check if a note exists."""
        ...

    def read(self, path: str) -> str:
        """Read note content. Raises NoteNotFoundError if missing."""
        ...

    def metadata(self, path: str, content: str) -> NoteMetadata:
        """Build the metadata caches for a note's content."""
        ...

    def append_task(self, path: str, line: str, section: str) -> None:
        """Insert a task line under a section heading, creating the note if needed."""
        ...

    def replace_line(self, path: str, line_no: int, new_line: str) -> None:
        """Rewrite one line (0-based) of a note."""
        ...
