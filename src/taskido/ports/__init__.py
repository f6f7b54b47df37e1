"""Ports - interfaces/protocols for external dependencies."""

from .note_store import NoteStore

__all__ = [
    "NoteStore",
]
