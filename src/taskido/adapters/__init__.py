"""Adapters - I/O implementations of ports."""

from .file_vault import FileVault, NoteNotFoundError, build_metadata

__all__ = [
    "FileVault",
    "NoteNotFoundError",
    "build_metadata",
]
