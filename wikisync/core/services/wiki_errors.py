"""
Error types for the wiki publishing pipeline.

Traversal and staging errors abort a run.  Read and write errors are
scoped to a single file and are reported without stopping the others.
"""

from __future__ import annotations

from pathlib import Path


class WikiSyncError(Exception):
    """Base class for every pipeline failure."""


class TraversalError(WikiSyncError):
    """The staging root is missing or a directory below it is unreadable."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot walk {self.path}: {reason}")


class ReadError(WikiSyncError):
    """A markdown file could not be read."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        # Set by rewrite_tree when fail_fast stops the walk
        self.report = None
        super().__init__(f"Cannot read {self.path}: {reason}")


class WriteError(WikiSyncError):
    """A rewritten markdown file could not be written back."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        # Set by rewrite_tree when fail_fast stops the walk
        self.report = None
        super().__init__(f"Cannot write {self.path}: {reason}")


class MalformedReferenceError(WikiSyncError):
    """A matched reference is missing the parts needed to rewrite it."""


class StagingError(WikiSyncError):
    """The wiki directory could not be cleared or populated."""
