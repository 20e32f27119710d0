"""
FileOutcome model — the per-file result of a rewrite pass.

The driver records one outcome for every markdown file it visits.
Failures are captured here instead of being raised, so a bad file
never hides the results for the rest of the tree.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class FileOutcome(BaseModel):
    """What happened to a single markdown file."""

    path: str                       # relative to the staging root, "/" separated
    status: Literal["rewritten", "unchanged", "failed"] = "unchanged"
    error: str | None = None

    @property
    def changed(self) -> bool:
        """Whether the file was written back with new content."""
        return self.status == "rewritten"

    @property
    def failed(self) -> bool:
        """Whether the file could not be read or written."""
        return self.status == "failed"
