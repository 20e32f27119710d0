"""
Wiki file operations — enumerate staged pages and rewrite them in place.

One file at a time: read, rewrite images then links, write back only
when the text changed.  A file that cannot be read or written is
logged and recorded as failed; the walk carries on with the next one.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from wikisync.core.models.outcome import FileOutcome
from wikisync.core.services.md_rewrite import rewrite_text
from wikisync.core.services.wiki_errors import ReadError, TraversalError, WriteError

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"


# ── Enumeration ─────────────────────────────────────────────────────


def iter_markdown_files(root: Path) -> Iterator[Path]:
    """Yield every ``*.md`` file below ``root``, at any depth.

    The suffix check is case-sensitive.  Directories are walked in
    sorted order so the sequence is stable between runs.

    Raises:
        TraversalError: If ``root`` is missing, is not a directory, or
            a directory below it cannot be listed.
    """
    root = Path(root)
    if not root.exists():
        raise TraversalError(root, "directory does not exist")
    if not root.is_dir():
        raise TraversalError(root, "not a directory")

    def _on_error(err: OSError) -> None:
        raise TraversalError(err.filename or root, err.strerror or str(err)) from err

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames.sort()
        for name in sorted(filenames):
            if not name.endswith(MARKDOWN_SUFFIX):
                continue
            path = Path(dirpath) / name
            if path.is_file():
                yield path


def file_dir_of(path: Path, staging_root: Path) -> str:
    """Directory of ``path`` relative to ``staging_root``, "/" separated.

    A file directly in the root gives ``"."``.
    """
    return Path(path).parent.relative_to(staging_root).as_posix()


# ── Single file ─────────────────────────────────────────────────────


def rewrite_file(path: Path, staging_root: Path, base_url: str) -> bool:
    """Rewrite one staged markdown file in place.

    Args:
        path: The file to rewrite.
        staging_root: Root of the staged tree, used to locate ``path``.
        base_url: Root URL of the hosted wiki images.

    Returns:
        True if the file content changed and was written back.

    Raises:
        ReadError: If the file cannot be read as UTF-8 text.
        WriteError: If the rewritten text cannot be written back.
    """
    try:
        # newline="" keeps CRLF pages as CRLF
        with path.open(encoding="utf-8", newline="") as fh:
            original = fh.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(path, str(e)) from e

    rewritten = rewrite_text(original, file_dir_of(path, staging_root), base_url)
    if rewritten == original:
        return False

    try:
        path.write_text(rewritten, encoding="utf-8", newline="")
    except OSError as e:
        raise WriteError(path, str(e)) from e

    logger.debug("Rewrote %s", path)
    return True


# ── Whole tree ──────────────────────────────────────────────────────


@dataclass
class RewriteReport:
    """Outcome of rewriting every page below a staging root."""

    root: Path
    outcomes: list[FileOutcome] = field(default_factory=list)
    cancelled: bool = False

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def rewritten(self) -> int:
        return sum(1 for o in self.outcomes if o.changed)

    @property
    def unchanged(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "unchanged")

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def ok(self) -> bool:
        return self.failed == 0 and not self.cancelled

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "root": str(self.root),
            "total": self.total,
            "rewritten": self.rewritten,
            "unchanged": self.unchanged,
            "failed": self.failed,
            "cancelled": self.cancelled,
            "files": [o.model_dump() for o in self.outcomes],
        }


def rewrite_tree(
    staging_root: Path,
    base_url: str,
    *,
    fail_fast: bool = False,
    stop_event: threading.Event | None = None,
) -> RewriteReport:
    """Rewrite every markdown page below ``staging_root``.

    Args:
        staging_root: The staged wiki tree.
        base_url: Root URL of the hosted wiki images.
        fail_fast: Re-raise the first read/write error instead of
            recording it and moving on.
        stop_event: When set, the walk stops before the next file is
            read.  A file is never left half-written.

    Returns:
        RewriteReport with one outcome per visited file.

    Raises:
        TraversalError: If the tree cannot be walked.
        ReadError, WriteError: Only when ``fail_fast`` is set.  The
            error carries the partial report as ``report``.
    """
    staging_root = Path(staging_root)
    report = RewriteReport(root=staging_root)

    for path in iter_markdown_files(staging_root):
        if stop_event is not None and stop_event.is_set():
            logger.warning("Rewrite cancelled after %d file(s)", report.total)
            report.cancelled = True
            break

        rel = path.relative_to(staging_root).as_posix()
        try:
            changed = rewrite_file(path, staging_root, base_url)
        except (ReadError, WriteError) as e:
            logger.error("Failed to rewrite %s: %s", rel, e.reason)
            report.outcomes.append(FileOutcome(path=rel, status="failed", error=str(e)))
            if fail_fast:
                e.report = report
                raise
            continue

        report.outcomes.append(
            FileOutcome(path=rel, status="rewritten" if changed else "unchanged")
        )

    logger.info(
        "Rewrote %d/%d page(s) under %s (%d failed)",
        report.rewritten, report.total, staging_root, report.failed,
    )
    return report
