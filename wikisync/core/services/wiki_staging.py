"""
Wiki staging — prepare the wiki checkout before pages are rewritten.

Two steps:
  1. Clear the wiki directory, keeping its ``.git`` entry so the
     checkout stays a repository.
  2. Copy the documentation tree into it, skipping excluded names
     (VCS metadata, CI config, the wiki directory itself, README.md).

Only names are matched against the exclude list, at every depth.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from wikisync.core.services.wiki_errors import StagingError

logger = logging.getLogger(__name__)

DEFAULT_KEEP = (".git",)

DEFAULT_EXCLUDE = (
    ".git",
    ".github",
    ".editorconfig",
    "README.md",
)


def default_excludes(wiki_dir_name: str) -> list[str]:
    """Exclude list for a wiki checkout named ``wiki_dir_name``."""
    names = list(DEFAULT_EXCLUDE)
    if wiki_dir_name and wiki_dir_name not in names:
        names.insert(2, wiki_dir_name)
    return names


def clear_directory(target: Path, keep: Iterable[str] = DEFAULT_KEEP) -> int:
    """Delete every entry of ``target`` except the names in ``keep``.

    Creates ``target`` when it does not exist yet.

    Returns:
        Number of top-level entries removed.

    Raises:
        StagingError: If an entry cannot be removed.
    """
    keep_names = set(keep)
    target = Path(target)

    try:
        target.mkdir(parents=True, exist_ok=True)
        entries = sorted(target.iterdir())
    except OSError as e:
        raise StagingError(f"Cannot prepare {target}: {e}") from e

    removed = 0
    for entry in entries:
        if entry.name in keep_names:
            continue
        try:
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        except OSError as e:
            raise StagingError(f"Cannot remove {entry}: {e}") from e
        removed += 1

    logger.info("Cleared %d entr%s from %s", removed, "y" if removed == 1 else "ies", target)
    return removed


def stage_tree(source: Path, target: Path, exclude: Iterable[str] = DEFAULT_EXCLUDE) -> int:
    """Copy ``source`` into ``target``, skipping excluded names.

    Existing directories in ``target`` are merged and files overwritten.
    ``target`` is never copied into itself, even when it sits inside
    ``source`` and is missing from ``exclude``.

    Returns:
        Number of files copied.

    Raises:
        StagingError: If ``source`` is not a directory or a copy fails.
    """
    source = Path(source)
    target = Path(target)
    excluded = set(exclude)

    if not source.is_dir():
        raise StagingError(f"Source directory not found: {source}")

    target_resolved = target.resolve()
    copied: list[str] = []

    def _ignore(directory: str, names: list[str]) -> set[str]:
        skipped = {n for n in names if n in excluded}
        for n in names:
            if (Path(directory) / n).resolve() == target_resolved:
                skipped.add(n)
        return skipped

    def _copy(src: str, dst: str) -> str:
        copied.append(dst)
        return shutil.copy2(src, dst)

    try:
        shutil.copytree(
            source,
            target,
            ignore=_ignore,
            copy_function=_copy,
            dirs_exist_ok=True,
        )
    except (OSError, shutil.Error) as e:
        raise StagingError(f"Cannot copy {source} to {target}: {e}") from e

    logger.info("Staged %d file(s) from %s into %s", len(copied), source, target)
    return len(copied)


def prepare_wiki(
    source: Path,
    target: Path,
    exclude: Iterable[str] | None = None,
    keep: Iterable[str] = DEFAULT_KEEP,
) -> int:
    """Clear ``target`` and copy ``source`` into it.

    Returns:
        Number of files copied.
    """
    target = Path(target)
    if exclude is None:
        exclude = default_excludes(target.name)
    clear_directory(target, keep=keep)
    return stage_tree(source, target, exclude=exclude)
