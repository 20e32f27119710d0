"""
Publish use case — stage the docs tree into the wiki and rewrite it.

The three entry points share one result type:

    run_stage    clear the wiki directory, copy the docs in
    run_rewrite  rewrite an already staged tree in place
    run_publish  both, in that order
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from wikisync.core.config.loader import config_root, resolve_path, resolve_repository
from wikisync.core.models.wiki import WikiConfig
from wikisync.core.services.wiki_errors import (
    ReadError,
    StagingError,
    TraversalError,
    WriteError,
)
from wikisync.core.services.wiki_files import RewriteReport, rewrite_tree
from wikisync.core.services.wiki_staging import prepare_wiki

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    """Result of a stage and/or rewrite run."""

    source: Path | None = None
    wiki_dir: Path | None = None
    repository: str = ""
    base_url: str = ""
    files_copied: int = 0
    report: RewriteReport | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        if self.error:
            return False
        return self.report.ok if self.report else True

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {
            "ok": self.ok,
            "source": str(self.source) if self.source else None,
            "wiki_dir": str(self.wiki_dir) if self.wiki_dir else None,
            "repository": self.repository,
            "base_url": self.base_url,
            "files_copied": self.files_copied,
        }
        if self.report is not None:
            result["rewrite"] = self.report.to_dict()
        if self.error:
            result["error"] = self.error
        return result


def run_stage(config: WikiConfig, config_path: Path | None = None) -> PublishResult:
    """Clear the wiki directory and copy the documentation tree into it."""
    root = config_root(config_path)
    result = PublishResult(
        source=resolve_path(root, config.source),
        wiki_dir=resolve_path(root, config.wiki_dir),
    )

    try:
        result.files_copied = prepare_wiki(
            result.source,
            result.wiki_dir,
            exclude=config.excluded_names(),
            keep=config.keep,
        )
    except StagingError as e:
        logger.error("Staging failed: %s", e)
        result.error = str(e)

    return result


def run_rewrite(
    config: WikiConfig,
    config_path: Path | None = None,
    *,
    directory: Path | None = None,
    repository: str | None = None,
    stop_event: threading.Event | None = None,
) -> PublishResult:
    """Rewrite image references and links in a staged wiki tree.

    Args:
        config: Loaded configuration.
        config_path: Where the config came from (for relative paths).
        directory: Tree to rewrite. Defaults to the configured wiki dir.
        repository: Overrides the configured/discovered repository.
        stop_event: Stops the run between files when set.
    """
    root = config_root(config_path)
    wiki_dir = Path(directory) if directory else resolve_path(root, config.wiki_dir)
    repo = resolve_repository(config, repository)

    result = PublishResult(
        wiki_dir=wiki_dir,
        repository=repo,
        base_url=config.image_base_url(repo),
    )
    _rewrite_into(result, config, stop_event)
    return result


def run_publish(
    config: WikiConfig,
    config_path: Path | None = None,
    *,
    repository: str | None = None,
    stop_event: threading.Event | None = None,
) -> PublishResult:
    """Stage the documentation tree, then rewrite it for the wiki."""
    result = run_stage(config, config_path)
    if result.error:
        return result

    result.repository = resolve_repository(config, repository)
    result.base_url = config.image_base_url(result.repository)
    _rewrite_into(result, config, stop_event)
    return result


def _rewrite_into(
    result: PublishResult,
    config: WikiConfig,
    stop_event: threading.Event | None,
) -> None:
    assert result.wiki_dir is not None

    logger.info("Rewriting %s with image base %s", result.wiki_dir, result.base_url)
    try:
        result.report = rewrite_tree(
            result.wiki_dir,
            result.base_url,
            fail_fast=config.fail_fast,
            stop_event=stop_event,
        )
    except TraversalError as e:
        logger.error("Cannot walk wiki directory: %s", e)
        result.error = str(e)
    except (ReadError, WriteError) as e:
        # Only reachable with fail_fast
        result.report = e.report
        result.error = str(e)
