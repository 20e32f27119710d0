"""
WikiConfig model — what to publish and where.

Loaded from wikisync.yml.  Every field has a default, so a missing
config file means "publish the current directory into ./wiki".
"""

from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import BaseModel, Field

from wikisync.core.services.wiki_staging import DEFAULT_KEEP, default_excludes

# Used when neither config nor environment names a repository
FALLBACK_REPOSITORY = "rios0rios0/guide"

RAW_WIKI_URL = "https://raw.githubusercontent.com/wiki"


class WikiConfig(BaseModel):
    """Publishing settings for one documentation tree."""

    source: str = "."
    wiki_dir: str = "wiki"
    repository: str = ""
    base_url: str = ""
    exclude: list[str] | None = None   # None = defaults + wiki_dir name
    keep: list[str] = Field(default_factory=lambda: list(DEFAULT_KEEP))
    fail_fast: bool = False

    def excluded_names(self) -> list[str]:
        """Names never copied into the wiki directory."""
        if self.exclude is not None:
            return list(self.exclude)
        return default_excludes(PurePosixPath(self.wiki_dir).name)

    def image_base_url(self, repository: str) -> str:
        """Base URL of hosted wiki images for ``repository`` (owner/name)."""
        if self.base_url:
            return self.base_url.rstrip("/")
        return f"{RAW_WIKI_URL}/{repository.strip('/')}"
