"""
Configuration loader — reads wikisync.yml into a WikiConfig.

The file is optional.  Without one, every setting takes its default
and paths resolve against the current directory.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from wikisync.core.models.wiki import FALLBACK_REPOSITORY, WikiConfig

logger = logging.getLogger(__name__)

# Default config filename
WIKI_CONFIG_FILE = "wikisync.yml"

# Set by GitHub Actions to "<owner>/<repo>"
REPOSITORY_ENV_VAR = "GITHUB_REPOSITORY"


class ConfigError(Exception):
    """Raised when wiki configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for wikisync.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to wikisync.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / WIKI_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> WikiConfig:
    """Load and validate wiki configuration.

    Args:
        path: Explicit path to wikisync.yml. If None, searches upward,
            falling back to defaults when nothing is found.

    Returns:
        Validated WikiConfig.

    Raises:
        ConfigError: If an explicit path is missing or any file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", WIKI_CONFIG_FILE)
            return WikiConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading wiki config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "wikisync" key or be flat
    if "wikisync" in data:
        data = data["wikisync"] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected 'wikisync' to be a mapping in {path}")

    try:
        config = WikiConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid wiki configuration: {e}") from e

    logger.info("Loaded wiki config from %s (source=%s, wiki_dir=%s)", path, config.source, config.wiki_dir)
    return config


def config_root(config_path: Path | None) -> Path:
    """Directory that relative paths in the config resolve against."""
    return config_path.parent.resolve() if config_path else Path.cwd()


def resolve_path(root: Path, value: str) -> Path:
    """Resolve a configured directory against ``root`` unless absolute."""
    path = Path(value)
    return path if path.is_absolute() else (root / path).resolve()


def resolve_repository(config: WikiConfig, override: str | None = None) -> str:
    """Pick the repository identifier ("owner/name").

    Precedence: explicit override > config > GITHUB_REPOSITORY > fallback.
    """
    for candidate in (override, config.repository, os.environ.get(REPOSITORY_ENV_VAR)):
        if candidate and candidate.strip():
            return candidate.strip()

    logger.warning(
        "%s not set, falling back to repository '%s'",
        REPOSITORY_ENV_VAR, FALLBACK_REPOSITORY,
    )
    return FALLBACK_REPOSITORY
