"""
Logging for the wikisync CLI.

``setup_logging`` runs once from the ``wikisync`` group callback; modules
only ever call ``logging.getLogger(__name__)``.

Console output gets more detail as the level drops: bare messages at
WARNING, timestamps and logger names at INFO, line numbers at DEBUG.
WIKISYNC_LOG_FILE adds a file log that always uses the DEBUG layout.

With ``github_annotations`` the console turns warnings and errors into
workflow commands (``::error::...``) that GitHub Actions shows on the run.
"""

from __future__ import annotations

import logging
import sys

DETAIL_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

# (max level, format, datefmt), checked in order
_CONSOLE_FORMATS = (
    (logging.DEBUG, DETAIL_FORMAT, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)

_ANNOTATIONS = {
    logging.CRITICAL: "error",
    logging.ERROR: "error",
    logging.WARNING: "warning",
}


class GitHubAnnotationFormatter(logging.Formatter):
    """Prefix WARNING and above with a GitHub Actions workflow command."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = _ANNOTATIONS.get(record.levelno)
        if command is None:
            return message
        # Workflow commands are single-line
        message = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"::{command}::{message}"


def console_format(numeric_level: int) -> tuple[str, str | None]:
    """Format string and date format for a console at ``numeric_level``."""
    for max_level, fmt, datefmt in _CONSOLE_FORMATS:
        if numeric_level <= max_level:
            return fmt, datefmt
    return "%(message)s", None


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    github_annotations: bool = False,
) -> None:
    """Replace the root logger's handlers with a console (and file) handler.

    Args:
        level: Console level name.
        log_file: Optional log file path.
        log_file_level: File level name, ``level`` when unset.
        github_annotations: Emit console warnings/errors as workflow commands.
    """
    console_level = parse_level(level)
    fmt, datefmt = console_format(console_level)
    formatter_cls = GitHubAnnotationFormatter if github_annotations else logging.Formatter

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    handlers[0].setLevel(console_level)
    handlers[0].setFormatter(formatter_cls(fmt, datefmt=datefmt))

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(parse_level(log_file_level) if log_file_level else console_level)
        file_handler.setFormatter(logging.Formatter(DETAIL_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(min(h.level for h in handlers))

    logging.raiseExceptions = False


def parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown or empty names give WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
