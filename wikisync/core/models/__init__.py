"""
Domain models — Pydantic types for wikisync.

All models are re-exported here for convenient access:

    from wikisync.core.models import FileOutcome, WikiConfig
"""

from wikisync.core.models.outcome import FileOutcome
from wikisync.core.models.wiki import FALLBACK_REPOSITORY, WikiConfig

__all__ = [
    "FALLBACK_REPOSITORY",
    # outcome.py
    "FileOutcome",
    # wiki.py
    "WikiConfig",
]
