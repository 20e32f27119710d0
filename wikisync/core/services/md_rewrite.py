"""
Markdown rewriting for the wiki renderer.

Two text transforms, applied to every staged page:

  - Image rewriting: ``![alt](path)`` becomes an absolute wiki image
    directive ``[[<base>/<resolved>|alt=alt]]``
  - Link rewriting: ``](dir/Page.md)`` becomes ``](Page)``, because
    wiki pages live in one flat namespace

Images must be rewritten first.  ``![alt](x.md)`` also looks like a
link target, and only the ``[[...]]`` form is safe from the link pass.

Targets starting with ``http`` are external and never touched.
"""

from __future__ import annotations

import logging
import posixpath
import re

from wikisync.core.services.wiki_errors import MalformedReferenceError

logger = logging.getLogger(__name__)

# Bare prefix: matches "https://" and anything else starting with "http"
_EXTERNAL_PREFIX = "http"


# ── Image Rewriting ─────────────────────────────────────────────────

# ![alt](path): alt never crosses "]", path never crosses ")"
_IMAGE_RE = re.compile(r"!\[([^\]]*?)\]\(([^)]*)\)")


def resolve_image_path(file_dir: str, image_path: str) -> str:
    """Resolve an image path against the page's directory.

    Both arguments use ``/`` separators.  ``../`` walks up from
    ``file_dir``; ``./`` segments and repeated slashes collapse.

        >>> resolve_image_path("Life-Cycle/Git-Flow", "../.assets/x.svg")
        'Life-Cycle/.assets/x.svg'
        >>> resolve_image_path(".", ".assets/flow.png")
        '.assets/flow.png'
    """
    if not image_path.strip():
        raise MalformedReferenceError(f"Empty image path in {file_dir!r}")
    # A leading "/" still means the page directory, not the wiki root
    return posixpath.normpath(posixpath.join(file_dir or ".", image_path.lstrip("/")))


def wiki_image(url: str, alt: str = "") -> str:
    """Format a wiki image directive, with ``|alt=`` only when alt is set."""
    if alt:
        return f"[[{url}|alt={alt}]]"
    return f"[[{url}]]"


def rewrite_images(content: str, file_dir: str, base_url: str) -> str:
    """Rewrite every local image reference into an absolute wiki image.

    Args:
        content: Raw markdown text.
        file_dir: The page's directory relative to the staging root.
        base_url: Root URL of the hosted wiki images.

    Returns:
        The rewritten text.  External images are left as they are.
    """
    base = base_url.rstrip("/")

    def _replace(m: re.Match) -> str:
        alt, path = m.group(1), m.group(2)

        if path.startswith(_EXTERNAL_PREFIX):
            return m.group(0)

        try:
            resolved = resolve_image_path(file_dir, path)
        except MalformedReferenceError as e:
            logger.debug("Leaving image unchanged: %s", e)
            return m.group(0)

        return wiki_image(f"{base}/{resolved}", alt)

    return _IMAGE_RE.sub(_replace, content)


# ── Link Rewriting ──────────────────────────────────────────────────

# ](path.md) is lazy, so "Styling-(PEP-8).md)" ends at the first ".md)".
# Parentheses inside the target must pair up, so a stray ")" always closes
# the link and the match can never run on into later text on the line.
_MD_LINK_TARGET_RE = re.compile(r"\]\(((?:[^()\r\n]|\([^()\r\n]*\))+?\.md)\)")


def page_name(link_path: str) -> str:
    """Flatten a markdown link target into a wiki page name.

        >>> page_name("Life-Cycle/Architecture/Backend-Design.md")
        'Backend-Design'
    """
    name = posixpath.basename(link_path)
    while name.endswith(".md"):
        name = name[: -len(".md")]
    return name


def rewrite_links(content: str) -> str:
    """Point every internal ``.md`` link at its flat wiki page.

    Only the target is rewritten; link text stays as written.
    Running this twice gives the same result as running it once.
    """
    def _replace(m: re.Match) -> str:
        link_path = m.group(1)

        if link_path.startswith(_EXTERNAL_PREFIX):
            return m.group(0)

        return f"]({page_name(link_path)})"

    return _MD_LINK_TARGET_RE.sub(_replace, content)


# ── Combined ────────────────────────────────────────────────────────


def rewrite_text(content: str, file_dir: str, base_url: str) -> str:
    """Apply image rewriting, then link rewriting."""
    content = rewrite_images(content, file_dir, base_url)
    return rewrite_links(content)
