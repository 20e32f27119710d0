"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def docs_project(tmp_path: Path) -> Path:
    """A documentation repository with wikisync.yml and a wiki checkout.

    Returns the path to wikisync.yml.
    """
    repo = tmp_path / "guide"
    (repo / ".github").mkdir(parents=True)
    (repo / ".github" / "update-wiki.yml").write_text("on: push\n")
    (repo / "README.md").write_text("# Repo readme\n")
    (repo / "Home.md").write_text(textwrap.dedent("""\
        # Guide

        - [Git Flow](Life-Cycle/Git-Flow.md)
        - [PEP 8](Code-Style/Python/Styling-and-Formatting-(PEP-8).md)
        - [GitHub](https://github.com)
    """))
    (repo / "Life-Cycle" / ".assets").mkdir(parents=True)
    (repo / "Life-Cycle" / ".assets" / "branches.svg").write_text("<svg/>")
    (repo / "Life-Cycle" / "Git-Flow.md").write_text(textwrap.dedent("""\
        # Git Flow

        | ![](.assets/branches.svg) | ![Logo](https://example.com/logo.png) |
        Back to [Home](../Home.md).
    """))

    wiki = repo / "wiki"
    (wiki / ".git").mkdir(parents=True)
    (wiki / ".git" / "HEAD").write_text("ref: refs/heads/master\n")
    (wiki / "Removed-Page.md").write_text("gone\n")

    config = repo / "wikisync.yml"
    config.write_text("repository: o/r\nwiki_dir: wiki\n")
    return config
