"""
Tests for configuration loading — wikisync.yml parsing and repository resolution.
"""

import textwrap
from pathlib import Path

import pytest

from wikisync.core.config.loader import (
    ConfigError,
    config_root,
    find_config_file,
    load_config,
    resolve_path,
    resolve_repository,
)
from wikisync.core.models.wiki import FALLBACK_REPOSITORY, WikiConfig


@pytest.fixture
def full_config_yml(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        source: docs
        wiki_dir: build/wiki
        repository: acme/handbook
        exclude:
          - .git
          - drafts
        keep:
          - .git
          - _Sidebar.md
        fail_fast: true
    """)
    path = tmp_path / "wikisync.yml"
    path.write_text(content)
    return path


@pytest.fixture
def wrapped_config_yml(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        wikisync:
          wiki_dir: pages
          base_url: https://cdn.example.com/wiki/
    """)
    path = tmp_path / "wikisync.yml"
    path.write_text(content)
    return path


class TestLoadConfig:
    def test_load_full_config(self, full_config_yml: Path):
        cfg = load_config(full_config_yml)
        assert cfg.source == "docs"
        assert cfg.wiki_dir == "build/wiki"
        assert cfg.repository == "acme/handbook"
        assert cfg.excluded_names() == [".git", "drafts"]
        assert cfg.keep == [".git", "_Sidebar.md"]
        assert cfg.fail_fast is True

    def test_load_wrapped_format(self, wrapped_config_yml: Path):
        cfg = load_config(wrapped_config_yml)
        assert cfg.wiki_dir == "pages"
        assert cfg.image_base_url("ignored/repo") == "https://cdn.example.com/wiki"

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "wikisync.yml"
        path.write_text("")
        assert load_config(path) == WikiConfig()

    def test_no_file_gives_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        cfg = load_config()
        assert cfg.source == "."
        assert cfg.wiki_dir == "wiki"

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nonexistent.yml")

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / "wikisync.yml"
        path.write_text(":: invalid: yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path: Path):
        path = tmp_path / "wikisync.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_wrong_type_raises(self, tmp_path: Path):
        path = tmp_path / "wikisync.yml"
        path.write_text("exclude: 42\n")
        with pytest.raises(ConfigError, match="Invalid wiki configuration"):
            load_config(path)


class TestFindConfigFile:
    def test_finds_in_parent(self, full_config_yml: Path):
        nested = full_config_yml.parent / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == full_config_yml.resolve()

    def test_not_found(self, tmp_path: Path):
        assert find_config_file(tmp_path) is None


class TestConfigRoot:
    def test_from_config_path(self, full_config_yml: Path):
        assert config_root(full_config_yml) == full_config_yml.parent.resolve()

    def test_cwd_without_config(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert config_root(None) == Path.cwd()


class TestResolvePath:
    def test_dot_is_root(self, tmp_path: Path):
        assert resolve_path(tmp_path, ".") == tmp_path.resolve()

    def test_parent_segments_collapse(self, tmp_path: Path):
        assert resolve_path(tmp_path / "a", "../b") == (tmp_path / "b").resolve()

    def test_absolute_kept(self, tmp_path: Path):
        target = tmp_path / "elsewhere"
        assert resolve_path(tmp_path / "a", str(target)) == target


class TestWikiConfig:
    def test_default_excludes_follow_wiki_dir(self):
        cfg = WikiConfig(wiki_dir="build/site-wiki")
        assert cfg.excluded_names() == [
            ".git", ".github", "site-wiki", ".editorconfig", "README.md",
        ]

    def test_default_base_url(self):
        cfg = WikiConfig()
        assert cfg.image_base_url("o/r") == "https://raw.githubusercontent.com/wiki/o/r"


class TestResolveRepository:
    def test_override_wins(self, monkeypatch):
        monkeypatch.setenv("GITHUB_REPOSITORY", "env/repo")
        cfg = WikiConfig(repository="cfg/repo")
        assert resolve_repository(cfg, "cli/repo") == "cli/repo"

    def test_config_over_env(self, monkeypatch):
        monkeypatch.setenv("GITHUB_REPOSITORY", "env/repo")
        assert resolve_repository(WikiConfig(repository="cfg/repo")) == "cfg/repo"

    def test_env(self, monkeypatch):
        monkeypatch.setenv("GITHUB_REPOSITORY", "env/repo")
        assert resolve_repository(WikiConfig()) == "env/repo"

    def test_fallback(self, monkeypatch):
        monkeypatch.delenv("GITHUB_REPOSITORY", raising=False)
        assert resolve_repository(WikiConfig()) == FALLBACK_REPOSITORY

    def test_blank_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("GITHUB_REPOSITORY", "   ")
        assert resolve_repository(WikiConfig()) == FALLBACK_REPOSITORY
