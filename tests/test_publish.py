"""
Tests for the publish use case — stage + rewrite end to end.
"""

from pathlib import Path

from wikisync.core.config.loader import load_config
from wikisync.core.use_cases.publish import run_publish, run_rewrite, run_stage

BASE_URL = "https://raw.githubusercontent.com/wiki/o/r"


class TestRunStage:
    def test_stages_docs(self, docs_project: Path):
        result = run_stage(load_config(docs_project), docs_project)
        wiki = docs_project.parent / "wiki"

        assert result.ok
        assert result.wiki_dir == wiki.resolve()
        assert result.files_copied == 4  # Home, Git-Flow, branches.svg, wikisync.yml
        assert (wiki / "Home.md").is_file()
        assert (wiki / ".git" / "HEAD").is_file()
        assert not (wiki / "Removed-Page.md").exists()
        assert not (wiki / "README.md").exists()
        assert not (wiki / ".github").exists()
        assert not (wiki / "wiki").exists()

    def test_missing_source_is_error(self, tmp_path: Path):
        config = tmp_path / "wikisync.yml"
        config.write_text("source: does-not-exist\n")
        result = run_stage(load_config(config), config)
        assert not result.ok
        assert "not found" in result.error


class TestRunPublish:
    def test_publish_rewrites_pages(self, docs_project: Path):
        result = run_publish(load_config(docs_project), docs_project)
        wiki = docs_project.parent / "wiki"

        assert result.ok
        assert result.repository == "o/r"
        assert result.base_url == BASE_URL
        assert result.report.rewritten == 2

        home = (wiki / "Home.md").read_text(encoding="utf-8")
        assert "- [Git Flow](Git-Flow)" in home
        assert "- [PEP 8](Styling-and-Formatting-(PEP-8))" in home
        assert "- [GitHub](https://github.com)" in home

        flow = (wiki / "Life-Cycle" / "Git-Flow.md").read_text(encoding="utf-8")
        assert (
            f"| [[{BASE_URL}/Life-Cycle/.assets/branches.svg]] "
            "| ![Logo](https://example.com/logo.png) |"
        ) in flow
        assert "Back to [Home](Home)." in flow

    def test_source_tree_untouched(self, docs_project: Path):
        run_publish(load_config(docs_project), docs_project)
        home = (docs_project.parent / "Home.md").read_text(encoding="utf-8")
        assert "(Life-Cycle/Git-Flow.md)" in home

    def test_repository_override(self, docs_project: Path):
        result = run_publish(load_config(docs_project), docs_project, repository="x/y")
        assert result.base_url == "https://raw.githubusercontent.com/wiki/x/y"

    def test_to_dict(self, docs_project: Path):
        data = run_publish(load_config(docs_project), docs_project).to_dict()
        assert data["ok"] is True
        assert data["repository"] == "o/r"
        assert data["rewrite"]["total"] == 2
        assert "error" not in data

    def test_fail_fast_keeps_partial_report(self, docs_project: Path):
        (docs_project.parent / "Zz-Bad.md").write_bytes(b"\xff\xfe\x00bad")
        docs_project.write_text("repository: o/r\nwiki_dir: wiki\nfail_fast: true\n")

        result = run_publish(load_config(docs_project), docs_project)
        assert not result.ok
        assert "Zz-Bad.md" in result.error
        assert [(o.path, o.status) for o in result.report.outcomes] == [
            ("Home.md", "rewritten"),
            ("Zz-Bad.md", "failed"),
        ]
        assert result.to_dict()["rewrite"]["failed"] == 1


class TestRunRewrite:
    def test_rewrite_explicit_directory(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("GITHUB_REPOSITORY", raising=False)
        (tmp_path / "Page.md").write_text("[Next](sub/Next.md)\n")
        config = tmp_path / "wikisync.yml"
        config.write_text("repository: o/r\n")

        result = run_rewrite(load_config(config), config, directory=tmp_path)
        assert result.ok
        assert (tmp_path / "Page.md").read_text() == "[Next](Next)\n"

    def test_missing_directory_is_error(self, tmp_path: Path):
        config = tmp_path / "wikisync.yml"
        config.write_text("wiki_dir: missing\n")
        result = run_rewrite(load_config(config), config)
        assert not result.ok
        assert "does not exist" in result.error
        assert result.report is None
