"""Tests for docfresh.pipeline: full audit runs."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from conftest import FakeDateProvider, commit_file, requires_git, touch, write_doc
from docfresh.config.models import OutputSettings
from docfresh.errors import ReportWriteError, VCSUnavailableError
from docfresh.pipeline import EXIT_OK, EXIT_STALE, audit, exit_code_for, run_audit


def _corpus(repo: Path) -> FakeDateProvider:
    f1 = touch(repo / "pkg" / "f1.py")
    f2 = touch(repo / "pkg" / "f2.py")
    write_doc(repo / "docs" / "a.md", title="A", artifacts=["pkg/f1.py"], last_verified="2026-01-01")
    write_doc(repo / "docs" / "b.md", title="B", artifacts=["pkg/f2.py"], last_verified="2026-01-01")
    write_doc(repo / "docs" / "c.md", title="C")
    return FakeDateProvider(repo, {f1: date(2026, 1, 12), f2: date(2026, 1, 4)})


class TestAudit:
    async def test_writes_both_reports(self, repo: Path, make_config):
        provider = _corpus(repo)
        result = await audit(make_config(), provider)

        assert result.report.stale_count == 1
        assert result.report.fresh_count == 1
        assert result.report.unchecked_count == 1
        assert [p.name for p in result.written] == ["report.json", "report.md"]

        data = json.loads((repo / "out" / "report.json").read_text())
        assert data["stale_documents"][0]["title"] == "A"
        assert data["stale_documents"][0]["changes"][0]["days_since_verified"] == 11
        assert "| [A](<" in (repo / "out" / "report.md").read_text()

    async def test_ignore_patterns_applied(self, repo: Path, make_config):
        provider = _corpus(repo)
        result = await audit(make_config(ignore=["a.md"]), provider)
        assert result.report.stale_count == 0
        assert result.report.total_documents == 2

    async def test_unavailable_vcs_writes_nothing(self, repo: Path, make_config):
        provider = _corpus(repo)
        provider.available = False

        with pytest.raises(VCSUnavailableError, match="git is not installed"):
            await audit(make_config(), provider)
        assert not (repo / "out").exists()

    async def test_not_a_repository_writes_nothing(self, repo: Path, make_config):
        write_doc(repo / "docs" / "a.md", artifacts=["pkg/x.py"], last_verified="2026-01-01")
        provider = FakeDateProvider(None)

        with pytest.raises(VCSUnavailableError, match="Not a git repository"):
            await audit(make_config(), provider)
        assert not (repo / "out").exists()

    async def test_write_failure_propagates(self, repo: Path, make_config):
        provider = _corpus(repo)
        touch(repo / "blocker", "file")
        cfg = make_config(
            output=OutputSettings(format="json", json_file=str(repo / "blocker" / "r.json"))
        )
        with pytest.raises(ReportWriteError):
            await audit(cfg, provider)

    async def test_empty_docs_root(self, repo: Path, make_config):
        result = await audit(make_config(), FakeDateProvider(repo))
        assert result.report.total_documents == 0
        assert exit_code_for(result.report) == EXIT_OK


class TestExitCodes:
    def test_stale_exits_one(self, repo: Path, make_config):
        result = run_audit(make_config(), _corpus(repo))
        assert exit_code_for(result.report) == EXIT_STALE

    def test_fresh_exits_zero(self, repo: Path, make_config):
        result = run_audit(make_config(threshold=30), _corpus(repo))
        assert exit_code_for(result.report) == EXIT_OK


@requires_git
class TestAuditAgainstGit:
    def test_end_to_end(self, git_repo: Path, make_config, monkeypatch):
        commit_file(git_repo, "pkg/auth.py", "2026-01-12T09:00:00+00:00")
        commit_file(git_repo, "pkg/util.py", "2026-01-03T09:00:00+00:00")
        write_doc(
            git_repo / "docs" / "auth.md",
            title="Auth",
            artifacts=["pkg/auth.py"],
            last_verified="2026-01-01",
        )
        write_doc(
            git_repo / "docs" / "util.md",
            title="Util",
            artifacts=["pkg/util.py", "pkg/missing/**/*.py"],
            last_verified="2026-01-01",
        )
        monkeypatch.chdir(git_repo)

        result = run_audit(make_config())

        assert [d.title for d in result.report.stale_documents] == ["Auth"]
        change = result.report.stale_documents[0].changes[0]
        assert change.file == str(git_repo / "pkg" / "auth.py")
        assert change.last_modified == date(2026, 1, 12)
        assert result.report.fresh_count == 1
        assert exit_code_for(result.report) == EXIT_STALE
