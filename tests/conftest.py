"""Shared test fixtures for docfresh."""

from __future__ import annotations

import asyncio
import os
import shutil
import subprocess
from datetime import date
from pathlib import Path

import pytest

from docfresh.config.models import AuditConfig, OutputSettings
from docfresh.vcs.base import VCSDateProvider


class FakeDateProvider(VCSDateProvider):
    """In-memory provider: dates keyed by absolute path.

    Tracks the peak number of concurrent last_modified() calls so tests can
    check the batch concurrency bound.
    """

    def __init__(
        self,
        root: Path | None,
        dates: dict[Path, date | None] | None = None,
        *,
        available: bool = True,
        delay: float = 0.0,
        failing: set[Path] | None = None,
    ) -> None:
        self.root = root
        self.dates = dict(dates or {})
        self.available = available
        self.delay = delay
        self.failing = set(failing or ())
        self.calls: list[Path] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def is_available(self) -> bool:
        return self.available

    async def repo_root(self) -> Path | None:
        return self.root if self.available else None

    async def last_modified(self, file: Path, use_author_date: bool = False) -> date | None:
        self.calls.append(file)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if file in self.failing:
                raise RuntimeError(f"boom: {file.name}")
            return self.dates.get(file)
        finally:
            self.in_flight -= 1


def write_doc(
    path: Path,
    *,
    title: str | None = "Doc",
    artifacts: list[str] | None = None,
    last_verified: str | None = None,
    extra: str = "",
) -> Path:
    """Write a markdown file with a YAML header built from the arguments."""
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if artifacts is not None:
        lines.append("related_artifacts:")
        lines.extend(f"  - {a}" for a in artifacts)
    if last_verified is not None:
        lines.append(f"last_verified: {last_verified}")
    if extra:
        lines.append(extra)
    lines.append("---")
    lines.append("")
    lines.append("Body text.")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def touch(path: Path, content: str = "x = 1\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """A repository-shaped directory with docs/ and pkg/ subtrees."""
    root = tmp_path / "repo"
    (root / "docs").mkdir(parents=True)
    (root / "pkg").mkdir()
    return root.resolve()


@pytest.fixture
def make_config(repo: Path):
    """Build an AuditConfig rooted in the temp repo."""

    def _make(**kwargs) -> AuditConfig:
        kwargs.setdefault("docs_root", str(repo / "docs"))
        kwargs.setdefault(
            "output",
            OutputSettings(
                json_file=str(repo / "out" / "report.json"),
                markdown_file=str(repo / "out" / "report.md"),
            ),
        )
        return AuditConfig(**kwargs)

    return _make


# ── git helpers ──────────────────────────────────────────────────────

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def git(root: Path, *args: str, when: str | None = None) -> str:
    """Run git in root, optionally pinning author and committer dates."""
    env = {
        "GIT_AUTHOR_NAME": "Test",
        "GIT_AUTHOR_EMAIL": "test@example.com",
        "GIT_COMMITTER_NAME": "Test",
        "GIT_COMMITTER_EMAIL": "test@example.com",
        "HOME": str(root),
        "PATH": os.environ.get("PATH", ""),
    }
    if when:
        env["GIT_AUTHOR_DATE"] = when
        env["GIT_COMMITTER_DATE"] = when
    result = subprocess.run(
        ["git", *args], cwd=root, env=env, capture_output=True, text=True, check=True
    )
    return result.stdout


@pytest.fixture
def git_repo(repo: Path) -> Path:
    """The temp repo initialised as a git repository."""
    git(repo, "init", "-q")
    git(repo, "config", "commit.gpgsign", "false")
    return repo


def commit_file(root: Path, rel: str, when: str, content: str | None = None) -> Path:
    """Write rel (unique content per commit) and commit it at the given ISO time."""
    path = root / rel
    touch(path, content if content is not None else f"# {rel} @ {when}\n")
    git(root, "add", rel)
    git(root, "commit", "-q", "-m", f"update {rel}", when=when)
    return path
