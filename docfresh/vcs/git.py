"""Git-backed VCSDateProvider using async subprocesses."""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
from datetime import date, datetime, timezone
from pathlib import Path

from docfresh.config.models import VCSSettings
from docfresh.vcs.base import VCSDateProvider

logger = logging.getLogger(__name__)

_COMMIT_DATE_FORMAT = "--format=%cI"
_AUTHOR_DATE_FORMAT = "--format=%aI"


class GitDateProvider(VCSDateProvider):
    """Reads last-commit dates with ``git log``.

    Every git call is bounded by ``query_timeout``; a process that overruns
    is killed. With ``include_uncommitted`` set, a file that has working-tree
    changes (modified, staged or untracked) counts as modified today (UTC).
    """

    def __init__(
        self,
        cwd: str | Path | None = None,
        *,
        git: str = "git",
        include_uncommitted: bool = False,
        query_timeout: float = 10.0,
    ) -> None:
        self._cwd = Path(cwd) if cwd is not None else None
        self._git = git
        self.include_uncommitted = include_uncommitted
        self.query_timeout = query_timeout
        self._root: Path | None = None
        self._root_checked = False

    @classmethod
    def from_settings(cls, settings: VCSSettings, cwd: str | Path | None = None) -> GitDateProvider:
        return cls(
            cwd,
            include_uncommitted=settings.include_uncommitted,
            query_timeout=settings.query_timeout,
        )

    async def _run(self, *args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
        """Run git with args. Raises OSError or TimeoutError."""
        cmd = [self._git, *args]
        workdir = cwd or self._cwd
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(workdir) if workdir else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.query_timeout)
        except asyncio.TimeoutError:
            await _kill(proc)
            raise TimeoutError(f"{' '.join(cmd)} timed out after {self.query_timeout:g}s")
        except BaseException:
            # cancelled, e.g. by the batch timeout; the child must not outlive the query
            await _kill(proc)
            raise
        return subprocess.CompletedProcess(
            args=cmd,
            returncode=proc.returncode or 0,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )

    async def is_available(self) -> bool:
        try:
            result = await self._run("--version")
        except (OSError, TimeoutError) as e:
            logger.debug("git not available: %s", e)
            return False
        return result.returncode == 0

    async def repo_root(self) -> Path | None:
        if self._root_checked:
            return self._root
        try:
            result = await self._run("rev-parse", "--show-toplevel")
        except (OSError, TimeoutError) as e:
            logger.debug("git rev-parse failed: %s", e)
            return None
        if result.returncode != 0:
            logger.debug("Not inside a git repository: %s", result.stderr.strip())
        else:
            self._root = Path(result.stdout.strip()).resolve()
        self._root_checked = True
        return self._root

    async def last_modified(self, file: Path, use_author_date: bool = False) -> date | None:
        file = Path(file)
        if not file.exists():
            logger.warning("File not found: %s", file)
            return None

        root = await self.repo_root()
        if root is None:
            logger.warning("No git repository for %s", file)
            return None

        rel = Path(os.path.relpath(file.resolve(), root)).as_posix()

        try:
            if self.include_uncommitted and await self._has_uncommitted(rel, root):
                return datetime.now(timezone.utc).date()

            fmt = _AUTHOR_DATE_FORMAT if use_author_date else _COMMIT_DATE_FORMAT
            result = await self._run("log", "--max-count=1", fmt, "--", rel, cwd=root)
        except (OSError, TimeoutError) as e:
            logger.warning("Failed to get git history for %s: %s", file, e)
            return None

        if result.returncode != 0:
            logger.warning(
                "git log failed for %s (exit %d): %s",
                file,
                result.returncode,
                result.stderr.strip()[:200],
            )
            return None

        stamp = result.stdout.strip()
        if not stamp:
            logger.warning("No git history for %s (new or untracked)", file)
            return None

        return _parse_commit_date(stamp, file)

    async def _has_uncommitted(self, rel: str, root: Path) -> bool:
        result = await self._run("status", "--porcelain", "--", rel, cwd=root)
        return result.returncode == 0 and bool(result.stdout.strip())


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()


def _parse_commit_date(stamp: str, file: Path) -> date | None:
    """Turn a git strict-ISO timestamp into its UTC calendar date."""
    try:
        # Python < 3.11 can't parse a trailing "Z"
        moment = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Invalid date from git for %s: %s", file, stamp)
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).date()
