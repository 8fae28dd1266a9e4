"""Abstract VCS interface for docfresh."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date
from pathlib import Path

from docfresh.errors import VCSTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 10


class VCSDateProvider(ABC):
    """Answers "when was this file last changed" from version-control history.

    Implementations never raise from last_modified(); every per-file problem
    becomes None plus a logged warning. Only the repository-level checks
    (is_available / repo_root) decide whether a run can proceed at all.
    """

    @abstractmethod
    async def is_available(self) -> bool:
        """Whether the VCS tooling can be invoked at all."""
        ...

    @abstractmethod
    async def repo_root(self) -> Path | None:
        """Root of the repository containing the working directory, or None."""
        ...

    @abstractmethod
    async def last_modified(self, file: Path, use_author_date: bool = False) -> date | None:
        """Date of the most recent commit touching file, or None.

        Args:
            file: Absolute path of the file to query.
            use_author_date: Use the author date instead of the commit date.
        """
        ...

    async def batch_last_modified(
        self,
        files: Iterable[Path],
        use_author_date: bool = False,
        concurrency: int = DEFAULT_CONCURRENCY,
        timeout: float | None = None,
    ) -> dict[Path, date | None]:
        """Query many files with at most `concurrency` queries in flight.

        One file's failure never affects another's entry. If the whole batch
        exceeds `timeout` seconds, outstanding queries are cancelled and
        VCSTimeoutError is raised.
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")

        unique = sorted(set(files))
        results: dict[Path, date | None] = {}
        semaphore = asyncio.Semaphore(concurrency)

        async def _query(file: Path) -> None:
            async with semaphore:
                try:
                    results[file] = await self.last_modified(file, use_author_date)
                except Exception as exc:
                    logger.warning("History query failed for %s: %s", file, exc)
                    results[file] = None

        batch = asyncio.gather(*(_query(f) for f in unique))
        try:
            if timeout is None:
                await batch
            else:
                await asyncio.wait_for(batch, timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise VCSTimeoutError(timeout, len(unique)) from exc

        return results
