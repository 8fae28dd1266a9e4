"""Classify documents as fresh, stale, or unchecked against git history."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import date, datetime, timezone
from pathlib import Path

from docfresh.config.models import AuditConfig
from docfresh.corpus.models import DocumentRecord
from docfresh.corpus.paths import expand_pattern
from docfresh.errors import VCSUnavailableError
from docfresh.freshness.models import (
    ArtifactChange,
    Fresh,
    Stale,
    StaleDocument,
    StalenessReport,
    Unchecked,
    Verdict,
)
from docfresh.vcs.base import VCSDateProvider

logger = logging.getLogger(__name__)

NO_METADATA = "missing related_artifacts or last_verified"
NO_MATCHES = "related_artifacts matched no files"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def classify_document(
    doc: DocumentRecord,
    files: set[Path],
    dates: Mapping[Path, date | None],
    threshold_days: int,
) -> Verdict:
    """Decide Fresh or Stale for a checkable document whose artifacts resolved.

    An artifact counts as a change when it was last modified more than
    threshold_days after the document's last_verified date. Artifacts with
    no known date are ignored. Raises ValueError when the document has no
    last_verified date.
    """
    if doc.last_verified is None:
        raise ValueError(f"{doc.path} has no last_verified date to compare against")
    changes: list[ArtifactChange] = []
    for file in files:
        modified = dates.get(file)
        if modified is None:
            continue
        days = (modified - doc.last_verified).days
        if days > threshold_days:
            changes.append(
                ArtifactChange(file=str(file), last_modified=modified, days_since_verified=days)
            )

    if not changes:
        return Fresh()
    changes.sort(key=lambda c: (-c.days_since_verified, c.file))
    return Stale(changes=tuple(changes))


def build_report(
    verdicts: Sequence[tuple[DocumentRecord, Verdict]],
    threshold_days: int,
    scanned_at: datetime,
) -> StalenessReport:
    """Fold per-document verdicts into a report, stale docs sorted by path."""
    stale: list[StaleDocument] = []
    fresh = unchecked = 0
    for doc, verdict in verdicts:
        if isinstance(verdict, Stale):
            if doc.last_verified is None:
                raise ValueError(f"Stale verdict for {doc.path} without a last_verified date")
            stale.append(
                StaleDocument(
                    doc=doc.path,
                    title=doc.title,
                    last_verified=doc.last_verified,
                    changes=list(verdict.changes),
                )
            )
        elif isinstance(verdict, Fresh):
            fresh += 1
        else:
            unchecked += 1

    stale.sort(key=lambda s: s.doc)
    return StalenessReport(
        stale_documents=stale,
        fresh_count=fresh,
        unchecked_count=unchecked,
        scanned_at=scanned_at,
        threshold_days=threshold_days,
    )


class StalenessEvaluator:
    """Runs the classification pipeline for a batch of documents.

    Artifact patterns for every document are expanded first, then all
    distinct files go to the provider in a single bounded-concurrency batch,
    so a file shared by several documents is queried once.
    """

    def __init__(
        self,
        provider: VCSDateProvider,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._provider = provider
        self._clock = clock

    async def classify(
        self, documents: Sequence[DocumentRecord], config: AuditConfig
    ) -> list[tuple[DocumentRecord, Verdict]]:
        """Return (document, verdict) pairs in input order.

        Raises VCSUnavailableError when there is no repository root, and
        VCSTimeoutError when history queries overrun vcs.batch_timeout.
        """
        repo_root = await self._provider.repo_root()
        if repo_root is None:
            raise VCSUnavailableError(
                "Not a git repository - staleness check requires git history. "
                "Run docfresh from inside the repository checkout (with full history)."
            )

        verdicts: dict[int, Verdict] = {}
        expanded: dict[int, set[Path]] = {}
        for i, doc in enumerate(documents):
            if not doc.is_checkable:
                verdicts[i] = Unchecked(NO_METADATA)
                continue
            files = self._expand(doc, repo_root)
            if files:
                expanded[i] = files
            else:
                verdicts[i] = Unchecked(NO_MATCHES)

        all_files: set[Path] = set().union(*expanded.values()) if expanded else set()
        dates: dict[Path, date | None] = {}
        if all_files:
            logger.debug("Querying history for %d file(s)", len(all_files))
            dates = await self._provider.batch_last_modified(
                all_files,
                use_author_date=config.vcs.use_author_date,
                concurrency=config.vcs.concurrency,
                timeout=config.vcs.batch_timeout,
            )

        for i, files in expanded.items():
            verdicts[i] = classify_document(documents[i], files, dates, config.threshold)

        return [(doc, verdicts[i]) for i, doc in enumerate(documents)]

    async def evaluate(
        self, documents: Sequence[DocumentRecord], config: AuditConfig
    ) -> StalenessReport:
        """Classify every document and aggregate the results into a report."""
        verdicts = await self.classify(documents, config)
        return build_report(verdicts, config.threshold, self._clock())

    @staticmethod
    def _expand(doc: DocumentRecord, repo_root: Path) -> set[Path]:
        files: set[Path] = set()
        unmatched: list[str] = []
        for pattern in doc.related_artifacts or ():
            matches = expand_pattern(pattern, repo_root)
            if not matches:
                unmatched.append(pattern)
            files |= matches
        if not files:
            logger.warning(
                "No files found for %s: pattern(s) %s matched nothing",
                doc.path,
                ", ".join(repr(p) for p in unmatched),
            )
        return files


def check_staleness(
    documents: Sequence[DocumentRecord],
    config: AuditConfig,
    provider: VCSDateProvider,
) -> StalenessReport:
    """Synchronous wrapper around StalenessEvaluator.evaluate()."""
    return asyncio.run(StalenessEvaluator(provider).evaluate(documents, config))
