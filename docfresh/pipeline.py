"""End-to-end audit run: scan, evaluate, write reports."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from docfresh.config.models import AuditConfig
from docfresh.corpus.scanner import scan_documents
from docfresh.errors import VCSUnavailableError
from docfresh.freshness.evaluator import StalenessEvaluator
from docfresh.freshness.models import StalenessReport
from docfresh.output.writer import ReportWriter
from docfresh.vcs import VCSDateProvider, create_provider

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STALE = 1
EXIT_FAILURE = 2


@dataclass
class AuditResult:
    report: StalenessReport
    written: list[Path] = field(default_factory=list)


def exit_code_for(report: StalenessReport) -> int:
    """0 when nothing is stale, 1 otherwise."""
    return EXIT_STALE if report.has_stale else EXIT_OK


async def ensure_vcs(provider: VCSDateProvider) -> Path:
    """Return the repository root or raise VCSUnavailableError."""
    if not await provider.is_available():
        raise VCSUnavailableError(
            "git is not installed or not on PATH - staleness detection needs git history."
        )
    root = await provider.repo_root()
    if root is None:
        raise VCSUnavailableError(
            "Not a git repository - run docfresh from inside the repository checkout "
            "(CI checkouts need full history, e.g. fetch-depth: 0)."
        )
    return root


async def audit(config: AuditConfig, provider: VCSDateProvider | None = None) -> AuditResult:
    """Run one audit.

    The VCS check happens before anything else, so when it fails no report
    files are written. ReportWriteError propagates unchanged.
    """
    provider = provider or create_provider(config.vcs)
    root = await ensure_vcs(provider)
    logger.debug("Repository root: %s", root)

    documents = scan_documents(config.docs_root, config.ignore)
    logger.info("Found %d documentation file(s) under %s", len(documents), config.docs_root)

    report = await StalenessEvaluator(provider).evaluate(documents, config)
    written = ReportWriter(config.output).write(report)
    return AuditResult(report=report, written=written)


def run_audit(config: AuditConfig, provider: VCSDateProvider | None = None) -> AuditResult:
    """Synchronous entry point for callers without an event loop."""
    return asyncio.run(audit(config, provider))
