"""Freshness tracking: per-document verdicts and the staleness report."""

from docfresh.freshness.evaluator import (
    StalenessEvaluator,
    build_report,
    check_staleness,
    classify_document,
)
from docfresh.freshness.models import (
    ArtifactChange,
    Fresh,
    Stale,
    StaleDocument,
    StalenessReport,
    Unchecked,
    Verdict,
)

__all__ = [
    "ArtifactChange",
    "Fresh",
    "Stale",
    "StaleDocument",
    "StalenessEvaluator",
    "StalenessReport",
    "Unchecked",
    "Verdict",
    "build_report",
    "check_staleness",
    "classify_document",
]
