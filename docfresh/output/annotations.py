"""GitHub Actions workflow-command annotations for staleness results."""

from __future__ import annotations

from typing import Literal

from docfresh.freshness.models import StalenessReport

AnnotationLevel = Literal["notice", "warning", "error"]
StalenessLevel = Literal["none", "low", "medium", "high"]


def _escape_message(message: str) -> str:
    # % first, or the other escapes would get double-encoded
    return (
        message.replace("%", "%25")
        .replace("\r", "%0D")
        .replace("\n", "%0A")
        .replace("::", "%3A%3A")
    )


def format_annotation(
    level: AnnotationLevel,
    message: str,
    *,
    file: str | None = None,
    line: int | None = None,
    col: int | None = None,
) -> str:
    """Build a ``::level file=...,line=...::message`` workflow command."""
    params = []
    if file:
        params.append(f"file={file}")
    if line is not None:
        params.append(f"line={line}")
    if col is not None:
        params.append(f"col={col}")

    head = f"::{level}"
    if params:
        head += " " + ",".join(params)
    return f"{head}::{_escape_message(message)}"


def staleness_annotation(report: StalenessReport, repo_root: str | None = None) -> str:
    """Warning annotation pointing at the first stale doc; "" when none are stale.

    Staleness is reported as a warning, not an error, so it doesn't block a
    merge on its own.
    """
    if not report.stale_documents:
        return ""

    count = report.stale_count
    noun = "doc" if count == 1 else "docs"
    message = (
        f"Documentation may be stale: {count} potentially stale {noun} detected. "
        "See the staleness report for details."
    )

    file = report.stale_documents[0].doc
    if repo_root and file.startswith(repo_root.rstrip("/") + "/"):
        file = file[len(repo_root.rstrip("/")) + 1:]
    return format_annotation("warning", message, file=file)


def staleness_level(report: StalenessReport) -> StalenessLevel:
    """Severity bucket from the share of checked (fresh + stale) docs that are stale."""
    stale = report.stale_count
    checked = report.fresh_count + stale
    if stale == 0 or checked == 0:
        return "none"

    share = stale * 100 / checked
    if share >= 30:
        return "high"
    if share >= 10:
        return "medium"
    return "low"
