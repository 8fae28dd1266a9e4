"""ReportWriter: renders a StalenessReport to JSON and Markdown files."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from docfresh.config.models import OutputSettings
from docfresh.errors import ReportWriteError
from docfresh.freshness.models import StaleDocument, StalenessReport

logger = logging.getLogger(__name__)

REPORT_TITLE = "# Documentation Staleness Report"


def render_json(report: StalenessReport) -> str:
    """Serialize the report; field order follows the model definition."""
    return report.model_dump_json(indent=2) + "\n"


def load_json_report(raw: str) -> StalenessReport:
    """Parse a report previously produced by render_json()."""
    return StalenessReport.model_validate_json(raw)


def _cell(text: str) -> str:
    """Make text safe for a single Markdown table cell."""
    return text.replace("|", "\\|").replace("\n", " ")


def _changes_summary(doc: StaleDocument) -> str:
    return "<br>".join(
        f"`{Path(change.file).name}` ({change.days_since_verified}d after verification)"
        for change in doc.changes
    )


def render_markdown(report: StalenessReport) -> str:
    """Render the human-readable report.

    Only the Generated line depends on the run time; everything else is a
    pure function of the report content.
    """
    lines: list[str] = [
        REPORT_TITLE,
        "",
        f"**Generated:** {report.scanned_at.isoformat(timespec='seconds')}",
        "",
        f"**Threshold:** {report.threshold_days} days",
        "",
        "## Summary",
        "",
        f"- **Fresh:** {report.fresh_count} documents",
        f"- **Stale:** {report.stale_count} documents",
        f"- **Unchecked:** {report.unchecked_count} documents",
        "",
    ]

    if not report.stale_documents:
        lines += [
            "## All Documentation Up to Date",
            "",
            "No stale documentation detected.",
        ]
        return "\n".join(lines) + "\n"

    lines += [
        "## Stale Documentation",
        "",
        "The following documents may be out of sync with their related artifacts:",
        "",
        "| Document | Last Verified | Related Changes |",
        "|----------|---------------|-----------------|",
    ]
    for doc in report.stale_documents:
        lines.append(
            f"| [{_cell(doc.title)}](<{doc.doc}>) | {doc.last_verified.isoformat()} "
            f"| {_cell(_changes_summary(doc))} |"
        )

    lines += ["", "### Details"]
    for doc in report.stale_documents:
        lines += [
            "",
            f"#### {doc.title}",
            "",
            f"- **File:** `{doc.doc}`",
            f"- **Last Verified:** {doc.last_verified.isoformat()}",
            "",
            "**Related Changes:**",
            "",
        ]
        for change in doc.changes:
            lines += [
                f"- `{change.file}`",
                f"  - Last Modified: {change.last_modified.isoformat()}",
                f"  - Days Since Verification: {change.days_since_verified}",
            ]

    return "\n".join(lines) + "\n"


class ReportWriter:
    """Writes reports in the formats selected by OutputSettings.

    Every report is rendered and staged in a temp file beside its
    destination before any destination is replaced. On failure, staged and
    already-placed files are removed, so no partial report set is left.
    """

    def __init__(self, config: OutputSettings) -> None:
        self.config = config

    def render(self, report: StalenessReport) -> dict[Path, str]:
        """Map each destination path to its rendered content."""
        rendered: dict[Path, str] = {}
        if self.config.writes_json:
            rendered[Path(self.config.json_file)] = render_json(report)
        if self.config.writes_markdown:
            rendered[Path(self.config.markdown_file)] = render_markdown(report)
        return rendered

    def write(self, report: StalenessReport) -> list[Path]:
        """Write every configured report. Raises ReportWriteError."""
        rendered = self.render(report)
        staged: list[tuple[Path, Path]] = []
        placed: list[Path] = []
        current: Path | None = None
        try:
            for dest, content in rendered.items():
                current = dest
                dest.parent.mkdir(parents=True, exist_ok=True)
                tmp = dest.with_name(f".{dest.name}.tmp")
                tmp.write_text(content, encoding="utf-8")
                staged.append((tmp, dest))
            for tmp, dest in staged:
                current = dest
                os.replace(tmp, dest)
                placed.append(dest)
        except OSError as e:
            for path in [staged_tmp for staged_tmp, _ in staged] + placed:
                path.unlink(missing_ok=True)
            raise ReportWriteError(current, e) from e

        for dest in placed:
            logger.info("wrote %s (%d bytes)", dest, len(rendered[dest]))
        return placed


def generate_report(report: StalenessReport, config: OutputSettings) -> list[Path]:
    """Convenience wrapper around ReportWriter(config).write(report)."""
    return ReportWriter(config).write(report)
