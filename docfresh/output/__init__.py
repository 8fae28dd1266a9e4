from .annotations import format_annotation, staleness_annotation, staleness_level
from .writer import (
    ReportWriter,
    generate_report,
    load_json_report,
    render_json,
    render_markdown,
)

__all__ = [
    "ReportWriter",
    "format_annotation",
    "generate_report",
    "load_json_report",
    "render_json",
    "render_markdown",
    "staleness_annotation",
    "staleness_level",
]
