"""Document corpus: scanning, header parsing, and artifact path expansion."""

from docfresh.corpus.frontmatter import parse_header, parse_iso_date, split_frontmatter
from docfresh.corpus.models import UNTITLED, DocumentRecord
from docfresh.corpus.paths import expand_pattern, expand_patterns
from docfresh.corpus.scanner import discover_documents, read_document, scan_documents

__all__ = [
    "DocumentRecord",
    "UNTITLED",
    "discover_documents",
    "expand_pattern",
    "expand_patterns",
    "parse_header",
    "parse_iso_date",
    "read_document",
    "scan_documents",
    "split_frontmatter",
]
