"""Enumerate the documentation corpus and extract per-document metadata."""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable
from pathlib import Path

from docfresh.errors import DocumentParseError

from .frontmatter import parse_header
from .models import DocumentRecord

logger = logging.getLogger(__name__)

DOC_GLOB = "*.md"


def _matches_ignore(path: Path, root: Path, patterns: Iterable[str]) -> bool:
    """Check a document against fnmatch-style ignore patterns.

    Patterns are tried against the root-relative POSIX path and the absolute
    path. A leading ``**/`` also matches at the top level.
    """
    rel = path.relative_to(root).as_posix()
    absolute = path.as_posix()
    for pattern in patterns:
        if fnmatch.fnmatchcase(rel, pattern) or fnmatch.fnmatchcase(absolute, pattern):
            return True
        if pattern.startswith("**/") and fnmatch.fnmatchcase(rel, pattern[3:]):
            return True
    return False


def discover_documents(root: str | Path, ignore_patterns: Iterable[str] = ()) -> list[Path]:
    """Return every eligible document under root, sorted, minus ignored ones."""
    root = Path(root).resolve()
    if not root.is_dir():
        logger.warning("Docs root %s is not a directory; nothing to scan", root)
        return []

    patterns = tuple(ignore_patterns)
    return [
        p for p in sorted(root.rglob(DOC_GLOB))
        if p.is_file() and not _matches_ignore(p, root, patterns)
    ]


def read_document(path: str | Path) -> DocumentRecord:
    """Parse a single document. Raises DocumentParseError on failure."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentParseError(path, f"unreadable: {e}") from e
    return parse_header(content, path)


def scan_documents(root: str | Path, ignore_patterns: Iterable[str] = ()) -> list[DocumentRecord]:
    """Scan the corpus, skipping (and warning about) documents that fail to parse."""
    records: list[DocumentRecord] = []
    for path in discover_documents(root, ignore_patterns):
        try:
            records.append(read_document(path))
        except DocumentParseError as e:
            logger.warning("Skipping %s: %s", e.path, e.reason)
    logger.debug("Scanned %d document(s) under %s", len(records), root)
    return records
