"""Parse and validate YAML front matter into DocumentRecords."""

from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from docfresh.errors import DocumentParseError

from .models import UNTITLED, DocumentRecord

logger = logging.getLogger(__name__)

_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

# Header keys holding the artifact list; the first one present wins.
_ARTIFACT_KEYS = ("related_artifacts", "related_code")


class _HeaderLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as plain strings."""


# Drop the implicit timestamp resolver so "2026-13-45" reaches date
# validation as a string instead of failing (or rolling over) inside YAML.
_HeaderLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def split_frontmatter(content: str) -> tuple[str | None, str]:
    """Split a markdown file into YAML front matter and body.

    Returns (yaml_str, body). yaml_str is None if no front matter found.
    """
    lines = content.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != "---":
        return None, content

    for i, line in enumerate(lines[1:], start=1):
        if line.rstrip() == "---":
            return "".join(lines[1:i]), "".join(lines[i + 1:])
    return None, content


def parse_iso_date(value: str) -> date | None:
    """Return the date for a strict YYYY-MM-DD string, or None."""
    if not _ISO_DATE_RE.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_header(content: str, path: str | Path) -> DocumentRecord:
    """Build a DocumentRecord from raw document text.

    Wrongly typed optional fields are treated as absent. Raises
    DocumentParseError when the header isn't valid YAML or isn't a mapping,
    or when last_verified isn't a real YYYY-MM-DD date.
    """
    path = str(path)
    yaml_str, _body = split_frontmatter(content)
    data: Any = {}
    if yaml_str is not None:
        try:
            data = yaml.load(yaml_str, Loader=_HeaderLoader)
        except yaml.YAMLError as e:
            raise DocumentParseError(path, f"invalid YAML header: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise DocumentParseError(
                path, f"header must be a mapping, got {type(data).__name__}"
            )

    title = data.get("title")
    description = data.get("description")

    return DocumentRecord(
        path=path,
        title=title if isinstance(title, str) and title.strip() else UNTITLED,
        description=description if isinstance(description, str) else "",
        related_artifacts=_artifacts(data, path),
        last_verified=_last_verified(data, path),
    )


def _artifacts(data: dict[str, Any], path: str) -> tuple[str, ...] | None:
    for key in _ARTIFACT_KEYS:
        if key not in data:
            continue
        value = data[key]
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return tuple(value)
        logger.warning(
            "%s: %s must be a list of strings, got %r; treating as absent", path, key, value
        )
        return None
    return None


def _last_verified(data: dict[str, Any], path: str) -> date | None:
    value = data.get("last_verified")
    if value is None:
        return None
    parsed = parse_iso_date(value) if isinstance(value, str) else None
    if parsed is None:
        raise DocumentParseError(path, f"invalid last_verified {value!r}, expected YYYY-MM-DD")
    return parsed
