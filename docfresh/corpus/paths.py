"""Expand related-artifact patterns into concrete files."""

from __future__ import annotations

import glob
import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def expand_pattern(pattern: str, repo_root: str | Path) -> set[Path]:
    """Resolve one literal path or glob against repo_root.

    Only regular files are returned. A pattern that matches nothing yields
    an empty set.
    """
    full = os.path.join(str(repo_root), pattern)
    if not glob.has_magic(full):
        candidate = Path(full).resolve()
        return {candidate} if candidate.is_file() else set()
    return {
        Path(match).resolve()
        for match in glob.glob(full, recursive=True)
        if os.path.isfile(match)
    }


def expand_patterns(patterns: Iterable[str], repo_root: str | Path) -> set[Path]:
    """Union of every pattern's matches, deduplicated."""
    expanded: set[Path] = set()
    for pattern in patterns:
        matches = expand_pattern(pattern, repo_root)
        if not matches:
            logger.debug("Pattern %r matched no files under %s", pattern, repo_root)
        expanded |= matches
    return expanded
