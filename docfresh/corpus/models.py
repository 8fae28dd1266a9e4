"""Data model for scanned documents."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

UNTITLED = "Untitled"


@dataclass(frozen=True)
class DocumentRecord:
    """Metadata extracted from one document's header block.

    ``related_artifacts`` and ``last_verified`` are None when the header
    doesn't declare them (or declares them with the wrong type).
    """

    path: str
    title: str = UNTITLED
    description: str = ""
    related_artifacts: tuple[str, ...] | None = None
    last_verified: date | None = None

    @property
    def is_checkable(self) -> bool:
        """True when the document declares both artifacts and a verification date."""
        return bool(self.related_artifacts) and self.last_verified is not None
