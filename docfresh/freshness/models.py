"""Verdicts and the staleness report."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class ArtifactChange(BaseModel):
    """A related artifact modified past the document's grace period."""

    model_config = ConfigDict(frozen=True)

    file: str
    last_modified: date
    days_since_verified: int


class StaleDocument(BaseModel):
    """A document with at least one artifact change past the threshold."""

    model_config = ConfigDict(frozen=True)

    doc: str
    title: str
    last_verified: date
    changes: list[ArtifactChange] = Field(default_factory=list)


class StalenessReport(BaseModel):
    """Outcome of one evaluation run.

    fresh_count + unchecked_count + len(stale_documents) always equals the
    number of documents evaluated.
    """

    model_config = ConfigDict(frozen=True)

    stale_documents: list[StaleDocument] = Field(default_factory=list)
    fresh_count: int = 0
    unchecked_count: int = 0
    scanned_at: datetime
    threshold_days: int

    @property
    def stale_count(self) -> int:
        return len(self.stale_documents)

    @property
    def total_documents(self) -> int:
        return self.fresh_count + self.unchecked_count + self.stale_count

    @property
    def has_stale(self) -> bool:
        return bool(self.stale_documents)


@dataclass(frozen=True)
class Fresh:
    """Every related artifact is within the threshold (or has no history)."""


@dataclass(frozen=True)
class Unchecked:
    """The document could not be checked; reason says why."""

    reason: str


@dataclass(frozen=True)
class Stale:
    """Changes ordered by days_since_verified desc, then file path."""

    changes: tuple[ArtifactChange, ...]


Verdict = Fresh | Unchecked | Stale
