"""Error types raised by the docfresh engine."""

from __future__ import annotations

from pathlib import Path


class DocfreshError(Exception):
    """Base class for every error docfresh raises on purpose."""


class ConfigurationError(DocfreshError):
    """Raised when caller-supplied overrides don't form a valid config.

    Problems in the config *file* never raise; they are logged and the
    offending field falls back to its default.
    """


class DocumentParseError(DocfreshError):
    """A single document's header could not be turned into a record."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class VCSUnavailableError(DocfreshError):
    """No usable version-control repository; the run cannot continue."""


class VCSTimeoutError(VCSUnavailableError):
    """The batch of history queries ran past its wall-clock budget."""

    def __init__(self, timeout: float, file_count: int) -> None:
        self.timeout = timeout
        self.file_count = file_count
        super().__init__(
            f"git history queries did not finish within {timeout:g}s "
            f"({file_count} file(s) queried). Raise vcs.batch_timeout or narrow related_artifacts."
        )


class ReportWriteError(DocfreshError):
    """A report file or its parent directory could not be written."""

    def __init__(self, path: str | Path, cause: Exception) -> None:
        self.path = str(path)
        super().__init__(f"Cannot write report to {self.path}: {cause}")
        self.__cause__ = cause
