"""docfresh - flag documentation whose related artifacts changed after verification."""

from docfresh.config import AuditConfig, load_config
from docfresh.corpus import DocumentRecord, expand_patterns, scan_documents
from docfresh.errors import (
    ConfigurationError,
    DocfreshError,
    DocumentParseError,
    ReportWriteError,
    VCSTimeoutError,
    VCSUnavailableError,
)
from docfresh.freshness import StalenessEvaluator, StalenessReport, check_staleness
from docfresh.output import ReportWriter, generate_report
from docfresh.pipeline import AuditResult, exit_code_for, run_audit
from docfresh.vcs import GitDateProvider, VCSDateProvider, create_provider

__version__ = "0.1.0"

__all__ = [
    "AuditConfig",
    "AuditResult",
    "ConfigurationError",
    "DocfreshError",
    "DocumentParseError",
    "DocumentRecord",
    "GitDateProvider",
    "ReportWriteError",
    "ReportWriter",
    "StalenessEvaluator",
    "StalenessReport",
    "VCSDateProvider",
    "VCSTimeoutError",
    "VCSUnavailableError",
    "check_staleness",
    "create_provider",
    "exit_code_for",
    "expand_patterns",
    "generate_report",
    "load_config",
    "run_audit",
    "scan_documents",
]
