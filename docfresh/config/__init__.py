from .loader import DEFAULT_CONFIG_PATH, DEFAULT_CONFIG_TEMPLATE, load_config
from .models import AuditConfig, OutputSettings, ReportFormat, VCSSettings

__all__ = [
    "AuditConfig",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_CONFIG_TEMPLATE",
    "OutputSettings",
    "ReportFormat",
    "VCSSettings",
    "load_config",
]
