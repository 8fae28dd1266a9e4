"""Version-control date providers for docfresh."""

from docfresh.config.models import VCSSettings
from docfresh.vcs.base import DEFAULT_CONCURRENCY, VCSDateProvider
from docfresh.vcs.git import GitDateProvider


def create_provider(settings: VCSSettings) -> VCSDateProvider:
    """Create the default (git) provider from VCS settings."""
    return GitDateProvider.from_settings(settings)


__all__ = [
    "DEFAULT_CONCURRENCY",
    "GitDateProvider",
    "VCSDateProvider",
    "create_provider",
]
