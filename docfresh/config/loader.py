"""YAML config loading with per-field fallback to defaults."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import BaseModel, TypeAdapter, ValidationError

from docfresh.errors import ConfigurationError

from .models import AuditConfig, OutputSettings, VCSSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = ".docs-staleness.yml"


def _field_adapter(model: type[BaseModel], name: str) -> TypeAdapter[Any]:
    """Validator for one model field, carrying its constraints (gt=0, strict, ...)."""
    field = model.model_fields[name]
    if field.metadata:
        return TypeAdapter(Annotated[(field.annotation, *field.metadata)])
    return TypeAdapter(field.annotation)


# ignore is a tuple on the model but a YAML list in the file; handled separately
_TOP_LEVEL_FIELDS: dict[str, TypeAdapter[Any]] = {
    name: _field_adapter(AuditConfig, name) for name in ("threshold", "docs_root", "log_level")
}

_SECTION_FIELDS: dict[str, dict[str, TypeAdapter[Any]]] = {
    "output": {name: _field_adapter(OutputSettings, name) for name in OutputSettings.model_fields},
    "vcs": {name: _field_adapter(VCSSettings, name) for name in VCSSettings.model_fields},
}


def _is_valid(adapter: TypeAdapter[Any], value: Any) -> bool:
    # strict: YAML `true` is not a threshold of 1 and "yes" is not a boolean
    try:
        adapter.validate_python(value, strict=True)
    except ValidationError:
        return False
    return True


def load_config(
    config_path: str | Path | None = DEFAULT_CONFIG_PATH,
    overrides: Mapping[str, Any] | None = None,
) -> AuditConfig:
    """Build the run config with precedence defaults < file < overrides.

    A missing or broken config file is never fatal: the problem is logged and
    every field that can't be used falls back to its default. Overrides are
    trusted to be typed by the caller; if they still fail validation a
    ConfigurationError is raised.
    """
    file_values = _read_config_file(Path(config_path)) if config_path else {}
    merged = _deep_merge(file_values, dict(overrides or {}))

    try:
        config = AuditConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration overrides: {e}") from e

    return _resolve_paths(config)


def _read_config_file(path: Path) -> dict[str, Any]:
    """Load and type-check a YAML config file; {} when unusable."""
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read config from %s: %s", path, e)
        return {}
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML in %s, using defaults: %s", path, e)
        return {}

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning(
            "Config in %s must be a mapping, got %s; using defaults",
            path,
            type(raw).__name__,
        )
        return {}

    return _validate_fields(raw, path)


def _validate_fields(raw: dict[str, Any], source: Path) -> dict[str, Any]:
    """Keep only well-typed fields, warning about each one dropped."""
    validated: dict[str, Any] = {}

    for key, value in raw.items():
        if key in _TOP_LEVEL_FIELDS:
            if _is_valid(_TOP_LEVEL_FIELDS[key], value):
                validated[key] = value
            else:
                _warn_dropped(source, key, value)
        elif key == "ignore":
            if isinstance(value, list):
                patterns = [p for p in value if isinstance(p, str)]
                if len(patterns) != len(value):
                    logger.warning(
                        "Config %s: ignoring non-string entries in 'ignore'", source
                    )
                validated["ignore"] = patterns
            else:
                _warn_dropped(source, key, value)
        elif key in _SECTION_FIELDS:
            if not isinstance(value, dict):
                _warn_dropped(source, key, value)
                continue
            section: dict[str, Any] = {}
            for sub_key, sub_value in value.items():
                adapter = _SECTION_FIELDS[key].get(sub_key)
                if adapter is None:
                    logger.debug("Config %s: unknown key %s.%s", source, key, sub_key)
                elif _is_valid(adapter, sub_value):
                    section[sub_key] = sub_value
                else:
                    _warn_dropped(source, f"{key}.{sub_key}", sub_value)
            validated[key] = section
        else:
            logger.debug("Config %s: unknown key %s", source, key)

    return validated


def _warn_dropped(source: Path, key: str, value: Any) -> None:
    logger.warning(
        "Config %s: invalid value for %r (%r), falling back to default", source, key, value
    )


def _deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Merge two config dicts; nested sections merge key by key."""
    merged = dict(base)
    for key, value in update.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(dict(merged[key]), dict(value))
        else:
            merged[key] = value
    return merged


def _resolve_paths(config: AuditConfig) -> AuditConfig:
    """Make every path in the config absolute against the working directory."""
    output = config.output.model_copy(
        update={
            "json_file": str(Path(config.output.json_file).resolve()),
            "markdown_file": str(Path(config.output.markdown_file).resolve()),
        }
    )
    return config.model_copy(
        update={"docs_root": str(Path(config.docs_root).resolve()), "output": output}
    )


# Default YAML template for `docfresh config init`
DEFAULT_CONFIG_TEMPLATE = """\
# .docs-staleness.yml

# Days a related artifact may change after last_verified before the doc is stale
threshold: 7

# Root directory scanned for *.md documents
docs_root: "./src"

# Glob patterns (relative to docs_root) for documents to skip
ignore: []
#  - "**/drafts/**"

# Reports
output:
  format: "both"                  # json | markdown | both
  json_file: ".docs-staleness-report.json"
  markdown_file: "docs-staleness-report.md"

# Version control
vcs:
  use_author_date: false          # author date instead of commit date
  include_uncommitted: false      # working-tree changes count as modified today
  concurrency: 10                 # max git queries in flight
  query_timeout: 10               # seconds per git call
  batch_timeout: 120              # seconds for the whole history phase

# Logging
log_level: "info"                 # debug | info | warning | error
"""
