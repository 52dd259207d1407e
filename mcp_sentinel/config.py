"""Configuration for mcp-sentinel."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from mcp_sentinel.exceptions import ConfigError
from mcp_sentinel.models import RuleFamily, Severity


def _default_workers() -> int:
    return os.cpu_count() or 1


class ScanSettings(BaseSettings):
    """Scan options with MCP_SENTINEL_ environment variable overrides."""

    enabled_rule_families: frozenset[RuleFamily] = frozenset(RuleFamily)
    min_severity: Severity = Severity.INFO
    min_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    max_file_size_bytes: int = Field(default=1024 * 1024, gt=0)
    worker_count: int = Field(default_factory=_default_workers, ge=1)
    timeout_seconds: float | None = Field(default=None, gt=0)

    # Per-rule, per-file matching budget
    rule_timeout_ms: int = Field(default=100, gt=0)
    context_lines: int = Field(default=2, ge=0)

    # fnmatch globs matched against target-relative paths
    include_patterns: list[str] = []
    exclude_patterns: list[str] = []

    model_config = {"env_prefix": "MCP_SENTINEL_", "frozen": True}

    @field_validator("enabled_rule_families")
    @classmethod
    def _at_least_one_family(cls, v: frozenset[RuleFamily]) -> frozenset[RuleFamily]:
        if not v:
            raise ValueError("at least one rule family must be enabled")
        return v


def _read_config_file(config_path: str | Path) -> dict[str, Any]:
    path = Path(config_path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError("config", f"cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError("config", f"invalid YAML in {path}: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("config", f"{path} must contain a mapping of options")
    return raw


def load_settings(config_path: str | Path | None = None, **overrides: Any) -> ScanSettings:
    """Build validated settings from an optional YAML file plus explicit overrides.

    Overrides whose value is ``None`` are ignored so callers can pass optional CLI
    flags straight through. Raises ConfigError naming the first invalid field.
    """
    values: dict[str, Any] = {}
    if config_path:
        values.update(_read_config_file(config_path))
    values.update({k: v for k, v in overrides.items() if v is not None})

    unknown = sorted(set(values) - set(ScanSettings.model_fields))
    if unknown:
        raise ConfigError(unknown[0], "unknown option")

    try:
        return ScanSettings(**values)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "settings"
        raise ConfigError(field, first["msg"]) from e


settings = ScanSettings()
