"""Project configuration loading and validation.

Reads the optional YAML project file used by the extraction CLI. In
non-strict mode problems are logged and defaults are used; in strict mode
they raise ``ConfigValidationError``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

STRICT_CONFIG_ENV = "LUADOC_STRICT_CONFIG"

DEFAULT_OUTPUT_FILE = "output/doc_blocks.jsonl"
DEFAULT_MODULE_TREE_FILE = "output/modules.json"


class ConfigValidationError(RuntimeError):
    """Raised when strict config validation fails."""


@dataclass(frozen=True)
class ProjectConfig:
    """Settings for one extraction run."""

    project_name: Optional[str] = None
    source_dir: Optional[str] = None
    output_file: str = DEFAULT_OUTPUT_FILE
    module_tree_file: Optional[str] = DEFAULT_MODULE_TREE_FILE
    exclude_dirs: tuple[str, ...] = field(default_factory=tuple)
    log_level: str = "INFO"

    def with_overrides(self, **overrides: Any) -> "ProjectConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if "exclude_dirs" in values:
            values["exclude_dirs"] = tuple(values["exclude_dirs"])
        return replace(self, **values)


_STR_KEYS = ("project_name", "source_dir", "output_file", "module_tree_file", "log_level")


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``LUADOC_STRICT_CONFIG`` env."""
    return _env_flag(STRICT_CONFIG_ENV, default=default)


def _fail(msg: str, strict: bool) -> None:
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; using defaults", msg)


def load_config_payload(config_path: str, strict: bool = False) -> dict[str, Any]:
    """Load the raw YAML mapping from ``config_path``.

    In non-strict mode this returns an empty dict on read/parse failures.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        msg = f"Config file not found: {config_path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse config YAML at {config_path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        _fail(f"Config file is empty: {config_path}", strict)
        return {}

    if not isinstance(payload, dict):
        _fail(f"Unexpected config payload type: {type(payload).__name__}", strict)
        return {}

    return payload


def config_from_payload(payload: dict[str, Any], strict: bool = False) -> ProjectConfig:
    """Validate a raw mapping and build a ``ProjectConfig``."""
    values: dict[str, Any] = {}
    for key, value in payload.items():
        if key in _STR_KEYS:
            if value is None:
                continue
            if not isinstance(value, str):
                _fail(f"Config key '{key}' must be a string", strict)
                continue
            values[key] = value
        elif key == "exclude_dirs":
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                _fail("Config key 'exclude_dirs' must be a list of strings", strict)
                continue
            values[key] = tuple(value)
        else:
            _fail(f"Unknown config key '{key}'", strict)
    return ProjectConfig(**values)


def load_project_config(
    config_path: Optional[str] = None,
    strict: Optional[bool] = None,
) -> ProjectConfig:
    """Load the project config, falling back to defaults.

    Args:
        config_path: Path to a YAML file. None means defaults only.
        strict: Raise on invalid config. None reads ``LUADOC_STRICT_CONFIG``.
    """
    if strict is None:
        strict = resolve_strict_config_validation(default=False)
    if config_path is None:
        return ProjectConfig()
    payload = load_config_payload(config_path, strict=strict)
    config = config_from_payload(payload, strict=strict)
    logger.debug("Loaded project config from %s: %s", config_path, config)
    return config
