"""Core shared utilities: logging context, project config, run reports."""

from core.structured_logging import (
    configure_structured_logging,
    get_run_id,
    phase_scope,
    set_run_id,
    source_file_scope,
)
from core.project_config import (
    ConfigValidationError,
    ProjectConfig,
    load_project_config,
    resolve_strict_config_validation,
)
from core.run_artifacts import write_run_report

__all__ = [
    "configure_structured_logging",
    "get_run_id",
    "phase_scope",
    "set_run_id",
    "source_file_scope",
    "ConfigValidationError",
    "ProjectConfig",
    "load_project_config",
    "resolve_strict_config_validation",
    "write_run_report",
]
