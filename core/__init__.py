"""Core shared configuration, logging and run-artifact utilities."""

from core.structured_logging import (
    configure_structured_logging,
    file_scope,
    get_current_file,
    get_run_id,
    set_run_id,
)
from core.startup_config import (
    CodemapConfig,
    ConfigValidationError,
    build_config,
    load_config_file,
    load_startup_config,
    resolve_log_level,
    resolve_strict_config_validation,
)
from core.run_artifacts import build_run_report, write_run_report

__all__ = [
    "configure_structured_logging",
    "file_scope",
    "get_current_file",
    "get_run_id",
    "set_run_id",
    "CodemapConfig",
    "ConfigValidationError",
    "build_config",
    "load_config_file",
    "load_startup_config",
    "resolve_log_level",
    "resolve_strict_config_validation",
    "build_run_report",
    "write_run_report",
]
