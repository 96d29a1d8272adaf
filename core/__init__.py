"""Core shared configuration, logging and reporting utilities."""

from core.structured_logging import (
    configure_structured_logging,
    directory_scope,
    get_run_id,
    set_run_id,
)
from core.inspect_config import (
    ConfigValidationError,
    InspectConfig,
    apply_env_overrides,
    load_inspect_config,
    resolve_strict_config_validation,
)
from core.run_artifacts import write_run_report

__all__ = [
    "configure_structured_logging",
    "directory_scope",
    "get_run_id",
    "set_run_id",
    "ConfigValidationError",
    "InspectConfig",
    "apply_env_overrides",
    "load_inspect_config",
    "resolve_strict_config_validation",
    "write_run_report",
]
