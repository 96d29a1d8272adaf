"""Inspection configuration loading.

Reads ``.goinspect.yml`` style YAML files in strict or non-strict mode and
applies environment overrides on top.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

_FUNC_OPTIONS = {"exported", "unexported", "both"}
_KNOWN_KEYS = {
    "ignore_tests",
    "func_option",
    "reserved_subtree",
    "exclude_dirs",
    "strict_parse",
    "drop_packages",
    "log_level",
}


class ConfigValidationError(RuntimeError):
    """Raised when strict config validation fails."""


@dataclass(frozen=True)
class InspectConfig:
    """Directory walk and filtering policy."""

    ignore_tests: bool = True
    func_option: str = "both"
    reserved_subtree: Optional[str] = "cmd"
    exclude_dirs: list[str] = field(default_factory=list)
    strict_parse: bool = True
    drop_packages: list[str] = field(default_factory=list)
    log_level: str = "INFO"


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``GOINSPECT_STRICT_CONFIG`` env."""
    return _env_flag("GOINSPECT_STRICT_CONFIG", default=default)


def _fail(msg: str, strict: bool) -> None:
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; using default", msg)


def _string_list(payload: dict[str, Any], key: str, strict: bool) -> list[str]:
    raw = payload.get(key, [])
    if raw is None:
        return []
    if not isinstance(raw, list):
        _fail(f"'{key}' must be a list", strict)
        return []
    return [str(item).strip() for item in raw if str(item).strip()]


def _parse_config(payload: dict[str, Any], strict: bool) -> InspectConfig:
    unknown = sorted(set(payload) - _KNOWN_KEYS)
    if unknown:
        _fail("Unknown config keys: " + ", ".join(unknown), strict)

    defaults = InspectConfig()

    func_option = str(payload.get("func_option", defaults.func_option)).strip().lower()
    if func_option not in _FUNC_OPTIONS:
        _fail(f"func_option must be one of {sorted(_FUNC_OPTIONS)}, got {func_option!r}", strict)
        func_option = defaults.func_option

    reserved = payload.get("reserved_subtree", defaults.reserved_subtree)
    if reserved is not None:
        reserved = str(reserved).strip() or None

    return InspectConfig(
        ignore_tests=bool(payload.get("ignore_tests", defaults.ignore_tests)),
        func_option=func_option,
        reserved_subtree=reserved,
        exclude_dirs=_string_list(payload, "exclude_dirs", strict),
        strict_parse=bool(payload.get("strict_parse", defaults.strict_parse)),
        drop_packages=_string_list(payload, "drop_packages", strict),
        log_level=str(payload.get("log_level", defaults.log_level)).upper(),
    )


def load_inspect_config(config_path: Optional[str], strict: bool = False) -> InspectConfig:
    """Load inspection config from YAML.

    A ``None`` path gives the defaults. In non-strict mode read and parse
    failures log a warning and fall back to defaults; in strict mode they
    raise ``ConfigValidationError``.
    """
    if config_path is None:
        return apply_env_overrides(InspectConfig())

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        msg = f"Config file not found: {config_path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return apply_env_overrides(InspectConfig())
    except yaml.YAMLError as exc:
        msg = f"Failed to parse config YAML at {config_path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return apply_env_overrides(InspectConfig())

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        msg = f"Unexpected config payload type: {type(payload).__name__}"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; continuing with defaults", msg)
        payload = {}

    return apply_env_overrides(_parse_config(payload, strict))


def apply_env_overrides(config: InspectConfig) -> InspectConfig:
    """Apply ``GOINSPECT_IGNORE_TESTS`` and ``GOINSPECT_LOG_LEVEL`` overrides."""
    updates: dict[str, Any] = {}
    if os.getenv("GOINSPECT_IGNORE_TESTS") is not None:
        updates["ignore_tests"] = _env_flag("GOINSPECT_IGNORE_TESTS", config.ignore_tests)
    log_level = os.getenv("GOINSPECT_LOG_LEVEL")
    if log_level:
        updates["log_level"] = log_level.strip().upper()
    return replace(config, **updates) if updates else config
