"""Startup configuration loading and validation helpers.

Provides strict/non-strict parsing of the optional ``codemap.yml`` file used
by the command-line runner and the directory walker.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Default configuration file looked up in the walk root
DEFAULT_CONFIG_FILE = "codemap.yml"

# Rust file extensions
RUST_EXTENSIONS: frozenset[str] = frozenset({".rs"})

# Directory names never descended into by the walker
EXCLUDED_DIRS: frozenset[str] = frozenset({
    "target",
    "node_modules",
    "venv",
    "__pycache__",
})

LOG_LEVEL_ENV = "CODEMAP_LOG_LEVEL"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigValidationError(RuntimeError):
    """Raised when strict startup validation fails."""


@dataclass(frozen=True)
class CodemapConfig:
    """Walker and runner settings."""

    extensions: frozenset[str] = RUST_EXTENSIONS
    exclude_dirs: frozenset[str] = EXCLUDED_DIRS
    respect_gitignore: bool = True
    allow_parse_errors: bool = False
    continue_on_error: bool = True
    log_level: str = "INFO"


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag("STRICT_CONFIG_VALIDATION", default=default)


def _fail(msg: str, strict: bool, exc: Optional[BaseException] = None) -> None:
    if strict:
        raise ConfigValidationError(msg) from exc
    logger.warning("%s; continuing with defaults", msg)


def load_config_file(config_path: str, strict: bool = False) -> dict[str, Any]:
    """Load and parse a YAML config file.

    In non-strict mode this returns an empty dict on parse/read failures.
    In strict mode this raises ``ConfigValidationError``.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        _fail(f"Config file not found: {config_path}", strict, exc)
        return {}
    except yaml.YAMLError as exc:
        _fail(f"Failed to parse config YAML at {config_path}: {exc}", strict, exc)
        return {}

    if payload is None:
        return {}

    if not isinstance(payload, dict):
        _fail(f"Unexpected config payload type: {type(payload).__name__}", strict)
        return {}

    return payload


def _normalize_extension(raw: str) -> str:
    text = raw.strip()
    return text if text.startswith(".") else f".{text}"


def _coerce_string_set(key: str, value: Any, strict: bool) -> Optional[frozenset[str]]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        _fail(f"Config key '{key}' must be a list of strings", strict)
        return None
    if key == "extensions":
        return frozenset(_normalize_extension(item) for item in value)
    return frozenset(value)


def build_config(payload: dict[str, Any], strict: bool = False) -> CodemapConfig:
    """Validate a raw payload and build a ``CodemapConfig``.

    Unknown keys and ill-typed values are rejected in strict mode and
    ignored with a warning otherwise.
    """
    known = {f.name for f in fields(CodemapConfig)}
    overrides: dict[str, Any] = {}

    for key, value in payload.items():
        if key not in known:
            _fail(f"Unknown config key '{key}'", strict)
            continue

        if key in ("extensions", "exclude_dirs"):
            coerced = _coerce_string_set(key, value, strict)
            if coerced is not None:
                overrides[key] = coerced
        elif key == "log_level":
            if not isinstance(value, str) or value.upper() not in _LOG_LEVELS:
                _fail(f"Config key 'log_level' has invalid value {value!r}", strict)
                continue
            overrides[key] = value.upper()
        elif not isinstance(value, bool):
            _fail(f"Config key '{key}' must be a boolean", strict)
        else:
            overrides[key] = value

    return replace(CodemapConfig(), **overrides)


def resolve_log_level(config: CodemapConfig) -> str:
    """Resolve the effective log level, ``CODEMAP_LOG_LEVEL`` taking precedence."""
    raw = os.getenv(LOG_LEVEL_ENV)
    if raw and raw.strip().upper() in _LOG_LEVELS:
        return raw.strip().upper()
    return config.log_level


def load_startup_config(
    root: str,
    config_path: Optional[str] = None,
    strict: Optional[bool] = None,
) -> CodemapConfig:
    """Load ``.env``, then the explicit or default config file for ``root``.

    Args:
        root: Walk root; ``codemap.yml`` is looked up there when
            ``config_path`` is not given.
        config_path: Explicit config file. A missing explicit file is an
            error in strict mode.
        strict: Override for ``STRICT_CONFIG_VALIDATION``.

    Returns:
        The validated configuration, defaults when no file applies.
    """
    load_dotenv()
    if strict is None:
        strict = resolve_strict_config_validation()

    if config_path is None:
        base = root if os.path.isdir(root) else os.path.dirname(os.path.abspath(root))
        candidate = os.path.join(base, DEFAULT_CONFIG_FILE)
        if not os.path.isfile(candidate):
            logger.debug("No %s found under %s; using defaults", DEFAULT_CONFIG_FILE, base)
            return CodemapConfig()
        config_path = candidate

    payload = load_config_file(config_path, strict=strict)
    config = build_config(payload, strict=strict)
    logger.info("Loaded configuration from %s", config_path)
    return config
