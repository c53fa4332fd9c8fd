"""Configuration loader for mcq-generator commands."""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, Optional

from mcq_generator.core import config as core_config
from mcq_generator.core import workspace as workspace_mod
from mcq_generator.generation.client import (
    DEFAULT_ENDPOINT,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT,
    RetryPolicy,
)
from mcq_generator.quiz.state import DEFAULT_REVEAL_INTERVAL

CONFIG_FILENAME = "mcq_generator.toml"
ENV_PREFIX = "MCQ_GENERATOR_"
CONFIG_ENV = f"{ENV_PREFIX}CONFIG"


class McqConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class McqConfig:
    """Fully resolved settings for one run."""

    endpoint: str
    model: str
    timeout: float
    retry: RetryPolicy
    reveal_interval: float
    output_dir: Path
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced values applied on top of env and file options."""

    model: Optional[str] = None
    output_dir: Optional[Path] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    config: McqConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Resolve settings with precedence CLI > env > TOML > defaults."""

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    try:
        layout = workspace_mod.ensure_workspace(
            env=env_map, path=workspace_path
        )
    except workspace_mod.WorkspaceError as exc:
        raise McqConfigError(str(exc)) from exc

    requested = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=layout.path_for("config") / CONFIG_FILENAME,
    )

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            table = core_config.read_config_table(requested, table)
        except core_config.TomlConfigError as exc:
            raise McqConfigError(str(exc)) from exc
        loaded_path = requested
    elif config_path is not None or _env(env_map, "CONFIG"):
        raise McqConfigError(f"Config file not found: {requested}")

    api, retry = table["api"], table["retry"]
    config = McqConfig(
        endpoint=_require_str(
            _pick_first(_env(env_map, "ENDPOINT"), api["endpoint"]),
            "api.endpoint",
        ),
        model=_require_str(
            _pick_first(
                overrides.model, _env(env_map, "MODEL"), api["model"]
            ),
            "api.model",
        ),
        timeout=_positive_float(
            _pick_first(_env(env_map, "TIMEOUT"), api["timeout"]),
            "api.timeout",
        ),
        retry=RetryPolicy(
            max_attempts=_positive_int(
                _pick_first(
                    _env(env_map, "MAX_ATTEMPTS"), retry["max_attempts"]
                ),
                "retry.max_attempts",
            ),
            backoff_base=_non_negative_float(
                _pick_first(
                    _env(env_map, "BACKOFF_BASE"), retry["backoff_base"]
                ),
                "retry.backoff_base",
            ),
        ),
        reveal_interval=_non_negative_float(
            _pick_first(
                _env(env_map, "REVEAL_INTERVAL"), table["reveal"]["interval"]
            ),
            "reveal.interval",
        ),
        output_dir=_resolve_output_dir(
            _pick_first(
                overrides.output_dir,
                _env(env_map, "OUTPUT_DIR"),
                table["export"]["output_dir"],
            ),
            layout,
        ),
        log_level=_require_str(
            _pick_first(
                overrides.log_level,
                _env(env_map, "LOG_LEVEL"),
                table["logging"]["level"],
            ),
            "logging.level",
        ).upper(),
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def read_template() -> str:
    """Return the packaged ``template.toml`` text."""

    resource = resources.files("mcq_generator").joinpath("template.toml")
    return resource.read_text(encoding="utf-8")


def write_default_config(path: Path, *, overwrite: bool = False) -> Path:
    try:
        return core_config.write_private_text(
            path, read_template(), overwrite=overwrite
        )
    except core_config.TomlConfigError as exc:
        raise McqConfigError(str(exc)) from exc


def _default_table() -> dict[str, dict[str, Any]]:
    defaults = RetryPolicy()
    return {
        "api": {
            "endpoint": DEFAULT_ENDPOINT,
            "model": DEFAULT_MODEL,
            "timeout": DEFAULT_TIMEOUT,
        },
        "retry": {
            "max_attempts": defaults.max_attempts,
            "backoff_base": defaults.backoff_base,
        },
        "reveal": {"interval": DEFAULT_REVEAL_INTERVAL},
        "export": {"output_dir": ""},
        "logging": {"level": "INFO"},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = _env(env_map, "CONFIG")
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _resolve_output_dir(
    value: object, layout: workspace_mod.WorkspaceLayout
) -> Path:
    if isinstance(value, Path):
        candidate: Optional[Path] = value
    elif isinstance(value, str):
        candidate = Path(value.strip()) if value.strip() else None
    else:
        raise McqConfigError("export.output_dir must be a string.")
    if candidate is None:
        return layout.path_for("exports")
    candidate = candidate.expanduser()
    if not candidate.is_absolute():
        candidate = layout.home / candidate
    return candidate.resolve()


def _env(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def _require_str(value: object, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise McqConfigError(f"{name} must be a non-empty string.")
    return value.strip()


def _number(value: object, name: str, kind: type) -> Any:
    if isinstance(value, bool):
        raise McqConfigError(f"{name} must be a number.")
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise McqConfigError(f"{name} must be a number.") from exc


def _positive_int(value: object, name: str) -> int:
    number = _number(value, name, int)
    if number < 1:
        raise McqConfigError(f"{name} must be at least 1.")
    return number


def _positive_float(value: object, name: str) -> float:
    number = _number(value, name, float)
    if number <= 0:
        raise McqConfigError(f"{name} must be greater than 0.")
    return number


def _non_negative_float(value: object, name: str) -> float:
    number = _number(value, name, float)
    if number < 0:
        raise McqConfigError(f"{name} must not be negative.")
    return number
