"""Configuration loading for repograph (``repograph.toml`` + environment)."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .models import RepographConfig

CONFIG_FILENAME = "repograph.toml"

# Environment variable -> config field.
ENV_OVERRIDES: dict[str, str] = {
    "GITHUB_TOKEN": "github_token",
    "REPOGRAPH_API_BASE_URL": "api_base_url",
    "REPOGRAPH_DEFAULT_BRANCH": "default_branch",
}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or validated."""


def _resolve_config_path(path: Path | None) -> Path | None:
    if path is None:
        candidate = Path.cwd() / CONFIG_FILENAME
        return candidate if candidate.is_file() else None
    path = path.expanduser()
    if path.is_dir():
        path = path / CONFIG_FILENAME
    return path


def _read_table(path: Path) -> dict[str, Any]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    # Settings may live at the top level or under a [repograph] table.
    table = data.get("repograph", data)
    if not isinstance(table, dict):
        raise ConfigError(f"{path.name}: [repograph] must be a table")
    return table


def load_config(path: Path | None = None, **overrides: Any) -> RepographConfig:
    """Build a :class:`RepographConfig`.

    Precedence: explicit *overrides* (CLI flags) > environment > file > default.
    ``None`` overrides are ignored so unset CLI options fall through.
    """
    values: dict[str, Any] = {}

    config_path = _resolve_config_path(path)
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        values.update(_read_table(config_path))

    for env_name, field_name in ENV_OVERRIDES.items():
        env_value = os.environ.get(env_name, "").strip()
        if env_value:
            values[field_name] = env_value

    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return RepographConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
