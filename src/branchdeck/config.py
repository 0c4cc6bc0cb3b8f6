"""Configuration loading and application directories."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Literal, cast

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ConfigDict

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

APP_NAME = "branchdeck"
CONFIG_FILENAME = "config.toml"
CONFIG_DIR_ENV = "BRANCHDECK_CONFIG"
DATA_DIR_ENV = "BRANCHDECK_DATA"

LogLevel = Literal["DEBUG", "INFO", "WARN", "ERROR"]
_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


class AppConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    repo_path: str = ""
    log_level: LogLevel = "INFO"
    force_delete: bool = True
    show_upstream: bool = True
    show_stashes: bool = True


def get_config_dir(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    override = env.get(CONFIG_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(APP_NAME, appauthor=False))


def get_data_dir(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    override = env.get(DATA_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path(user_data_dir(APP_NAME, appauthor=False))


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        return get_config_dir() / CONFIG_FILENAME
    return Path(path).expanduser()


def package_version() -> str:
    try:
        return version(APP_NAME)
    except PackageNotFoundError:
        return "0.0.0+unknown"


def _sanitize(raw: dict[str, object]) -> AppConfig:
    cfg = AppConfig()

    repo_path = raw.get("repo_path", cfg.repo_path)
    if isinstance(repo_path, str):
        cfg.repo_path = repo_path

    log_level = raw.get("log_level", cfg.log_level)
    if isinstance(log_level, str):
        normalized = log_level.upper()
        if normalized == "WARNING":
            normalized = "WARN"
        if normalized in _VALID_LOG_LEVELS:
            cfg.log_level = cast(LogLevel, normalized)

    for flag in ("force_delete", "show_upstream", "show_stashes"):
        value = raw.get(flag)
        if isinstance(value, bool):
            setattr(cfg, flag, value)

    return cfg


def load_config(path: str | Path | None = None) -> AppConfig:
    resolved = get_config_path(path)
    if not resolved.exists():
        return AppConfig()
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()
    return _sanitize(raw)


def version_message(config: AppConfig, environ: Mapping[str, str] | None = None) -> str:
    return "\n".join(
        [
            f"{APP_NAME} {package_version()}",
            "",
            f"Config directory: {get_config_dir(environ)}",
            f"Data directory: {get_data_dir(environ)}",
            f"Log level: {config.log_level}",
        ]
    )
