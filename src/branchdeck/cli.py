"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import asyncio
import logging as py_logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from .components.branch_list import BranchListController
from .components.stash_list import StashList
from .config import AppConfig, get_config_path, get_data_dir, load_config, version_message
from .errors import BranchDeckError, ExitCode, user_facing_error
from .git.backend import BranchBackend, GitCliBackend
from .logging import configure_logging, default_log_path, normalize_level

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")

AppLauncher = Callable[[BranchListController, StashList | None], int | None]


def _log_level_type(value: str) -> str:
    normalized = normalize_level(value)
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="branchdeck",
        description="Browse, create, check out and delete local git branches.",
    )
    parser.add_argument("--repo", type=Path, default=None, help="Repository path (defaults to cwd)")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.toml")
    parser.add_argument("--log-level", type=_log_level_type, default=None)
    parser.add_argument("--log-file", type=Path, default=None)
    parser.add_argument("--version", action="store_true", help="Print version and directories")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def resolve_config(namespace: argparse.Namespace) -> AppConfig:
    config = load_config(namespace.config)
    if namespace.repo is not None:
        config.repo_path = str(namespace.repo.expanduser())
    if namespace.log_level is not None:
        config.log_level = namespace.log_level
    return config


def validate_repo_path(namespace: argparse.Namespace, config: AppConfig) -> None:
    if not config.repo_path:
        return
    repo = Path(config.repo_path).expanduser()
    if repo.is_dir():
        return
    if namespace.repo is not None:
        raise BranchDeckError(
            f"Repository path is not a directory: {repo}",
            code=ExitCode.VALIDATION_ERROR,
            hint="--repo must point to an existing directory.",
        )
    raise BranchDeckError(
        f"Configured repo_path is not a directory: {repo}",
        code=ExitCode.CONFIG_ERROR,
        hint=f"Fix repo_path in {get_config_path(namespace.config)}.",
    )


def build_components(
    config: AppConfig,
    *,
    backend: BranchBackend | None = None,
) -> tuple[BranchListController, StashList | None]:
    repo = Path(config.repo_path).expanduser() if config.repo_path else Path.cwd()
    resolved_backend = backend or GitCliBackend(repo, force_delete=config.force_delete)
    controller = BranchListController(resolved_backend, show_upstream=config.show_upstream)
    stash_list = StashList(resolved_backend) if config.show_stashes else None
    return controller, stash_list


def launch_app(controller: BranchListController, stash_list: StashList | None) -> int:
    from branchdeck.app import BranchDeckApp

    result = BranchDeckApp(controller, stash_list=stash_list).run()
    return int(result) if isinstance(result, int) else int(ExitCode.SUCCESS)


def main(
    argv: Sequence[str] | None = None,
    *,
    app_launcher: AppLauncher | None = None,
    backend: BranchBackend | None = None,
) -> int:
    try:
        namespace = parse_args(argv)
    except SystemExit as exc:
        return int(exc.code or 0)

    config = resolve_config(namespace)
    if namespace.version:
        print(version_message(config))
        return int(ExitCode.SUCCESS)

    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
    else:
        log_path = default_log_path(get_data_dir())
    logger = configure_logging(level=config.log_level, log_file=log_path)

    try:
        validate_repo_path(namespace, config)
        controller, stash_list = build_components(config, backend=backend)
        logger.debug("Loading branches repo=%s", config.repo_path or Path.cwd())
        asyncio.run(controller.load())
        launcher = app_launcher or launch_app
        result = launcher(controller, stash_list)
        if isinstance(result, int):
            return result
        return int(ExitCode.SUCCESS)
    except BranchDeckError as exc:
        logger.error(
            "Handled BranchDeckError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        hint = exc.hint or "Run branchdeck inside a git repository or pass --repo."
        print(user_facing_error(exc.message, hint=hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        hint = f"Inspect logs: {log_path}"
        print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
