from __future__ import annotations

import io
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

import pytest

from branchdeck import cli
from branchdeck.components.branch_list import BranchListController
from branchdeck.config import AppConfig
from branchdeck.errors import ExitCode


@pytest.fixture
def base_args(tmp_path: Path) -> list[str]:
    return ["--config", str(tmp_path / "missing.toml"), "--log-file", str(tmp_path / "branchdeck.log")]


def test_cli_help_includes_public_flags() -> None:
    help_text = cli.build_parser().format_help()

    assert "--repo" in help_text
    assert "--config" in help_text
    assert "--log-level" in help_text
    assert "--log-file" in help_text
    assert "--version" in help_text


def test_invalid_log_level_returns_error_code(base_args: list[str]) -> None:
    stream = io.StringIO()
    with redirect_stderr(stream):
        code = cli.main([*base_args, "--log-level", "LOUD"])

    assert code == int(ExitCode.INVALID_ARGS)
    assert "--log-level must be one of" in stream.getvalue()


def test_version_flag_prints_directories(base_args: list[str]) -> None:
    stream = io.StringIO()
    with redirect_stdout(stream):
        code = cli.main([*base_args, "--version"])

    assert code == 0
    assert "Config directory:" in stream.getvalue()


def test_launcher_receives_loaded_controller(base_args: list[str], make_backend) -> None:
    backend = make_backend(["main", "topic"], head="main")
    seen: dict[str, object] = {}

    def fake_app(controller: BranchListController, stash_list: object) -> int:
        seen["names"] = [item.name for item in controller.items]
        seen["stash_list"] = stash_list
        return 0

    code = cli.main(base_args, app_launcher=fake_app, backend=backend)

    assert code == 0
    assert seen["names"] == ["main", "topic"]
    assert seen["stash_list"] is not None


def test_initial_load_failure_is_reported(base_args: list[str], make_backend) -> None:
    backend = make_backend([])
    backend.fail("list", message="fatal: not a git repository")
    launched = {"called": False}

    def fake_app(controller: BranchListController, stash_list: object) -> int:
        launched["called"] = True
        return 0

    stream = io.StringIO()
    with redirect_stderr(stream):
        code = cli.main(base_args, app_launcher=fake_app, backend=backend)

    assert code == int(ExitCode.GIT_ERROR)
    assert launched["called"] is False
    assert "not a git repository" in stream.getvalue()
    assert "--repo" in stream.getvalue()


def test_unexpected_failure_points_to_logs(base_args: list[str], make_backend, tmp_path: Path) -> None:
    backend = make_backend(["main"], head="main")

    def fake_app(controller: BranchListController, stash_list: object) -> int:
        raise RuntimeError("terminal exploded")

    stream = io.StringIO()
    with redirect_stderr(stream):
        code = cli.main(base_args, app_launcher=fake_app, backend=backend)

    assert code == int(ExitCode.RUNTIME_ERROR)
    assert str(tmp_path / "branchdeck.log") in stream.getvalue()


def test_repo_and_log_level_flags_override_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('repo_path = "/from/config"\nlog_level = "ERROR"\n', encoding="utf-8")
    namespace = cli.parse_args(["--config", str(config_path), "--repo", "/from/flag", "--log-level", "debug"])

    config = cli.resolve_config(namespace)

    assert config.repo_path == "/from/flag"
    assert config.log_level == "DEBUG"


def test_build_components_respects_show_stashes(make_backend) -> None:
    controller, stash_list = cli.build_components(AppConfig(show_stashes=False), backend=make_backend([]))

    assert isinstance(controller, BranchListController)
    assert stash_list is None


def test_repo_flag_that_is_not_a_directory_is_validation_error(
    base_args: list[str], make_backend, tmp_path: Path
) -> None:
    backend = make_backend(["main"], head="main")
    missing = tmp_path / "nowhere"

    stream = io.StringIO()
    with redirect_stderr(stream):
        code = cli.main([*base_args, "--repo", str(missing)], app_launcher=lambda *_: 0, backend=backend)

    assert code == int(ExitCode.VALIDATION_ERROR)
    assert str(missing) in stream.getvalue()
    assert "--repo must point to an existing directory" in stream.getvalue()
    assert backend.calls == []


def test_configured_repo_path_that_is_not_a_directory_is_config_error(make_backend, tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(f'repo_path = "{(tmp_path / "gone").as_posix()}"\n', encoding="utf-8")
    backend = make_backend(["main"], head="main")
    args = ["--config", str(config_path), "--log-file", str(tmp_path / "branchdeck.log")]

    stream = io.StringIO()
    with redirect_stderr(stream):
        code = cli.main(args, app_launcher=lambda *_: 0, backend=backend)

    assert code == int(ExitCode.CONFIG_ERROR)
    assert str(config_path) in stream.getvalue()
    assert backend.calls == []


def test_existing_repo_directory_passes_validation(base_args: list[str], make_backend, tmp_path: Path) -> None:
    backend = make_backend(["main"], head="main")

    code = cli.main([*base_args, "--repo", str(tmp_path)], app_launcher=lambda *_: 0, backend=backend)

    assert code == 0
    assert backend.calls_for("list") == [""]
