import subprocess
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from devnet.config_models import AppSettings
from devnet.environment_checks import (
    EnvironmentCheckError,
    check_env,
    submodule_update,
)


@pytest.fixture
def mock_command_exists(mocker: MockerFixture):
    return mocker.patch(
        "devnet.environment_checks.command_exists", return_value=True
    )


@pytest.fixture
def mock_run_command(mocker: MockerFixture):
    return mocker.patch("devnet.environment_checks.run_command")


def _versions(node="v18.18.0", yarn="1.22.19"):
    return [MagicMock(stdout=f"{node}\n"), MagicMock(stdout=f"{yarn}\n")]


def test_check_env_passes(app_settings, mock_command_exists, mock_run_command):
    mock_run_command.side_effect = _versions()

    check_env(app_settings)

    assert [c.args[0] for c in mock_command_exists.call_args_list] == [
        "node",
        "yarn",
        "docker",
        "cargo",
    ]
    assert [c.args[0] for c in mock_run_command.call_args_list] == [
        ["node", "--version"],
        ["yarn", "--version"],
    ]


def test_check_env_missing_tool(app_settings, mocker: MockerFixture, mock_run_command):
    mocker.patch(
        "devnet.environment_checks.command_exists",
        side_effect=lambda tool: tool != "cargo",
    )

    with pytest.raises(EnvironmentCheckError) as excinfo:
        check_env(app_settings)

    assert excinfo.value.tool == "cargo"
    assert "cargo" in str(excinfo.value)
    mock_run_command.assert_not_called()


@pytest.mark.parametrize("node_version", ["v16.20.2", "v18.9.0"])
def test_check_env_old_node(
    app_settings, mock_command_exists, mock_run_command, node_version
):
    mock_run_command.side_effect = _versions(node=node_version)

    with pytest.raises(
        EnvironmentCheckError, match="node.js version 18.18.0 or higher is required"
    ):
        check_env(app_settings)


def test_check_env_old_yarn(app_settings, mock_command_exists, mock_run_command):
    mock_run_command.side_effect = _versions(yarn="1.21.1")

    with pytest.raises(EnvironmentCheckError, match="yarn version 1.22.0 is required"):
        check_env(app_settings)


def test_check_env_unreadable_version(
    app_settings, mock_command_exists, mock_run_command
):
    mock_run_command.side_effect = _versions(node="")

    with pytest.raises(EnvironmentCheckError, match="Could not determine node version"):
        check_env(app_settings)


def test_check_env_version_command_fails(
    app_settings, mock_command_exists, mock_run_command
):
    error = subprocess.CalledProcessError(1, ["node", "--version"])
    mock_run_command.side_effect = error

    with pytest.raises(subprocess.CalledProcessError) as excinfo:
        check_env(app_settings)

    assert excinfo.value is error


def test_check_env_uses_configured_minimums(
    tmp_path, mock_command_exists, mock_run_command
):
    settings = AppSettings(
        zksync_home=tmp_path,
        tooling={"required_tools": ["node", "yarn"], "node_min_version": "20.0.0"},
    )
    mock_run_command.side_effect = _versions(node="v18.18.0")

    with pytest.raises(EnvironmentCheckError, match="20.0.0"):
        check_env(settings)
    assert mock_command_exists.call_count == 2


def test_submodule_update(app_settings, mock_run_command):
    submodule_update(app_settings)

    calls = mock_run_command.call_args_list
    assert [c.args[0] for c in calls] == [
        ["git", "submodule", "init"],
        ["git", "submodule", "update"],
    ]
    assert all(c.kwargs["cwd"] == str(app_settings.zksync_home) for c in calls)


def test_submodule_update_stops_on_failure(app_settings, mock_run_command):
    mock_run_command.side_effect = subprocess.CalledProcessError(128, ["git"])

    with pytest.raises(subprocess.CalledProcessError):
        submodule_update(app_settings)

    assert mock_run_command.call_count == 1
