import logging
import subprocess
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from common.command_utils import (
    REDACTED,
    command_exists,
    log_devnet,
    redact,
    run_command,
)
from devnet.config_models import AppSettings


@pytest.fixture
def app_settings(tmp_path):
    """Fixture to provide a basic AppSettings object."""
    return AppSettings(
        zksync_home=tmp_path,
        log_prefix="test_prefix",
        symbols={
            "warning": "!",
            "gear": "⚙️",
            "error": "❌",
        },
    )


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.mark.parametrize(
    "level, method",
    [
        ("debug", "debug"),
        ("info", "info"),
        ("success", "info"),
        ("warning", "warning"),
        ("error", "error"),
        ("critical", "critical"),
    ],
)
def test_log_devnet_levels(mock_logger, level, method):
    log_devnet("hello", level, mock_logger)

    getattr(mock_logger, method).assert_called_once_with("hello", exc_info=False)


def test_redact_masks_every_occurrence():
    assert (
        redact("--private-key 0xabc again 0xabc", ["0xabc"])
        == f"--private-key {REDACTED} again {REDACTED}"
    )


def test_redact_ignores_empty_secrets():
    assert redact("nothing to hide", [None, ""]) == "nothing to hide"


def test_run_command_success(mocker: MockerFixture, app_settings, mock_logger):
    """Test a successful command with captured output."""
    completed = subprocess.CompletedProcess(
        args=["yarn", "--version"], returncode=0, stdout="1.22.19\n", stderr=""
    )
    mock_run = mocker.patch("subprocess.run", return_value=completed)

    result = run_command(
        ["yarn", "--version"],
        app_settings,
        capture_output=True,
        current_logger=mock_logger,
        cwd="/repo",
    )

    assert result is completed
    mock_run.assert_called_once_with(
        ["yarn", "--version"],
        check=True,
        capture_output=True,
        text=True,
        cwd="/repo",
        env=None,
    )
    logged = [c.args[0] for c in mock_logger.debug.call_args_list]
    assert any("Executing: yarn --version" in line for line in logged)
    assert any("1.22.19" in line for line in logged)


def test_run_command_redacts_secrets_in_logs(
    mocker: MockerFixture, app_settings, mock_logger
):
    mocker.patch(
        "subprocess.run",
        return_value=subprocess.CompletedProcess(args=[], returncode=0),
    )

    run_command(
        ["zk", "contract", "redeploy", "--private-key", "0xsecret"],
        app_settings,
        current_logger=mock_logger,
        secrets=["0xsecret"],
    )

    logged = " ".join(c.args[0] for c in mock_logger.debug.call_args_list)
    assert "0xsecret" not in logged
    assert REDACTED in logged


def test_run_command_failure_is_logged_and_reraised(
    mocker: MockerFixture, app_settings, mock_logger
):
    """Test that CalledProcessError reaches the caller unchanged."""
    error = subprocess.CalledProcessError(
        2, ["cargo", "sqlx", "database", "drop"], output="", stderr="db busy"
    )
    mocker.patch("subprocess.run", side_effect=error)

    with pytest.raises(subprocess.CalledProcessError) as excinfo:
        run_command(
            ["cargo", "sqlx", "database", "drop"],
            app_settings,
            current_logger=mock_logger,
        )

    assert excinfo.value is error
    logged = [c.args[0] for c in mock_logger.error.call_args_list]
    assert any("failed (rc 2)" in line for line in logged)
    assert any("db busy" in line for line in logged)


def test_run_command_missing_executable(
    mocker: MockerFixture, app_settings, mock_logger
):
    error = FileNotFoundError(2, "No such file or directory", "zk")
    mocker.patch("subprocess.run", side_effect=error)

    with pytest.raises(FileNotFoundError):
        run_command(["zk", "up"], app_settings, current_logger=mock_logger)

    mock_logger.error.assert_called_once()
    assert "Command not found: zk" in mock_logger.error.call_args.args[0]


def test_run_command_string_is_split_with_warning(
    mocker: MockerFixture, app_settings, mock_logger
):
    mock_run = mocker.patch(
        "subprocess.run",
        return_value=subprocess.CompletedProcess(args=[], returncode=0),
    )

    run_command("docker compose pull", app_settings, current_logger=mock_logger)

    assert mock_run.call_args.args[0] == ["docker", "compose", "pull"]
    mock_logger.warning.assert_called_once()


def test_command_exists(mocker: MockerFixture):
    mock_which = mocker.patch(
        "common.command_utils.shutil.which", side_effect=["/usr/bin/node", None]
    )

    assert command_exists("node") is True
    assert command_exists("cargo") is False
    assert mock_which.call_count == 2
