# devnet/environment_checks.py
# -*- coding: utf-8 -*-
"""
Preconditions checked before containers are brought up, and git submodule checkout.
"""

import logging
import shlex
from typing import Optional

from common.command_utils import command_exists, log_devnet, run_command
from common.version_utils import version_at_least

from .config_models import AppSettings

module_logger = logging.getLogger(__name__)


class EnvironmentCheckError(RuntimeError):
    """A required host tool is missing or older than the supported minimum."""

    def __init__(self, message: str, tool: Optional[str] = None):
        self.tool = tool
        super().__init__(message)


def _tool_version(
    tool: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    result = run_command(
        [tool, "--version"],
        app_settings,
        capture_output=True,
        current_logger=current_logger,
    )
    return (result.stdout or "").strip()


def _require_version(
    tool: str,
    actual: str,
    minimum: str,
    message: str,
) -> None:
    try:
        ok = version_at_least(actual, minimum)
    except ValueError as e:
        raise EnvironmentCheckError(
            f"Could not determine {tool} version from {actual!r}", tool=tool
        ) from e
    if not ok:
        raise EnvironmentCheckError(message, tool=tool)


def check_env(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Verify that every required tool is on PATH and that node and yarn are new enough.

    Raises:
        EnvironmentCheckError: On the first missing or outdated tool.
        subprocess.CalledProcessError: If a `--version` call fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    tooling = app_settings.tooling

    for tool in tooling.required_tools:
        if not command_exists(tool):
            raise EnvironmentCheckError(
                f"Required tool '{tool}' was not found in PATH", tool=tool
            )
        log_devnet(f"Found {tool}", "debug", logger_to_use, app_settings)

    node_version = _tool_version("node", app_settings, logger_to_use)
    _require_version(
        "node",
        node_version,
        tooling.node_min_version,
        f"Error, node.js version {tooling.node_min_version} or higher is required",
    )

    yarn_version = _tool_version("yarn", app_settings, logger_to_use)
    _require_version(
        "yarn",
        yarn_version,
        tooling.yarn_min_version,
        f"Error, yarn version {tooling.yarn_min_version} is required",
    )
    log_devnet(
        f"{app_settings.symbols.get('success', '✅')} node {node_version}, yarn {yarn_version}",
        "info",
        logger_to_use,
        app_settings,
    )


def submodule_update(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Run `git submodule init` and then `git submodule update` in the repository root."""
    commands = app_settings.commands
    cwd = str(app_settings.zksync_home)
    for command in (commands.git_submodule_init, commands.git_submodule_update):
        run_command(
            shlex.split(command),
            app_settings,
            current_logger=current_logger,
            cwd=cwd,
        )
