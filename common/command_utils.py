# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing shell commands and logging their output.
"""

import logging
import shutil
import subprocess
from typing import Dict, List, Optional, Sequence, Union

from devnet.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

REDACTED = "******"


def log_devnet(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs a message at the requested level.

    Args:
        message (str): The log message to be recorded.
        level (str): The severity level of the log message. Defaults to "info". Common options
            include "debug", "info", "success", "warning", "error", and "critical".
            "success" is logged at info level.
        current_logger (Optional[logging.Logger]): A logger instance to use for logging. If not provided,
            a module-level logger will be used.
        app_settings (Optional[AppSettings]): Optional application settings that can influence logging behavior.
        exc_info (bool): Indicator to include exception details in the log. By default, this is set to False.

    Returns:
        None
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def redact(text: str, secrets: Sequence[Optional[str]]) -> str:
    """Replace every non-empty secret occurring in `text` with a fixed mask."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


def run_command(
    command: Union[List[str], str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    text: bool = True,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    secrets: Sequence[Optional[str]] = (),
) -> subprocess.CompletedProcess:
    """
    Executes a system command and logs the process details and results.

    Args:
        command (Union[List[str], str]): The command to execute, as an argv list. A string
            is split on whitespace with a warning.
        app_settings (Optional[AppSettings]): Settings providing logging symbols.
        check (bool): Whether to raise a CalledProcessError when a non-zero exit code is returned.
            Defaults to True.
        capture_output (bool): Whether to capture standard output and standard error. Defaults to False.
        text (bool): Indicates if the output streams should be interpreted as text. Defaults to True.
        current_logger (Optional[logging.Logger]): A logger to use for logging details.
        cwd (Optional[str]): The working directory of the command.
        env (Optional[Dict[str, str]]): The full environment for the command. Defaults to the
            inherited environment of the current process.
        secrets (Sequence[Optional[str]]): Values masked in every logged line (private keys).

    Returns:
        subprocess.CompletedProcess: The completed process instance.

    Raises:
        subprocess.CalledProcessError: If the process returns a non-zero exit code and `check` is True.
        FileNotFoundError: If the executable is not found on the system.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )

    if isinstance(command, str):
        log_devnet(
            f"{symbols.get('warning', '!')} Running string command '{redact(command, secrets)}'. Consider list format.",
            "warning",
            effective_logger,
            app_settings,
        )
        command_to_run = command.split()
    else:
        command_to_run = list(command)
    command_to_log_str = redact(subprocess.list2cmdline(command_to_run), secrets)

    log_devnet(
        f"{symbols.get('gear', '⚙️')} Executing: {command_to_log_str} {f'(in {cwd})' if cwd else ''}",
        "debug",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            command_to_run,
            check=check,
            capture_output=capture_output,
            text=text,
            cwd=cwd,
            env=env,
        )
        if capture_output and result.stdout and result.stdout.strip():
            log_devnet(
                f"   stdout: {redact(result.stdout.strip(), secrets)}",
                "debug",
                effective_logger,
                app_settings,
            )
        return result
    except subprocess.CalledProcessError as e:
        log_devnet(
            f"{symbols.get('error', '❌')} Command `{command_to_log_str}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        if e.stdout and hasattr(e.stdout, "strip") and e.stdout.strip():
            log_devnet(
                f"   stdout: {redact(e.stdout.strip(), secrets)}",
                "error",
                effective_logger,
                app_settings,
            )
        if e.stderr and hasattr(e.stderr, "strip") and e.stderr.strip():
            log_devnet(
                f"   stderr: {redact(e.stderr.strip(), secrets)}",
                "error",
                effective_logger,
                app_settings,
            )
        raise
    except FileNotFoundError as e:
        log_devnet(
            f"{symbols.get('error', '❌')} Command not found: {e.filename}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.

    Parameters:
        command_name (str): The name of the command to check for existence.

    Returns:
        bool: True if the command is found in the system's PATH, False otherwise.
    """
    return shutil.which(command_name) is not None
