# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system helpers used by the bootstrap steps.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from common.command_utils import log_devnet
from devnet.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)


def cleanup_directory(
    directory_path: Path,
    app_settings: Optional[AppSettings],
    ensure_dir_exists_after: bool = False,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Removes the specified directory and its contents.

    A missing directory is not an error. Removal failures propagate to the
    caller so that the surrounding step aborts.

    Parameters:
        directory_path (Path): The directory to remove.
        app_settings (Optional[AppSettings]): Settings providing logging symbols. Can be None.
        ensure_dir_exists_after (bool): Recreate the (empty) directory afterwards. Defaults to False.
        current_logger (Optional[logging.Logger]): The logger instance to use for logging messages.

    Raises:
        NotADirectoryError: If the path exists but is not a directory.
        OSError: If the tree cannot be removed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )

    log_devnet(
        f"Attempting to clean directory: {directory_path}",
        "debug",
        logger_to_use,
        app_settings,
    )
    if directory_path.exists():
        if not directory_path.is_dir():
            raise NotADirectoryError(
                f"Path {directory_path} exists but is not a directory."
            )
        shutil.rmtree(directory_path)
        log_devnet(
            f"{symbols.get('success', '✅')} Removed directory and its contents: {directory_path}",
            "info",
            logger_to_use,
            app_settings,
        )
    else:
        log_devnet(
            f"{symbols.get('info', 'ℹ️')} Directory {directory_path} does not exist. No cleanup needed.",
            "info",
            logger_to_use,
            app_settings,
        )

    if ensure_dir_exists_after:
        directory_path.mkdir(parents=True, exist_ok=True)
        log_devnet(
            f"Ensured directory exists: {directory_path}",
            "debug",
            logger_to_use,
            app_settings,
        )
