#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging setup for the bootstrap CLI.

Records go to stdout and, optionally, to a log file. Every line carries a
per-level symbol and the configured prefix, e.g.

    [DEVNET-INIT] 2024-01-01 12:00:00 - INFO - ℹ️ devnet.cli - message
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

from devnet.config_models import SYMBOLS_DEFAULT

module_logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(symbol)s %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVEL_SYMBOL_KEYS = {
    logging.DEBUG: ("debug", "🐛"),
    logging.INFO: ("info", "ℹ️"),
    logging.WARNING: ("warning", "⚠️"),
    logging.ERROR: ("error", "❌"),
    logging.CRITICAL: ("critical", "🔥"),
}


class SymbolFormatter(logging.Formatter):
    """Formatter exposing `%(symbol)s`, looked up from the record's level."""

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        symbols: Optional[Dict[str, str]] = None,
    ):
        super().__init__(fmt, datefmt)
        self.symbols = symbols or SYMBOLS_DEFAULT

    def format(self, record):
        key, fallback = _LEVEL_SYMBOL_KEYS.get(record.levelno, (None, ""))
        record.symbol = self.symbols.get(key, fallback) if key else fallback
        return super().format(record)


def resolve_log_level(level: Union[int, str, None]) -> int:
    """Turn a level name such as "debug" into its numeric value, defaulting to INFO."""
    if isinstance(level, int):
        return level
    numeric_level = getattr(logging, str(level or "INFO").upper(), None)
    if not isinstance(numeric_level, int):
        return logging.INFO
    return numeric_level


def setup_logging(
    log_level: Union[int, str, None] = logging.INFO,
    log_file: Optional[str] = None,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> None:
    """
    Configure the root logger for one CLI run.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Parameters:
    log_level: Union[int, str, None]
        Level number or name; unknown names fall back to INFO.
    log_file: Optional[str]
        Also append records to this file. Parent directories are created. A
        file that cannot be opened is reported on stderr and skipped.
    log_prefix: Optional[str]
        Text placed before every line, e.g. "[DEVNET-INIT]".
    symbols: Optional[Dict[str, str]]
        Level symbols for `SymbolFormatter`.
    """
    numeric_level = resolve_log_level(log_level)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        try:
            log_file_path = Path(log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file_path, mode="a"))
        except OSError as e:
            print(
                f"Warning: Could not create file handler for log file {log_file}: {e}",
                file=sys.stderr,
            )

    prefix = log_prefix.strip() if log_prefix else ""
    format_str = f"{prefix} {LOG_FORMAT}" if prefix else LOG_FORMAT
    formatter = SymbolFormatter(
        fmt=format_str, datefmt=LOG_DATE_FORMAT, symbols=symbols
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    module_logger.debug(
        f"Logging configured. Level: {logging.getLevelName(numeric_level)}."
    )
