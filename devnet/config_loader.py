# devnet/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the bootstrap CLI.

Handles loading settings from Pydantic model defaults, a YAML file,
environment variables, and command-line arguments, applying a specific
order of precedence:
1. Pydantic Model Defaults
2. YAML Configuration File
3. Environment Variables
4. Command-Line Arguments

It also owns the "reload" boundary: `reload_app_settings` re-reads the
environment, including `etc/env/<ZKSYNC_ENV>.env`, and returns a fresh
snapshot. Nothing else in the package re-reads the process environment.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type

import yaml
from dotenv import dotenv_values
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from .config_models import CONFIG_FILE_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates `source` with values from `overrides`.

    Nested dictionaries are merged key by key; `None` values in `overrides`
    never replace an existing value.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
    return source


class _EnvironmentSettings(AppSettings):
    """`AppSettings` populated from environment variables only."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (env_settings,)


def _env_overrides() -> Dict[str, Any]:
    """
    Values that the process environment sets explicitly.

    Only variables that are present count, including ones set to a value
    equal to the model default.
    """
    return _EnvironmentSettings().model_dump(exclude_unset=True)


def load_yaml_config(
    config_path: Path, current_logger: Optional[logging.Logger] = None
) -> Dict[str, Any]:
    """
    Read a YAML mapping from `config_path`.

    A missing file, unparseable YAML or a document that is not a mapping
    yields an empty dictionary and a log message.
    """
    logger_to_use = current_logger if current_logger else module_logger
    if not config_path.is_file():
        logger_to_use.debug(
            f"Configuration file '{config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except OSError as e:
        logger_to_use.warning(
            f"Could not read config file '{config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}
    logger_to_use.info(f"Loaded configuration from {config_path}")
    return yaml_data


def load_app_settings(
    cli_overrides: Optional[Dict[str, Any]] = None,
    config_file_path: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads the settings snapshot used for a whole CLI invocation.

    Args:
        cli_overrides: Values given on the command line; `None` entries are ignored.
        config_file_path: YAML file to read. Relative paths are resolved against
            `ZKSYNC_HOME` (or the current directory). Defaults to `devnet.yaml`.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An `AppSettings` instance with the fully resolved configuration.
    """
    logger_to_use = current_logger if current_logger else module_logger

    values: Dict[str, Any] = AppSettings.model_construct().model_dump()

    home = Path(os.environ.get("ZKSYNC_HOME") or Path.cwd())
    config_path = Path(config_file_path or CONFIG_FILE_DEFAULT)
    if not config_path.is_absolute():
        config_path = home / config_path
    values = _deep_update(values, load_yaml_config(config_path, logger_to_use))
    values = _deep_update(values, _env_overrides())

    if cli_overrides:
        values = _deep_update(values, dict(cli_overrides))

    settings = AppSettings.model_validate(values)
    logger_to_use.debug(
        f"Settings loaded for environment '{settings.zksync_env}' at {settings.zksync_home}"
    )
    return settings


def load_env_file(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> Dict[str, str]:
    """Return the key/value pairs of the environment's `.env` file, or `{}` if absent."""
    logger_to_use = current_logger if current_logger else module_logger
    env_file = app_settings.env_file_path
    if not env_file.is_file():
        logger_to_use.debug(f"Env file '{env_file}' not found.")
        return {}
    return {
        key: value
        for key, value in dotenv_values(env_file).items()
        if value is not None
    }


def reload_app_settings(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> AppSettings:
    """
    Build a fresh snapshot after collaborators may have rewritten the env file.

    Precedence for the new snapshot: current snapshot < env file < process
    environment. The current snapshot's `zksync_home` and `zksync_env` select
    which env file is read.
    """
    logger_to_use = current_logger if current_logger else module_logger
    values: Dict[str, Any] = app_settings.model_dump()

    file_values = {
        key.lower(): value
        for key, value in load_env_file(app_settings, logger_to_use).items()
        if key.lower() in AppSettings.model_fields
    }
    values = _deep_update(values, file_values)
    values = _deep_update(values, _env_overrides())

    values["zksync_home"] = app_settings.zksync_home
    reloaded = AppSettings.model_validate(values)
    logger_to_use.debug(
        f"Reloaded settings from {app_settings.env_file_path}"
    )
    return reloaded
