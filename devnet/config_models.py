# devnet/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for the bootstrap configuration.

This module defines the settings snapshot threaded through a bootstrap run,
including defaults, type annotations, and descriptions. Values are resolved
from model defaults, an optional YAML file, environment variables and
command-line overrides (see `devnet.config_loader`).

Snapshots are frozen: the only way to observe a changed environment is to
build a new snapshot via `devnet.config_loader.reload_app_settings`.
"""

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
ZKSYNC_ENV_DEFAULT: str = "dev"
CHAIN_NETWORK_ID_DEFAULT: int = 270
LOG_PREFIX_DEFAULT: str = "[DEVNET-INIT]"
LOG_LEVEL_DEFAULT: str = "INFO"
CONFIG_FILE_DEFAULT: str = "devnet.yaml"

REQUIRED_TOOLS_DEFAULT: List[str] = ["node", "yarn", "docker", "cargo"]
NODE_MIN_VERSION_DEFAULT: str = "18.18.0"
YARN_MIN_VERSION_DEFAULT: str = "1.22.0"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
    "pending": "⏳",
}


class ToolingSettings(BaseModel):
    """Host tools required before containers are brought up."""

    model_config = ConfigDict(frozen=True)

    required_tools: List[str] = Field(
        default_factory=lambda: list(REQUIRED_TOOLS_DEFAULT),
        description="Executables that must be present on PATH.",
    )
    node_min_version: str = Field(
        default=NODE_MIN_VERSION_DEFAULT,
        description="Minimum accepted `node --version`.",
    )
    yarn_min_version: str = Field(
        default=YARN_MIN_VERSION_DEFAULT,
        description="Minimum accepted `yarn --version`.",
    )


class CommandSettings(BaseModel):
    """
    Command lines used for each external collaborator.

    Each value is a shell-style string split with `shlex` before execution;
    no shell is involved. Flags such as `--private-key` are appended by
    `devnet.toolchain.ShellToolchain`.
    """

    model_config = ConfigDict(frozen=True)

    docker_pull: str = "docker compose pull"
    docker_up: str = "docker compose up -d"
    git_hooks: str = "git config --local core.hooksPath .githooks"
    git_submodule_init: str = "git submodule init"
    git_submodule_update: str = "git submodule update"
    yarn_install: str = "yarn install --frozen-lockfile"
    contract_build: List[str] = Field(
        default_factory=lambda: [
            "yarn l1-contracts build",
            "yarn l2-contracts build",
        ]
    )
    compile_system_contracts: str = "yarn --cwd contracts/system-contracts build"
    db_drop: str = "cargo sqlx database drop -y"
    db_setup: List[str] = Field(
        default_factory=lambda: [
            "cargo sqlx database create",
            "cargo sqlx migrate run --source core/lib/dal/migrations",
        ]
    )
    deploy_verifier: str = "yarn l1-contracts deploy-no-build --only-verifier"
    genesis_from_sources: str = (
        "cargo run --release --bin zksync_server -- --genesis"
    )
    genesis_from_binary: str = "zksync_server --genesis"
    deploy_erc20: str = "yarn --silent l1-contracts deploy-erc20 add-multi"
    deploy_weth: str = "yarn --silent l1-contracts deploy-weth"
    redeploy_l1: str = "yarn l1-contracts redeploy-l1"
    initialize_governance: str = "yarn l1-contracts initialize-governance"
    register_hyperchain: str = "yarn l1-contracts register-hyperchain"
    deploy_l2_through_l1: str = "yarn l2-contracts deploy-shared-bridge-on-l2-through-l1"


class AppSettings(BaseSettings):
    """Main bootstrap settings snapshot."""

    model_config = SettingsConfigDict(
        extra="ignore",
        frozen=True,
        env_ignore_empty=True,
        env_nested_delimiter="__",
    )

    zksync_env: str = Field(
        default=ZKSYNC_ENV_DEFAULT,
        description="Network environment selector (ZKSYNC_ENV).",
    )
    zksync_home: Path = Field(
        default_factory=Path.cwd,
        description="Repository root; commands run here and db/backups live under it.",
    )
    governor_private_key: Optional[SecretStr] = Field(
        default=None,
        description="Private key used for L1 deployment and governance.",
    )
    deployer_private_key: Optional[SecretStr] = Field(
        default=None,
        description="Private key used for the verifier, L2 contracts and test tokens.",
    )
    ci: bool = Field(
        default=False,
        description="Set when running in a CI environment; skips container setup.",
    )
    chain_eth_zksync_network_id: int = Field(
        default=CHAIN_NETWORK_ID_DEFAULT,
        description="Chain id of the L2 network; bumped by `reinit-hyper`.",
    )
    log_prefix: str = Field(
        default=LOG_PREFIX_DEFAULT,
        description="Prefix for log messages.",
    )
    log_level: str = Field(default=LOG_LEVEL_DEFAULT, description="Logging level.")

    tooling: ToolingSettings = Field(default_factory=ToolingSettings)
    commands: CommandSettings = Field(default_factory=CommandSettings)

    symbols: Dict[str, str] = Field(
        default_factory=lambda: dict(SYMBOLS_DEFAULT)
    )

    @property
    def env_file_path(self) -> Path:
        """Path of the env file holding the values for `zksync_env`."""
        return self.zksync_home / "etc" / "env" / f"{self.zksync_env}.env"
