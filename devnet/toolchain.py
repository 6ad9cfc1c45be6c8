# devnet/toolchain.py
# -*- coding: utf-8 -*-
"""
External collaborators invoked by the bootstrap procedures.

`DevToolchain` lists one method per external operation (containers, package
installation, contract build and deployment, database provisioning, genesis,
environment reload). The orchestrator only ever talks to this interface, so
tests can substitute a recording double.

`ShellToolchain` is the default implementation. Each operation runs the
command configured in `AppSettings.commands` inside `zksync_home`, with the
values of `etc/env/<ZKSYNC_ENV>.env` exported to the child process. The file is
read when the toolchain is created and again at each `reload_env`. Private
keys are passed as `--private-key` arguments and masked in the logs and in
the command of a raised `CalledProcessError`.
"""

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence

from pydantic import SecretStr

from common.command_utils import log_devnet, redact, run_command
from common.file_utils import cleanup_directory

from .config_loader import load_env_file, reload_app_settings
from .config_models import AppSettings
from .environment_checks import check_env, submodule_update
from .init_args import BaseToken

module_logger = logging.getLogger(__name__)


def _reveal(secret: Optional[SecretStr]) -> Optional[str]:
    return secret.get_secret_value() if secret is not None else None


class DevToolchain(Protocol):
    """Operations owned by external tools; each raises on failure."""

    # Current settings snapshot; replaced by `reload_env`.
    app_settings: AppSettings

    def docker_pull(self) -> None: ...

    def check_env(self) -> None: ...

    def git_hooks(self) -> None: ...

    def up(self) -> None: ...

    def submodule_update(self) -> None: ...

    def yarn(self) -> None: ...

    def contract_build(self) -> None: ...

    def compile_all(self) -> None: ...

    def db_drop(self) -> None: ...

    def db_setup(self) -> None: ...

    def clean(self, path: str) -> None: ...

    def deploy_verifier(self, private_key: Optional[SecretStr] = None) -> None: ...

    def reload_env(self) -> AppSettings: ...

    def genesis_from_sources(self) -> None: ...

    def genesis_from_binary(self) -> None: ...

    def deploy_erc20_and_weth(
        self,
        command: str,
        private_key: Optional[SecretStr] = None,
        env_file: Optional[Path] = None,
    ) -> None: ...

    def deploy_weth(self, private_key: Optional[SecretStr] = None) -> None: ...

    def redeploy_l1(self, private_key: Optional[SecretStr] = None) -> None: ...

    def initialize_governance(
        self, private_key: Optional[SecretStr] = None
    ) -> None: ...

    def register_hyperchain(
        self, base_token: BaseToken, private_key: Optional[SecretStr] = None
    ) -> None: ...

    def deploy_l2_through_l1(
        self,
        private_key: Optional[SecretStr] = None,
        include_paymaster: bool = False,
    ) -> None: ...


class ShellToolchain:
    """`DevToolchain` backed by the repository's command-line tools."""

    def __init__(
        self,
        app_settings: AppSettings,
        current_logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = current_logger if current_logger else module_logger
        # Env-file values as of the last reload; exported to every command.
        self.env_file_values: Dict[str, str] = load_env_file(
            app_settings, self.logger
        )

    # --- helpers ---

    def _command_env(self) -> Dict[str, str]:
        env = dict(os.environ)
        env.update(self.env_file_values)
        env["ZKSYNC_HOME"] = str(self.app_settings.zksync_home)
        env["ZKSYNC_ENV"] = self.app_settings.zksync_env
        env["CHAIN_ETH_ZKSYNC_NETWORK_ID"] = str(
            self.app_settings.chain_eth_zksync_network_id
        )
        return env

    def _run(
        self,
        command: str,
        extra_args: Sequence[str] = (),
        private_key: Optional[SecretStr] = None,
    ) -> None:
        argv: List[str] = shlex.split(command) + list(extra_args)
        key = _reveal(private_key)
        if key:
            argv += ["--private-key", key]
        try:
            run_command(
                argv,
                self.app_settings,
                current_logger=self.logger,
                cwd=str(self.app_settings.zksync_home),
                env=self._command_env(),
                secrets=[key],
            )
        except subprocess.CalledProcessError as e:
            # The re-raised command must not carry the key.
            e.cmd = [redact(arg, [key]) for arg in argv]
            raise

    def _run_all(self, commands: Sequence[str]) -> None:
        for command in commands:
            self._run(command)

    # --- containers and host ---

    def docker_pull(self) -> None:
        self._run(self.app_settings.commands.docker_pull)

    def check_env(self) -> None:
        check_env(self.app_settings, self.logger)

    def git_hooks(self) -> None:
        self._run(self.app_settings.commands.git_hooks)

    def up(self) -> None:
        self._run(self.app_settings.commands.docker_up)

    def submodule_update(self) -> None:
        submodule_update(self.app_settings, self.logger)

    # --- build ---

    def yarn(self) -> None:
        self._run(self.app_settings.commands.yarn_install)

    def contract_build(self) -> None:
        self._run_all(self.app_settings.commands.contract_build)

    def compile_all(self) -> None:
        self._run(self.app_settings.commands.compile_system_contracts)

    # --- database and local state ---

    def db_drop(self) -> None:
        self._run(self.app_settings.commands.db_drop)

    def db_setup(self) -> None:
        self._run_all(self.app_settings.commands.db_setup)

    def clean(self, path: str) -> None:
        cleanup_directory(
            self.app_settings.zksync_home / path,
            self.app_settings,
            current_logger=self.logger,
        )

    def reload_env(self) -> AppSettings:
        self.app_settings = reload_app_settings(self.app_settings, self.logger)
        self.env_file_values = load_env_file(self.app_settings, self.logger)
        log_devnet(
            f"Environment '{self.app_settings.zksync_env}' reloaded",
            "debug",
            self.logger,
            self.app_settings,
        )
        return self.app_settings

    def genesis_from_sources(self) -> None:
        self._run(self.app_settings.commands.genesis_from_sources)

    def genesis_from_binary(self) -> None:
        self._run(self.app_settings.commands.genesis_from_binary)

    # --- contracts ---

    def deploy_verifier(self, private_key: Optional[SecretStr] = None) -> None:
        self._run(self.app_settings.commands.deploy_verifier, private_key=private_key)

    def deploy_erc20_and_weth(
        self,
        command: str,
        private_key: Optional[SecretStr] = None,
        env_file: Optional[Path] = None,
    ) -> None:
        extra_args = [command]
        if env_file is not None:
            extra_args += ["--env-file", str(env_file)]
        self._run(
            self.app_settings.commands.deploy_erc20,
            extra_args,
            private_key=private_key,
        )
        self.deploy_weth(private_key)

    def deploy_weth(self, private_key: Optional[SecretStr] = None) -> None:
        self._run(self.app_settings.commands.deploy_weth, private_key=private_key)

    def redeploy_l1(self, private_key: Optional[SecretStr] = None) -> None:
        self._run(self.app_settings.commands.redeploy_l1, private_key=private_key)

    def initialize_governance(
        self, private_key: Optional[SecretStr] = None
    ) -> None:
        self._run(
            self.app_settings.commands.initialize_governance,
            private_key=private_key,
        )

    def register_hyperchain(
        self, base_token: BaseToken, private_key: Optional[SecretStr] = None
    ) -> None:
        extra_args = ["--base-token-address", base_token.address]
        if base_token.name:
            extra_args += ["--base-token-name", base_token.name]
        self._run(
            self.app_settings.commands.register_hyperchain,
            extra_args,
            private_key=private_key,
        )

    def deploy_l2_through_l1(
        self,
        private_key: Optional[SecretStr] = None,
        include_paymaster: bool = False,
    ) -> None:
        extra_args = ["--include-paymaster"] if include_paymaster else []
        self._run(
            self.app_settings.commands.deploy_l2_through_l1,
            extra_args,
            private_key=private_key,
        )
