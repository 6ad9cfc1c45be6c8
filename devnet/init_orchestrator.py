# devnet/init_orchestrator.py
# -*- coding: utf-8 -*-
"""
Bootstrap procedures for the local development network.

Each procedure is a fixed, strictly sequential list of announced steps.
Higher-level procedures are compositions of lower-level ones:

    init_shared_bridge = init_setup -> init_setup_database -> init_bridgehub_state_transition
    init               = init_shared_bridge -> init_hyper

The first failing step aborts the whole procedure. Nothing is rolled back:
if contract deployment fails after the database was reset, the database
stays reset. The exception raised by the collaborator reaches the caller
unchanged.
"""

import logging
import os
from typing import Any, Callable, List, Optional

from common.command_utils import log_devnet

from .config_models import AppSettings
from .init_args import InitArgs
from .step_executor import Echo, StepResult, announced, pending
from .toolchain import DevToolchain

module_logger = logging.getLogger(__name__)

CHAIN_NETWORK_ID_ENV = "CHAIN_ETH_ZKSYNC_NETWORK_ID"


class BootstrapOrchestrator:
    """Runs the init recipes against a `DevToolchain`."""

    def __init__(
        self,
        toolchain: DevToolchain,
        echo: Optional[Echo] = None,
        current_logger: Optional[logging.Logger] = None,
    ):
        self.toolchain = toolchain
        self.echo = echo
        self.logger = current_logger if current_logger else module_logger
        # Completed steps in execution order.
        self.history: List[StepResult] = []

    @property
    def app_settings(self) -> AppSettings:
        """The toolchain's current settings snapshot."""
        return self.toolchain.app_settings

    def _step(self, label: str, step_function: Callable[[], Any]) -> StepResult:
        result = announced(label, step_function, self.echo, self.logger)
        self.history.append(result)
        return result

    def _log(self, message: str, level: str = "info") -> None:
        log_devnet(message, level, self.logger, self.app_settings)

    def _reload_env(self) -> None:
        self._step("Reloading env", self.toolchain.reload_env)

    def _clean_local_state(self, suffix: str = "") -> None:
        self._step("Clean rocksdb", lambda: self.toolchain.clean(f"db{suffix}"))
        self._step(
            "Clean backups", lambda: self.toolchain.clean(f"backups{suffix}")
        )

    def _drop_and_setup_db(self) -> None:
        self._step("Drop postgres db", self.toolchain.db_drop)
        self._step("Setup postgres db", self.toolchain.db_setup)

    # --- building blocks ---

    def init_setup(self, init_args: InitArgs) -> None:
        """Host checks, containers, submodules, dependencies and contract compilation."""
        if not self.app_settings.ci and not init_args.skip_env_setup:
            self._step("Pulling images", self.toolchain.docker_pull)
            self._step("Checking environment", self.toolchain.check_env)
            self._step("Checking git hooks", self.toolchain.git_hooks)
            self._step("Setting up containers", self.toolchain.up)
        if not init_args.skip_submodules_checkout:
            self._step("Checkout submodules", self.toolchain.submodule_update)

        self._step("Compiling JS packages", self.toolchain.yarn)
        self._step("Building L1 L2 contracts", self.toolchain.contract_build)
        self._step("Compile L2 system contracts", self.toolchain.compile_all)

    def init_setup_database(
        self, init_args: InitArgs, skip_verifier_deployment: bool = False
    ) -> None:
        """Reset the database and local state, then produce the genesis block."""
        self._drop_and_setup_db()
        self._clean_local_state(f"/{self.app_settings.zksync_env}")
        if not skip_verifier_deployment:
            deployer_key = init_args.deployer_l2_contract_input.deployer_private_key
            self._step(
                "Deploying L1 verifier",
                lambda: self.toolchain.deploy_verifier(deployer_key),
            )
            self._reload_env()

        self._step(
            "Running server genesis setup", self.toolchain.genesis_from_sources
        )

    def init_bridgehub_state_transition(self, init_args: InitArgs) -> None:
        """Optional test tokens, then L1 contracts and governance."""
        test_tokens = init_args.test_tokens
        governor_key = init_args.governor_private_key
        if test_tokens.deploy:
            self._step(
                "Deploying localhost ERC20 and Weth tokens",
                lambda: self.toolchain.deploy_erc20_and_weth(
                    "dev",
                    test_tokens.deployer_private_key,
                    test_tokens.env_file,
                ),
            )
        elif test_tokens.deploy_weth:
            self._step(
                "Deploying localhost Weth tokens",
                lambda: self.toolchain.deploy_weth(
                    test_tokens.deployer_private_key
                ),
            )
        self._step(
            "Deploying L1 contracts",
            lambda: self.toolchain.redeploy_l1(governor_key),
        )
        self._step(
            "Initializing governance",
            lambda: self.toolchain.initialize_governance(governor_key),
        )
        self._reload_env()

    def init_hyper(self, init_args: InitArgs) -> None:
        """Register a chain with the bridgehub and optionally deploy its L2 contracts."""
        l2_input = init_args.deployer_l2_contract_input
        self._step(
            "Registering Hyperchain",
            lambda: self.toolchain.register_hyperchain(
                init_args.base_token, init_args.governor_private_key
            ),
        )
        self._reload_env()
        if l2_input.through_l1:
            self._step(
                "Deploying L2 contracts",
                lambda: self.toolchain.deploy_l2_through_l1(
                    l2_input.deployer_private_key,
                    include_paymaster=l2_input.include_paymaster,
                ),
            )

    # --- recipes ---

    def init_shared_bridge(self, init_args: InitArgs) -> None:
        if not init_args.skip_setup_completely:
            self.init_setup(init_args)
        # The genesis block must exist before the L1 contracts are initialized.
        self.init_setup_database(init_args, skip_verifier_deployment=False)
        self.init_bridgehub_state_transition(init_args)

    def init(self, init_args: InitArgs) -> None:
        """Full bootstrap: shared bridge, then the hyperchain on top of the same database."""
        symbols = self.app_settings.symbols
        self._log(f"--- {symbols.get('step', '➡️')} Starting full network initialization ---")
        self.init_shared_bridge(init_args)
        self.init_hyper(init_args)
        self._log(
            f"--- {symbols.get('success', '✅')} Network initialization completed ---"
        )

    def init_hyper_only(self, init_args: InitArgs) -> None:
        """Set up a hyperchain without deploying the verifier (it comes with the shared bridge)."""
        self.init_setup(init_args)
        self.init_setup_database(init_args, skip_verifier_deployment=True)
        self.init_hyper(init_args)

    def reinit_hyper(self, init_args: InitArgs) -> None:
        """Register one more chain: bump the chain id, then run `init_hyper`."""
        next_id = self.app_settings.chain_eth_zksync_network_id + 1
        os.environ[CHAIN_NETWORK_ID_ENV] = str(next_id)
        self.toolchain.app_settings = self.app_settings.model_copy(
            update={"chain_eth_zksync_network_id": next_id}
        )
        self._log(f"{CHAIN_NETWORK_ID_ENV} set to {next_id}")
        self.init_hyper(init_args)

    def reinit(self) -> None:
        """
        Faster reset of an environment that `init` has already set up.

        No test tokens are deployed and no private keys are passed, so the
        collaborators fall back to their default accounts.
        """
        self._step("Setting up containers", self.toolchain.up)
        self._step("Compiling JS packages", self.toolchain.yarn)
        self._step("Compile l2 contracts", self.toolchain.compile_all)
        self._drop_and_setup_db()
        self._clean_local_state(f"/{self.app_settings.zksync_env}")
        self._step("Building contracts", self.toolchain.contract_build)
        self._step("Deploying L1 verifier", self.toolchain.deploy_verifier)
        self._reload_env()
        self._step(
            "Running server genesis setup", self.toolchain.genesis_from_sources
        )
        self._step("Deploying L1 contracts", self.toolchain.redeploy_l1)
        self._step(
            "Deploying L2 contracts",
            lambda: self.toolchain.deploy_l2_through_l1(include_paymaster=True),
        )
        self._step("Initializing governance", self.toolchain.initialize_governance)

    def lightweight_init(self) -> None:
        """Set up local state from the prebuilt genesis binary and default deployment parameters."""
        self._clean_local_state()
        self._step("Deploying L1 verifier", self.toolchain.deploy_verifier)
        self._reload_env()
        self._step(
            "Running server genesis setup", self.toolchain.genesis_from_binary
        )
        self._step(
            "Deploying localhost ERC20 and Weth tokens",
            lambda: self.toolchain.deploy_erc20_and_weth("dev"),
        )
        self._step("Deploying L1 contracts", self.toolchain.redeploy_l1)
        self._step(
            "Deploying L2 contracts",
            lambda: self.toolchain.deploy_l2_through_l1(include_paymaster=True),
        )
        self._step("Initializing governance", self.toolchain.initialize_governance)

    def deploy_l2_contracts(self, init_args: InitArgs) -> StepResult:
        """Placeholder: reports a pending step and runs no collaborator."""
        result = pending("Deploying L2 contracts", self.echo, self.logger)
        self.history.append(result)
        return result
