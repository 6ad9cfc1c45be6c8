# devnet/init_args.py
# -*- coding: utf-8 -*-
"""
Parameters threaded through a single bootstrap run.

`InitArgs` is built once per CLI invocation from the settings snapshot and
the command's flags, then passed unchanged through every procedure.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .config_models import AppSettings

# Base-token address meaning "no explicit token, use the native gas asset".
ADDRESS_ONE = "0x0000000000000000000000000000000000000001"


class DeployerL2ContractInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    deployer_private_key: Optional[SecretStr] = None
    through_l1: bool = True
    include_paymaster: bool = True


class TokenDeploymentInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    deploy: bool = False
    deploy_weth: bool = False
    deployer_private_key: Optional[SecretStr] = None
    env_file: Optional[Path] = None


class BaseToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str = ADDRESS_ONE
    name: Optional[str] = None


class InitArgs(BaseModel):
    """Read-only configuration for one run of an init procedure."""

    model_config = ConfigDict(frozen=True)

    skip_submodules_checkout: bool = False
    skip_env_setup: bool = False
    skip_setup_completely: bool = False
    governor_private_key: Optional[SecretStr] = None
    deployer_l2_contract_input: DeployerL2ContractInput = Field(
        default_factory=DeployerL2ContractInput
    )
    test_tokens: TokenDeploymentInput = Field(default_factory=TokenDeploymentInput)
    base_token: BaseToken = Field(default_factory=BaseToken)


def resolve_base_token_address(address: Optional[str]) -> str:
    """An explicit address is kept verbatim; a missing or empty one becomes `ADDRESS_ONE`."""
    return address if address else ADDRESS_ONE


def build_init_args(
    app_settings: AppSettings,
    *,
    deploy_test_tokens: bool,
    skip_submodules_checkout: bool = False,
    skip_env_setup: bool = False,
    skip_setup_completely: bool = False,
    base_token_name: Optional[str] = None,
    base_token_address: Optional[str] = None,
    test_tokens_env_file: Optional[Path] = None,
) -> InitArgs:
    """
    Assemble `InitArgs` the way every CLI command does.

    Private keys come from the settings snapshot (`GOVERNOR_PRIVATE_KEY`,
    `DEPLOYER_PRIVATE_KEY`). L2 contracts are always deployed through L1 with
    a paymaster. `deploy_test_tokens` switches both the ERC20 and the WETH
    test-token flags.
    """
    deployer_key = app_settings.deployer_private_key
    return InitArgs(
        skip_submodules_checkout=skip_submodules_checkout,
        skip_env_setup=skip_env_setup,
        skip_setup_completely=skip_setup_completely,
        governor_private_key=app_settings.governor_private_key,
        deployer_l2_contract_input=DeployerL2ContractInput(
            deployer_private_key=deployer_key,
            through_l1=True,
            include_paymaster=True,
        ),
        test_tokens=TokenDeploymentInput(
            deploy=deploy_test_tokens,
            deploy_weth=deploy_test_tokens,
            deployer_private_key=deployer_key,
            env_file=test_tokens_env_file,
        ),
        base_token=BaseToken(
            name=base_token_name,
            address=resolve_base_token_address(base_token_address),
        ),
    )
