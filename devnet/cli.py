# devnet/cli.py
# -*- coding: utf-8 -*-
"""
Command-line interface for bootstrapping the local development network.

Every subcommand loads the settings snapshot, reloads the environment file,
maps its flags to an `InitArgs` and runs one procedure of
`devnet.init_orchestrator.BootstrapOrchestrator`. A failing step stops the
run and the process exits with status 1.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click

from common.core_utils import setup_logging

from .config_loader import load_app_settings, reload_app_settings
from .config_models import AppSettings
from .init_args import ADDRESS_ONE, InitArgs, build_init_args
from .init_orchestrator import BootstrapOrchestrator
from .step_executor import StepResult
from .toolchain import ShellToolchain

logger = logging.getLogger(__name__)

base_token_name_option = click.option(
    "--base-token-name", default=None, help="Base token name."
)
base_token_address_option = click.option(
    "--base-token-address",
    default=None,
    help=f"Base token address. Defaults to {ADDRESS_ONE} (native gas token).",
)
skip_submodules_option = click.option(
    "--skip-submodules-checkout",
    is_flag=True,
    help="Do not run `git submodule init/update`.",
)
skip_setup_completely_option = click.option(
    "--skip-setup-completely",
    is_flag=True,
    help="Skip host checks, containers, dependency install and contract compilation.",
)


def _settings(ctx: click.Context) -> AppSettings:
    return ctx.obj["app_settings"]


def _run_procedure(
    ctx: click.Context,
    description: str,
    procedure: Callable[[BootstrapOrchestrator], Optional[StepResult]],
) -> None:
    app_settings = _settings(ctx)
    symbols = app_settings.symbols
    orchestrator = BootstrapOrchestrator(
        ShellToolchain(app_settings, logger), current_logger=logger
    )
    try:
        outcome = procedure(orchestrator)
    except Exception as e:
        logger.critical(
            f"{symbols.get('critical', '🔥')} {description} failed: {e}"
        )
        raise click.ClickException(f"{type(e).__name__}: {e}") from e

    if outcome is not None and not outcome.succeeded:
        click.echo(
            f"{symbols.get('pending', '⏳')} {description}: '{outcome.label}' is {outcome.status.value}; nothing was deployed."
        )
        return
    logger.info(
        f"{symbols.get('sparkles', '✨')} {description} completed successfully."
    )


def _init_args(ctx: click.Context, **kwargs: Any) -> InitArgs:
    return build_init_args(_settings(ctx), **kwargs)


@click.group()
@click.option(
    "--config-file",
    default=None,
    help="YAML configuration file (default: devnet.yaml in ZKSYNC_HOME).",
)
@click.option(
    "--log-level",
    default=None,
    help="Logging level (DEBUG, INFO, WARNING, ERROR). Overrides LOG_LEVEL.",
)
@click.option(
    "--log-file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Also write logs to this file.",
)
@click.pass_context
def cli(ctx: click.Context, config_file, log_level, log_file):
    """Bootstrap a local development network from a clean checkout."""
    overrides: Dict[str, Any] = {"log_level": log_level}
    app_settings = load_app_settings(overrides, config_file)
    setup_logging(
        log_level=app_settings.log_level,
        log_file=log_file,
        log_prefix=app_settings.log_prefix,
        symbols=app_settings.symbols,
    )
    ctx.ensure_object(dict)
    ctx.obj["app_settings"] = reload_app_settings(app_settings)


@cli.command(name="init")
@skip_submodules_option
@click.option(
    "--skip-env-setup",
    is_flag=True,
    help="Do not pull images, check tools, install git hooks or start containers.",
)
@skip_setup_completely_option
@base_token_name_option
@base_token_address_option
@click.option(
    "--test-tokens-env-file",
    default=None,
    type=click.Path(path_type=Path),
    help="Env file passed to the test-token deployment.",
)
@click.pass_context
def init_command(
    ctx,
    skip_submodules_checkout,
    skip_env_setup,
    skip_setup_completely,
    base_token_name,
    base_token_address,
    test_tokens_env_file,
):
    """Perform network initialization for development."""
    init_args = _init_args(
        ctx,
        deploy_test_tokens=True,
        skip_submodules_checkout=skip_submodules_checkout,
        skip_env_setup=skip_env_setup,
        skip_setup_completely=skip_setup_completely,
        base_token_name=base_token_name,
        base_token_address=base_token_address,
        test_tokens_env_file=test_tokens_env_file,
    )
    _run_procedure(ctx, "init", lambda o: o.init(init_args))


@cli.command(name="reinit")
@click.pass_context
def reinit_command(ctx):
    """Reinitialize the network. Faster than `init`, but requires `init` to have run before."""
    _run_procedure(ctx, "reinit", lambda o: o.reinit())


@cli.command(name="lightweight-init")
@click.pass_context
def lightweight_init_command(ctx):
    """Perform lightweight network initialization for development."""
    _run_procedure(ctx, "lightweight-init", lambda o: o.lightweight_init())


@cli.command(name="init-hyper")
@base_token_name_option
@base_token_address_option
@click.pass_context
def init_hyper_command(ctx, base_token_name, base_token_address):
    """Initialize just the L2 chain on top of an existing shared bridge."""
    init_args = _init_args(
        ctx,
        deploy_test_tokens=False,
        base_token_name=base_token_name,
        base_token_address=base_token_address,
    )
    _run_procedure(ctx, "init-hyper", lambda o: o.init_hyper_only(init_args))


@cli.command(name="reinit-hyper")
@click.pass_context
def reinit_hyper_command(ctx):
    """Register one more L2 chain with the next chain id."""
    init_args = _init_args(ctx, deploy_test_tokens=False)
    _run_procedure(ctx, "reinit-hyper", lambda o: o.reinit_hyper(init_args))


@cli.command(name="init-shared-bridge")
@skip_submodules_option
@skip_setup_completely_option
@base_token_name_option
@base_token_address_option
@click.pass_context
def init_shared_bridge_command(
    ctx,
    skip_submodules_checkout,
    skip_setup_completely,
    base_token_name,
    base_token_address,
):
    """Deploy the shared bridge and state transition contracts."""
    init_args = _init_args(
        ctx,
        deploy_test_tokens=False,
        skip_submodules_checkout=skip_submodules_checkout,
        skip_setup_completely=skip_setup_completely,
        base_token_name=base_token_name,
        base_token_address=base_token_address,
    )
    _run_procedure(
        ctx, "init-shared-bridge", lambda o: o.init_shared_bridge(init_args)
    )


@cli.command(name="deploy-l2-contracts")
@base_token_name_option
@base_token_address_option
@click.pass_context
def deploy_l2_contracts_command(ctx, base_token_name, base_token_address):
    """Deploy L2 contracts once the hyperchain server is running."""
    init_args = _init_args(
        ctx,
        deploy_test_tokens=False,
        skip_submodules_checkout=True,
        skip_env_setup=True,
        base_token_name=base_token_name,
        base_token_address=base_token_address,
    )
    _run_procedure(
        ctx, "deploy-l2-contracts", lambda o: o.deploy_l2_contracts(init_args)
    )


@cli.command(name="view-config")
@click.pass_context
def view_config_command(ctx):
    """Show the effective configuration (private keys masked)."""
    app_settings = _settings(ctx)
    symbols = app_settings.symbols

    def _masked(value) -> str:
        return "[SET]" if value is not None else "[NOT SET]"

    lines = [
        f"{symbols.get('info', 'ℹ️')} Current effective configuration values (CLI > ENV > YAML > Defaults):",
        "",
        f"  Environment (ZKSYNC_ENV):      {app_settings.zksync_env}",
        f"  Repository root (ZKSYNC_HOME): {app_settings.zksync_home}",
        f"  Env file:                      {app_settings.env_file_path}",
        f"  Chain network id:              {app_settings.chain_eth_zksync_network_id}",
        f"  Running in CI:                 {app_settings.ci}",
        f"  Governor private key:          {_masked(app_settings.governor_private_key)}",
        f"  Deployer private key:          {_masked(app_settings.deployer_private_key)}",
        f"  Required tools:                {', '.join(app_settings.tooling.required_tools)}",
        f"  Minimum node version:          {app_settings.tooling.node_min_version}",
        f"  Minimum yarn version:          {app_settings.tooling.yarn_min_version}",
    ]
    click.echo("\n".join(lines))


if __name__ == "__main__":
    cli()
