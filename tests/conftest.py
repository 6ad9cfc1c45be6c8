# tests/conftest.py
from pathlib import Path
from typing import Any, List, Optional, Tuple

import pytest

from devnet.config_models import AppSettings

ENV_VARS_READ_BY_SETTINGS = [
    "CI",
    "ZKSYNC_ENV",
    "ZKSYNC_HOME",
    "GOVERNOR_PRIVATE_KEY",
    "DEPLOYER_PRIVATE_KEY",
    "CHAIN_ETH_ZKSYNC_NETWORK_ID",
    "LOG_LEVEL",
    "LOG_PREFIX",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the host's (or the CI runner's) variables out of every settings snapshot."""
    for name in ENV_VARS_READ_BY_SETTINGS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def app_settings(tmp_path: Path) -> AppSettings:
    return AppSettings(zksync_home=tmp_path)


class RecordingToolchain:
    """DevToolchain double that records every call in order."""

    def __init__(
        self,
        app_settings: AppSettings,
        fail_on: Optional[str] = None,
        error: Optional[BaseException] = None,
    ):
        self.app_settings = app_settings
        self.calls: List[Tuple[str, Tuple[Any, ...], dict]] = []
        self.fail_on = fail_on
        self.error = error or RuntimeError(f"{fail_on} failed")

    @property
    def names(self) -> List[str]:
        return [name for name, _, _ in self.calls]

    def calls_to(self, name: str) -> List[Tuple[Tuple[Any, ...], dict]]:
        return [(args, kwargs) for n, args, kwargs in self.calls if n == name]

    def _record(self, name: str, *args: Any, **kwargs: Any) -> None:
        self.calls.append((name, args, kwargs))
        if name == self.fail_on:
            raise self.error

    def docker_pull(self):
        self._record("docker_pull")

    def check_env(self):
        self._record("check_env")

    def git_hooks(self):
        self._record("git_hooks")

    def up(self):
        self._record("up")

    def submodule_update(self):
        self._record("submodule_update")

    def yarn(self):
        self._record("yarn")

    def contract_build(self):
        self._record("contract_build")

    def compile_all(self):
        self._record("compile_all")

    def db_drop(self):
        self._record("db_drop")

    def db_setup(self):
        self._record("db_setup")

    def clean(self, path):
        self._record("clean", path)

    def deploy_verifier(self, private_key=None):
        self._record("deploy_verifier", private_key)

    def reload_env(self):
        self._record("reload_env")
        return self.app_settings

    def genesis_from_sources(self):
        self._record("genesis_from_sources")

    def genesis_from_binary(self):
        self._record("genesis_from_binary")

    def deploy_erc20_and_weth(self, command, private_key=None, env_file=None):
        self._record("deploy_erc20_and_weth", command, private_key, env_file)

    def deploy_weth(self, private_key=None):
        self._record("deploy_weth", private_key)

    def redeploy_l1(self, private_key=None):
        self._record("redeploy_l1", private_key)

    def initialize_governance(self, private_key=None):
        self._record("initialize_governance", private_key)

    def register_hyperchain(self, base_token, private_key=None):
        self._record("register_hyperchain", base_token, private_key)

    def deploy_l2_through_l1(self, private_key=None, include_paymaster=False):
        self._record(
            "deploy_l2_through_l1", private_key, include_paymaster=include_paymaster
        )


@pytest.fixture
def toolchain(app_settings: AppSettings) -> RecordingToolchain:
    return RecordingToolchain(app_settings)
