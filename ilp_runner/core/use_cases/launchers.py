# ilp_runner/core/use_cases/launchers.py
"""
Launch stages of the node stack.

Each launcher turns the ResolvedConfig into a LaunchSpec for one child.
They are pure: nothing here spawns a process or reads the environment.
"""
from typing import Dict, Optional

from ilp_runner.core.domain.models import Component, LaunchSpec, ResolvedConfig

def _forward(name: str, value: Optional[str]) -> Dict[str, str]:
    """Builds a narrowed child environment holding a single variable (or nothing)."""
    return {name: value} if value is not None else {}

class Launcher:
    """Base class: one stage of the stack."""
    component: Component

    def build_spec(self, config: ResolvedConfig) -> LaunchSpec:
        raise NotImplementedError

class StoreLauncher(Launcher):
    """
    Redis on a unix socket instead of TCP: faster, and not exposed on the network.
    Persistence is an append-only log fsynced every second.
    """
    component = Component.STORE

    def build_spec(self, config: ResolvedConfig) -> LaunchSpec:
        return LaunchSpec(
            component=self.component,
            executable=config.redis_server_bin,
            args=(
                "--unixsocket", config.redis_unix_socket,
                "--unixsocketperm", "777",
                "--appendonly", "yes",
                "--appendfsync", "everysec",
                "--dir", config.redis_dir,
            ),
            # Redis gets the full parent environment
            env=None,
        )

class SettlementEngineLauncher(Launcher):
    """
    The ledger secret travels as a CLI argument only; the child environment
    is narrowed to DEBUG so the secret never leaks through inheritance.
    """
    component = Component.SETTLEMENT_ENGINE

    def build_spec(self, config: ResolvedConfig) -> LaunchSpec:
        secret = config.xrp_secret.get_secret_value()
        return LaunchSpec(
            component=self.component,
            executable=config.settlement_engine_bin,
            args=(
                f"--redis={config.redis_unix_socket}",
                f"--address={config.xrp_address}",
                f"--secret={secret}",
            ),
            env=_forward("DEBUG", config.debug),
            sensitive=config.secrets(),
        )

class AccountBootstrapper(Launcher):
    """
    One-shot `interledger node accounts add` creating the admin account.

    Not idempotent: every run re-issues the creation. The store refuses an
    account whose HTTP token or XRP address already exists, so a re-run is
    expected to exit non-zero; the monitor reports that outcome as-is.
    """
    component = Component.BOOTSTRAP

    def build_spec(self, config: ResolvedConfig) -> LaunchSpec:
        token = config.admin_token.get_secret_value()
        return LaunchSpec(
            component=self.component,
            executable=config.interledger_bin,
            args=(
                "node",
                "accounts",
                "add",
                f"--redis_uri={config.redis_uri}",
                f"--ilp_address={config.ilp_address}",
                f"--xrp_address={config.xrp_address}",
                f"--http_incoming_token={token}",
                f"--asset_code={config.asset_code}",
                f"--asset_scale={config.asset_scale}",
                "--admin",
            ),
            env=_forward("RUST_LOG", config.rust_log),
            sensitive=config.secrets(),
        )

class NodeLauncher(Launcher):
    """The long-running node that serves ILP traffic."""
    component = Component.NODE

    def build_spec(self, config: ResolvedConfig) -> LaunchSpec:
        return LaunchSpec(
            component=self.component,
            executable=config.interledger_bin,
            args=("node", f"--redis_uri={config.redis_uri}"),
            env=_forward("RUST_LOG", config.rust_log),
        )

# Issue order is fixed: store -> settlement engine -> bootstrap -> node
DEFAULT_STAGES = (
    StoreLauncher(),
    SettlementEngineLauncher(),
    AccountBootstrapper(),
    NodeLauncher(),
)
