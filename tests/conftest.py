# tests/conftest.py
import asyncio
from typing import Dict, Iterable, List, Optional

import pytest

from ilp_runner.core.domain.exceptions import SpawnError
from ilp_runner.core.domain.models import Component, LaunchSpec
from ilp_runner.shared.config import Settings, validate_environment
from ilp_runner.shared.container import Container

ENV_VARS = (
    "XRP_ADDRESS", "XRP_SECRET", "ADMIN_TOKEN", "ILP_ADDRESS", "REDIS_DIR",
    "REDIS_UNIX_SOCKET", "RUST_LOG", "DEBUG", "ASSET_CODE", "ASSET_SCALE",
    "REDIS_SERVER_BIN", "SETTLEMENT_ENGINE_BIN", "INTERLEDGER_BIN",
    "READINESS_GATING", "READINESS_TIMEOUT_SEC", "LOG_LEVEL", "LOG_FORMAT",
)

class FakeChildHandle:
    """Child handle whose exit is triggered by the test via `finish()`."""

    def __init__(self, pid: int, returncode: Optional[int] = None):
        self.pid = pid
        self._returncode = returncode
        self._exited = asyncio.Event()
        if returncode is not None:
            self._exited.set()

    def finish(self, returncode: int) -> None:
        self._returncode = returncode
        self._exited.set()

    async def wait(self) -> int:
        await self._exited.wait()
        return self._returncode

class FakeSpawner:
    """
    Records every LaunchSpec it is asked to start.

    Components listed in `failures` raise SpawnError as a missing binary would;
    `exit_codes` makes the matching handle exit immediately.
    """

    def __init__(self, failures: Iterable[Component] = (), exit_codes: Optional[Dict[Component, int]] = None):
        self.failures = set(failures)
        self.exit_codes = exit_codes or {}
        self.specs: List[LaunchSpec] = []
        self.handles: Dict[Component, FakeChildHandle] = {}

    @property
    def issued(self) -> List[Component]:
        return [spec.component for spec in self.specs]

    async def spawn(self, spec: LaunchSpec) -> FakeChildHandle:
        self.specs.append(spec)
        if spec.component in self.failures:
            raise SpawnError(spec.component.value, f"executable '{spec.executable}' not found on PATH")
        handle = FakeChildHandle(pid=1000 + len(self.specs), returncode=self.exit_codes.get(spec.component))
        self.handles[spec.component] = handle
        return handle

    def finish_all(self, returncode: int = 0) -> None:
        for handle in self.handles.values():
            if not handle._exited.is_set():
                handle.finish(returncode)

async def wait_until(predicate, timeout: float = 1.0) -> None:
    """Yields to the loop until `predicate()` holds."""
    async def _poll():
        while not predicate():
            await asyncio.sleep(0.01)
    await asyncio.wait_for(_poll(), timeout)

@pytest.fixture
def clean_env(monkeypatch):
    """Removes every variable the runner reads."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch

@pytest.fixture
def valid_env(clean_env):
    clean_env.setenv("XRP_ADDRESS", "rEXAMPLE")
    clean_env.setenv("XRP_SECRET", "sEXAMPLE")
    clean_env.setenv("ADMIN_TOKEN", "tok123")
    return clean_env

@pytest.fixture
def resolved_config(valid_env):
    return validate_environment(Settings(_env_file=None))

@pytest.fixture
def fake_spawner():
    return FakeSpawner()

@pytest.fixture
def container(resolved_config, fake_spawner):
    """
    Container wired to a validated config, with the real process spawner
    replaced by a FakeSpawner.
    """
    container = Container()
    container.resolved_config.override(resolved_config)
    container.spawner.override(fake_spawner)
    container.readiness_timeout.override(0.5)

    yield container

    container.reset_override()
