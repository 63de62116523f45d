# ilp_runner/adapters/readiness/completion_probe.py
import asyncio

from ilp_runner.core.domain.events import Exited
from ilp_runner.core.domain.exceptions import ReadinessError
from ilp_runner.core.domain.models import Component
from ilp_runner.core.ports.process_spawner import IChildHandle
from ilp_runner.core.ports.readiness_probe import IReadinessProbe

class CompletionProbe(IReadinessProbe):
    """Gates a one-shot command (the account bootstrap) on it exiting with code 0."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    async def wait_ready(self, component: Component, handle: IChildHandle) -> None:
        try:
            returncode = await asyncio.wait_for(handle.wait(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ReadinessError(component.value, f"still running after {self.timeout}s") from e

        exited = Exited.from_returncode(component, returncode)
        if not exited.succeeded:
            detail = f"signal {exited.signal}" if exited.signal else f"code {exited.code}"
            raise ReadinessError(component.value, f"exited with {detail}")
