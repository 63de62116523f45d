# ilp_runner/core/ports/readiness_probe.py
from typing import Protocol

from ilp_runner.core.domain.models import Component
from ilp_runner.core.ports.process_spawner import IChildHandle

class IReadinessProbe(Protocol):
    """
    Opt-in gate run right after a stage is issued.
    The next stage is only issued once the probe returns or fails.
    """

    async def wait_ready(self, component: Component, handle: IChildHandle) -> None:
        """
        Raises:
            ReadinessError: If the component is not ready within the probe's budget.
        """
        ...
