# ilp_runner/core/ports/process_spawner.py
from typing import Optional, Protocol

from ilp_runner.core.domain.models import LaunchSpec

class IChildHandle(Protocol):
    """
    Opaque handle to a running child process.
    Owned by the orchestrator for the lifetime of the run, never reused.
    """

    @property
    def pid(self) -> Optional[int]:
        ...

    async def wait(self) -> int:
        """
        Waits for the child to terminate.

        Returns:
            The raw return code. Negative values mean the child was killed by
            signal -N.
        """
        ...

class IProcessSpawner(Protocol):
    """Port for starting external programs."""

    async def spawn(self, spec: LaunchSpec) -> IChildHandle:
        """
        Starts the process described by `spec` without waiting for it.

        Raises:
            SpawnError: If the executable is missing, not executable, etc.
        """
        ...
