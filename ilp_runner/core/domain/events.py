# ilp_runner/core/domain/events.py
import signal
import time
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from ilp_runner.core.domain.models import Component

class EventType(str, Enum):
    """
    Registry of child lifecycle events.
    Every event carries the component label it belongs to.
    """
    SPAWNED = "child.spawned"
    SPAWN_FAILED = "child.spawn_failed"
    EXITED = "child.exited"
    NOT_READY = "child.not_ready"

class LifecycleEvent(BaseModel):
    """
    The standard envelope for everything the ProcessMonitor observes.

    Attributes:
        component: Which stage of the stack the event belongs to.
        timestamp: Wall clock time the event was created.
    """
    component: Component
    timestamp: float = Field(default_factory=time.time)

class Spawned(LifecycleEvent):
    type: Literal[EventType.SPAWNED] = EventType.SPAWNED
    pid: Optional[int] = None

class SpawnFailed(LifecycleEvent):
    type: Literal[EventType.SPAWN_FAILED] = EventType.SPAWN_FAILED
    cause: str

class Exited(LifecycleEvent):
    """
    A child terminated. Exactly one of `code` / `signal` is normally set:
    `code` for a regular exit, `signal` (e.g. 'SIGKILL') when it was killed.
    """
    type: Literal[EventType.EXITED] = EventType.EXITED
    code: Optional[int] = None
    signal: Optional[str] = None

    @classmethod
    def from_returncode(cls, component: Component, returncode: int) -> "Exited":
        # asyncio reports death-by-signal N as returncode -N
        if returncode < 0:
            try:
                name = signal.Signals(-returncode).name
            except ValueError:
                name = str(-returncode)
            return cls(component=component, signal=name)
        return cls(component=component, code=returncode)

    @property
    def succeeded(self) -> bool:
        return self.code == 0

class NotReady(LifecycleEvent):
    type: Literal[EventType.NOT_READY] = EventType.NOT_READY
    reason: str

ProcessEvent = Union[Spawned, SpawnFailed, Exited, NotReady]
