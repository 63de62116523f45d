# ilp_runner/core/ports/__init__.py
"""
Core Ports (Interfaces).

Protocols the infrastructure adapters implement so the launch logic can
start processes and probe readiness without knowing how that is done.
"""

from .process_spawner import IChildHandle, IProcessSpawner
from .readiness_probe import IReadinessProbe

__all__ = [
    "IChildHandle",
    "IProcessSpawner",
    "IReadinessProbe",
]
