# ilp_runner/core/domain/exceptions.py
from typing import Iterable

class DomainError(Exception):
    """Base class for all runner exceptions."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

# --- Configuration Errors ---

class ConfigurationError(DomainError):
    """Raised when mandatory environment values are absent or empty. Fatal."""
    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(f"Must provide {', '.join(self.missing)}")

# --- Process Errors ---

class SpawnError(DomainError):
    """Raised when a child process could not be created (missing binary, permissions...)."""
    def __init__(self, component: str, cause: str):
        self.component = component
        self.cause = cause
        super().__init__(f"Failed to spawn '{component}': {cause}")

class ReadinessError(DomainError):
    """Raised by a readiness probe when a stage did not become ready in time."""
    def __init__(self, component: str, reason: str):
        self.component = component
        self.reason = reason
        super().__init__(f"Component '{component}' not ready: {reason}")
