# ilp_runner/adapters/readiness/__init__.py
from .completion_probe import CompletionProbe
from .redis_probe import RedisSocketProbe

__all__ = ["CompletionProbe", "RedisSocketProbe"]
