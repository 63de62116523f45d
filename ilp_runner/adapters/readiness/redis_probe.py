# ilp_runner/adapters/readiness/redis_probe.py
from typing import Callable, Optional

import redis.asyncio as redis
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_delay,
    wait_exponential,
)

from ilp_runner.core.domain.exceptions import ReadinessError
from ilp_runner.core.domain.models import Component
from ilp_runner.core.ports.process_spawner import IChildHandle
from ilp_runner.core.ports.readiness_probe import IReadinessProbe

logger = structlog.get_logger()

# Errors we keep retrying on while redis-server is still starting up
RETRYABLE_EXCEPTIONS = (redis.ConnectionError, redis.TimeoutError, ConnectionError, OSError)

class RedisSocketProbe(IReadinessProbe):
    """
    Gates on the store answering PING over its unix socket.

    Retries with exponential backoff until `timeout` seconds have elapsed.
    """

    def __init__(
        self,
        socket_path: str,
        timeout: float = 10.0,
        client_factory: Optional[Callable[[], redis.Redis]] = None,
    ):
        self.socket_path = socket_path
        self.timeout = timeout
        self._client_factory = client_factory or self._default_client

    def _default_client(self) -> redis.Redis:
        return redis.Redis(unix_socket_path=self.socket_path, socket_connect_timeout=1)

    async def _ping(self) -> None:
        client = self._client_factory()
        try:
            if not await client.ping():
                raise ConnectionError("PING returned a falsy reply")
        finally:
            await client.aclose()

    async def wait_ready(self, component: Component, handle: IChildHandle) -> None:
        logger.info("readiness_probe_started", component=component.value, socket=self.socket_path)
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_delay(self.timeout),
                wait=wait_exponential(multiplier=0.05, max=1),
                retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
                reraise=True,
            ):
                with attempt:
                    await self._ping()
        except RETRYABLE_EXCEPTIONS as e:
            raise ReadinessError(
                component.value,
                f"no PING reply on {self.socket_path} within {self.timeout}s ({e})",
            ) from e
