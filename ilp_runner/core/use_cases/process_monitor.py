# ilp_runner/core/use_cases/process_monitor.py
import asyncio
from typing import Any, Callable, Coroutine, List, Optional, Set

import structlog

from ilp_runner.core.domain.events import (
    Exited,
    NotReady,
    ProcessEvent,
    Spawned,
    SpawnFailed,
)
from ilp_runner.core.domain.models import Component
from ilp_runner.core.ports.process_spawner import IChildHandle

logger = structlog.get_logger()

EventHandler = Callable[[ProcessEvent], Coroutine[Any, Any, None]]

class ProcessMonitor:
    """
    Single observer for every child of the run.

    Launch stages and exit waiters publish typed events onto one ordered
    queue; `observe()` drains it and reports each event with its component
    label. The monitor only reports: it never restarts a child, never stops
    siblings and never exits the runner.
    """

    def __init__(self) -> None:
        # None is a wake-up sentinel, never reported
        self._queue: "asyncio.Queue[Optional[ProcessEvent]]" = asyncio.Queue()
        self._handlers: List[EventHandler] = []
        self._waiters: Set[asyncio.Task] = set()
        self._outstanding = 0
        self._sealed = False
        self.history: List[ProcessEvent] = []

    def subscribe(self, handler: EventHandler) -> None:
        """Registers an extra async handler, called for every observed event."""
        self._handlers.append(handler)

    def publish(self, event: ProcessEvent) -> None:
        self._queue.put_nowait(event)

    def watch(self, component: Component, handle: IChildHandle) -> None:
        """Starts waiting for `handle` to exit; publishes an Exited event when it does."""
        self._outstanding += 1
        task = asyncio.create_task(self._wait_for_exit(component, handle))
        self._waiters.add(task)
        task.add_done_callback(self._waiter_done)

    def seal(self) -> None:
        """Marks the end of issuing. `observe()` may return once all watched children are gone."""
        self._sealed = True
        self._queue.put_nowait(None)

    @property
    def outstanding(self) -> int:
        return self._outstanding

    async def observe(self) -> None:
        """
        The observer loop. Returns once the monitor is sealed, every watched
        child has exited, and every queued event has been reported.
        """
        while True:
            if self._sealed and self._outstanding == 0 and self._queue.empty():
                return
            event = await self._queue.get()
            if event is None:
                continue
            await self._dispatch(event)

    async def stop(self) -> None:
        """Cancels outstanding exit waiters (runner shutdown). Children are left alone."""
        for task in list(self._waiters):
            task.cancel()
        await asyncio.gather(*self._waiters, return_exceptions=True)

    async def _wait_for_exit(self, component: Component, handle: IChildHandle) -> None:
        try:
            returncode = await handle.wait()
            self.publish(Exited.from_returncode(component, returncode))
        except Exception as e:
            logger.error("child_wait_failed", component=component.value, error=str(e))

    def _waiter_done(self, task: asyncio.Task) -> None:
        # Runs even if the waiter was cancelled before it started
        self._waiters.discard(task)
        self._outstanding -= 1
        self._queue.put_nowait(None)

    async def _dispatch(self, event: ProcessEvent) -> None:
        self.history.append(event)
        self._report(event)

        for handler in self._handlers:
            try:
                await handler(event)
            except Exception as handler_err:
                # A broken subscriber must not stop the loop
                logger.error("event_handler_failed", event_type=event.type.value, error=str(handler_err))

    def _report(self, event: ProcessEvent) -> None:
        component = event.component.value

        if isinstance(event, Spawned):
            logger.info("child_spawned", component=component, pid=event.pid)

        elif isinstance(event, SpawnFailed):
            logger.error("child_spawn_failed", component=component, cause=event.cause)

        elif isinstance(event, NotReady):
            logger.warning("child_not_ready", component=component, reason=event.reason)

        elif isinstance(event, Exited):
            if event.component is Component.BOOTSTRAP:
                # Surface the command's own verdict instead of assuming success
                if event.succeeded:
                    logger.info("admin_account_created", component=component, code=event.code)
                else:
                    logger.error(
                        "admin_account_creation_failed",
                        component=component,
                        code=event.code,
                        signal=event.signal,
                    )
            else:
                logger.error("child_exited", component=component, code=event.code, signal=event.signal)

        else:
            logger.warning("unknown_event", event_type=getattr(event, "type", None))

__all__ = ["ProcessMonitor", "EventHandler"]
