# ilp_runner/core/use_cases/bootstrap_stack.py
from typing import List, Mapping, Optional, Sequence

import structlog

from ilp_runner.core.domain.events import NotReady, Spawned, SpawnFailed
from ilp_runner.core.domain.exceptions import ReadinessError, SpawnError
from ilp_runner.core.domain.models import Component, ResolvedConfig, RunState, StageResult
from ilp_runner.core.ports.process_spawner import IProcessSpawner
from ilp_runner.core.ports.readiness_probe import IReadinessProbe
from ilp_runner.core.use_cases.launchers import DEFAULT_STAGES, Launcher
from ilp_runner.core.use_cases.process_monitor import ProcessMonitor
from ilp_runner.shared.telemetry import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)

class BootstrapStack:
    """
    Use Case: Brings the node stack up in the fixed order
    store -> settlement engine -> admin account -> node.

    Fire-and-forget by default: each stage is issued right after the previous
    one, with no health check, retry or backoff. Issue order is not
    completion order; children are expected to tolerate it (e.g. by retrying
    their Redis connection).

    Passing `probes` opts into readiness gating for the listed components.
    A failed probe is reported and the next stage is issued anyway.

    A failure in one stage never prevents the following stages from being
    issued, and nothing already started is stopped.
    """

    def __init__(
        self,
        config: ResolvedConfig,
        spawner: IProcessSpawner,
        monitor: ProcessMonitor,
        probes: Optional[Mapping[Component, IReadinessProbe]] = None,
        stages: Sequence[Launcher] = DEFAULT_STAGES,
    ):
        self.config = config
        self.spawner = spawner
        self.monitor = monitor
        self.probes = dict(probes or {})
        self.stages = list(stages)
        self.state = RunState.VALIDATING

    async def execute(self) -> List[StageResult]:
        """
        Issues every stage and seals the monitor.

        Returns:
            One StageResult per stage, in issue order. Does not wait for any
            child to exit; run `monitor.observe()` for that.
        """
        logger.info("bootstrap_started", gated=sorted(c.value for c in self.probes))

        results = []
        try:
            for stage in self.stages:
                self.state = RunState.launching(stage.component)
                results.append(await self._issue(stage))
        finally:
            self.state = RunState.RUNNING
            self.monitor.seal()

        logger.info(
            "bootstrap_issued",
            issued=[r.component.value for r in results if r.issued],
            failed=[r.component.value for r in results if not r.issued],
        )
        return results

    async def _issue(self, stage: Launcher) -> StageResult:
        component = stage.component

        with tracer.start_as_current_span(f"stage.{component.value}") as span:
            span.set_attribute("app.component", component.value)

            # 1. Build the LaunchSpec
            spec = stage.build_spec(self.config)
            logger.info(
                "stage_issued",
                component=component.value,
                command=spec.command_line(),
                env_keys=sorted(spec.env) if spec.env is not None else "inherit",
            )

            # 2. Spawn (non-blocking)
            try:
                handle = await self.spawner.spawn(spec)
            except SpawnError as e:
                span.set_attribute("app.spawn_failed", True)
                self.monitor.publish(SpawnFailed(component=component, cause=e.cause))
                return StageResult(component=component, issued=False, error=e.cause)

            self.monitor.publish(Spawned(component=component, pid=handle.pid))
            self.monitor.watch(component, handle)

            # 3. Optional readiness gate
            probe = self.probes.get(component)
            if probe is None:
                return StageResult(component=component, issued=True, pid=handle.pid)

            try:
                await probe.wait_ready(component, handle)
            except ReadinessError as e:
                span.set_attribute("app.ready", False)
                self.monitor.publish(NotReady(component=component, reason=e.reason))
                return StageResult(component=component, issued=True, pid=handle.pid, ready=False)

            span.set_attribute("app.ready", True)
            logger.info("stage_ready", component=component.value)
            return StageResult(component=component, issued=True, pid=handle.pid, ready=True)
