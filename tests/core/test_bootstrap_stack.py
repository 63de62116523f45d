# tests/core/test_bootstrap_stack.py
import asyncio

import pytest

from ilp_runner.core.domain.events import EventType
from ilp_runner.core.domain.exceptions import ReadinessError
from ilp_runner.core.domain.models import Component, RunState
from tests.conftest import wait_until

ORDER = [Component.STORE, Component.SETTLEMENT_ENGINE, Component.BOOTSTRAP, Component.NODE]

class RecordingProbe:
    """Readiness probe that records when it ran relative to the spawner."""

    def __init__(self, spawner, fail_with=None):
        self.spawner = spawner
        self.fail_with = fail_with
        self.calls = []

    async def wait_ready(self, component, handle):
        self.calls.append((component, list(self.spawner.issued)))
        await asyncio.sleep(0.01)
        if self.fail_with:
            raise ReadinessError(component.value, self.fail_with)

@pytest.mark.asyncio
class TestBootstrapStack:

    async def test_stages_issued_in_fixed_order(self, container, fake_spawner):
        """
        Scenario: Every executable is available.
        Expected: store -> settlement engine -> bootstrap -> node, all issued.
        """
        # Arrange
        stack = container.bootstrap_stack()

        # Act
        results = await stack.execute()

        # Assert
        assert fake_spawner.issued == ORDER
        assert [r.component for r in results] == ORDER
        assert all(r.issued for r in results)
        assert all(r.ready is None for r in results)
        assert stack.state == RunState.RUNNING

    async def test_issue_does_not_wait_for_children(self, container, fake_spawner):
        """
        Scenario: No child ever exits or becomes ready.
        Expected: execute() still returns promptly (fire-and-forget).
        """
        stack = container.bootstrap_stack()

        await asyncio.wait_for(stack.execute(), 0.5)

        assert all(not h._exited.is_set() for h in fake_spawner.handles.values())

    async def test_missing_store_binary_does_not_block_next_stage(self, container, fake_spawner):
        """
        Scenario: redis-server is not on PATH.
        Expected: A SpawnFailed report labeled 'store', then the settlement
        engine (and every later stage) is still issued.
        """
        # Arrange
        fake_spawner.failures.add(Component.STORE)
        monitor = container.monitor()
        stack = container.bootstrap_stack()

        # Act
        results = await stack.execute()
        fake_spawner.finish_all()
        await asyncio.wait_for(monitor.observe(), 1.0)

        # Assert
        assert fake_spawner.issued == ORDER
        assert not results[0].issued
        assert "not found" in results[0].error
        assert all(r.issued for r in results[1:])

        first = monitor.history[0]
        assert first.type == EventType.SPAWN_FAILED
        assert first.component == Component.STORE
        assert monitor.history[1].type == EventType.SPAWNED
        assert monitor.history[1].component == Component.SETTLEMENT_ENGINE

    async def test_every_stage_failing_still_issues_all(self, container, fake_spawner):
        fake_spawner.failures.update(ORDER)
        monitor = container.monitor()

        results = await container.bootstrap_stack().execute()
        await asyncio.wait_for(monitor.observe(), 1.0)

        assert fake_spawner.issued == ORDER
        assert not any(r.issued for r in results)
        assert [e.component for e in monitor.history] == ORDER

    async def test_node_termination_is_reported_once(self, container, fake_spawner):
        """
        Scenario: The node dies from SIGKILL after a successful launch.
        Expected: Exactly one termination report for 'node'; the runner keeps
        observing the remaining children.
        """
        # Arrange
        monitor = container.monitor()
        observer = asyncio.create_task(monitor.observe())
        await container.bootstrap_stack().execute()

        # Act
        fake_spawner.handles[Component.NODE].finish(-9)
        await wait_until(lambda: any(e.type == EventType.EXITED for e in monitor.history))

        # Assert
        node_exits = [e for e in monitor.history if e.type == EventType.EXITED and e.component == Component.NODE]
        assert len(node_exits) == 1
        assert node_exits[0].signal == "SIGKILL"
        assert not observer.done()

        fake_spawner.finish_all()
        await asyncio.wait_for(observer, 1.0)

    async def test_bootstrap_exit_code_is_observed(self, container, fake_spawner):
        fake_spawner.exit_codes[Component.BOOTSTRAP] = 1
        monitor = container.monitor()

        await container.bootstrap_stack().execute()
        fake_spawner.finish_all()
        await asyncio.wait_for(monitor.observe(), 1.0)

        bootstrap = [e for e in monitor.history if e.type == EventType.EXITED and e.component == Component.BOOTSTRAP]
        assert len(bootstrap) == 1
        assert bootstrap[0].code == 1

    async def test_secrets_only_in_arguments(self, container, fake_spawner):
        await container.bootstrap_stack().execute()

        engine, bootstrap, node = fake_spawner.specs[1:]
        assert "--secret=sEXAMPLE" in engine.args
        assert "--http_incoming_token=tok123" in bootstrap.args
        for spec in (engine, bootstrap, node):
            assert "sEXAMPLE" not in spec.env.values()
            assert "tok123" not in spec.env.values()

@pytest.mark.asyncio
class TestReadinessGating:

    async def test_gated_stage_blocks_next_issue(self, container, fake_spawner):
        """
        Scenario: A probe is registered for the store.
        Expected: The probe runs after the store is spawned and before the
        settlement engine is issued.
        """
        probe = RecordingProbe(fake_spawner)
        stack = container.bootstrap_stack(probes={Component.STORE: probe})

        results = await stack.execute()

        assert probe.calls == [(Component.STORE, [Component.STORE])]
        assert results[0].ready is True
        assert fake_spawner.issued == ORDER

    async def test_failed_probe_reports_and_continues(self, container, fake_spawner):
        probe = RecordingProbe(fake_spawner, fail_with="no PING reply")
        monitor = container.monitor()
        stack = container.bootstrap_stack(probes={Component.STORE: probe})

        results = await stack.execute()
        fake_spawner.finish_all()
        await asyncio.wait_for(monitor.observe(), 1.0)

        assert results[0].ready is False
        assert fake_spawner.issued == ORDER
        not_ready = [e for e in monitor.history if e.type == EventType.NOT_READY]
        assert len(not_ready) == 1
        assert not_ready[0].reason == "no PING reply"

    async def test_probe_skipped_when_spawn_fails(self, container, fake_spawner):
        fake_spawner.failures.add(Component.STORE)
        probe = RecordingProbe(fake_spawner)

        await container.bootstrap_stack(probes={Component.STORE: probe}).execute()

        assert probe.calls == []

    async def test_container_probes_cover_store_and_bootstrap(self, container):
        probes = container.readiness_probes()

        assert set(probes) == {Component.STORE, Component.BOOTSTRAP}
        assert probes[Component.STORE].socket_path == "/tmp/redis.sock"
        assert probes[Component.BOOTSTRAP].timeout == 0.5
