# ilp_runner/shared/container.py
from dependency_injector import containers, providers

from ilp_runner.adapters.process.asyncio_spawner import AsyncioProcessSpawner
from ilp_runner.adapters.readiness import CompletionProbe, RedisSocketProbe
from ilp_runner.core.domain.models import Component, ResolvedConfig
from ilp_runner.core.use_cases.bootstrap_stack import BootstrapStack
from ilp_runner.core.use_cases.process_monitor import ProcessMonitor

class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    `resolved_config` has no default: it must be overridden with the output
    of `validate_environment` before anything else is resolved, so nothing
    can be spawned on an unvalidated configuration.
    """

    # 1. Configuration
    resolved_config = providers.Dependency(instance_of=ResolvedConfig)
    readiness_timeout = providers.Object(10.0)

    # 2. Gateways (Infrastructure Adapters)
    spawner = providers.Singleton(AsyncioProcessSpawner)

    # One monitor per run; every launcher publishes into it
    monitor = providers.Singleton(ProcessMonitor)

    store_probe = providers.Singleton(
        RedisSocketProbe,
        socket_path=resolved_config.provided.redis_unix_socket,
        timeout=readiness_timeout,
    )
    bootstrap_probe = providers.Singleton(CompletionProbe, timeout=readiness_timeout)

    # Opt-in gating; the default run passes no probes at all
    readiness_probes = providers.Dict({
        Component.STORE: store_probe,
        Component.BOOTSTRAP: bootstrap_probe,
    })

    # 3. Use Cases
    bootstrap_stack = providers.Factory(
        BootstrapStack,
        config=resolved_config,
        spawner=spawner,
        monitor=monitor,
    )
