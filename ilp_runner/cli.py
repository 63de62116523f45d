# ilp_runner/cli.py
"""
ILP Node Runner - command line entry point.

Usage:
    python -m ilp_runner              # same as 'run'
    python -m ilp_runner run          # Validate -> Store -> Settlement engine -> Account -> Node
    python -m ilp_runner run --gated  # same, but wait for each gated stage to be ready
    python -m ilp_runner check-config # Validate the environment and print it (secrets masked)
    python -m ilp_runner plan         # Print the launch commands without spawning anything
"""
import argparse
import asyncio
import json
import signal
import sys
from typing import List, Optional

import structlog
from pydantic import ValidationError

from ilp_runner.core.domain.exceptions import ConfigurationError
from ilp_runner.core.domain.models import ResolvedConfig
from ilp_runner.core.use_cases.launchers import DEFAULT_STAGES
from ilp_runner.shared.config import Settings, validate_environment
from ilp_runner.shared.container import Container
from ilp_runner.shared.logging_config import configure_logging
from ilp_runner.shared.telemetry import setup_telemetry

logger = structlog.get_logger()

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ilp-node-runner",
        description="Bootstrap a local Interledger node stack",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    run_parser = subparsers.add_parser("run", help="Launch the full stack (default)")
    run_parser.add_argument(
        "--gated",
        action="store_true",
        help="Wait for the store and the admin account before issuing the next stage",
    )

    subparsers.add_parser("check-config", help="Validate the environment")
    subparsers.add_parser("plan", help="Print launch commands without spawning")
    return parser

def build_container(config: ResolvedConfig, settings: Settings) -> Container:
    container = Container()
    container.resolved_config.override(config)
    container.readiness_timeout.override(settings.READINESS_TIMEOUT_SEC)
    return container

async def _launch_and_observe(container: Container, gated: bool) -> None:
    monitor = container.monitor()
    probes = container.readiness_probes() if gated else None
    stack = container.bootstrap_stack(probes=probes)

    # The observer runs alongside issuing so reports show up as they happen
    observer = asyncio.create_task(monitor.observe())
    try:
        await stack.execute()
        await observer
        logger.info("all_children_exited")
    finally:
        observer.cancel()

async def run_stack(container: Container, gated: bool = False) -> int:
    """
    Runs the stack until every watched child has exited or a termination
    signal arrives. Children are never stopped by the runner.
    """
    loop = asyncio.get_running_loop()
    task = asyncio.create_task(_launch_and_observe(container, gated))

    for s in (signal.SIGHUP, signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(s, task.cancel)
        except (NotImplementedError, RuntimeError):
            # Not the main thread, or no signal support on this platform
            break

    try:
        await task
    except asyncio.CancelledError:
        logger.info("runner_interrupted")
    finally:
        await container.monitor().stop()
    return EXIT_OK

def _print_plan(config: ResolvedConfig) -> None:
    for index, stage in enumerate(DEFAULT_STAGES, start=1):
        spec = stage.build_spec(config)
        env = "inherit" if spec.env is None else ",".join(sorted(spec.env)) or "-"
        print(f"[{index}/{len(DEFAULT_STAGES)}] {spec.component.value}: {spec.command_line()} (env: {env})")

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    command = args.command or "run"

    # 1. Read the environment
    try:
        settings = Settings()
    except ValidationError as e:
        configure_logging()
        logger.error("configuration_invalid", errors=e.errors(include_url=False, include_input=False))
        return EXIT_CONFIG_ERROR

    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT.value)

    # 2. Validate before anything is spawned
    try:
        config = validate_environment(settings)
    except ConfigurationError as e:
        logger.error("configuration_missing", missing=e.missing, message=e.message)
        return EXIT_CONFIG_ERROR

    if command == "check-config":
        print(json.dumps(config.redacted(), indent=2))
        return EXIT_OK

    if command == "plan":
        _print_plan(config)
        return EXIT_OK

    # 3. Launch
    logger.info("redis_data_dir", path=config.redis_dir)
    setup_telemetry(settings.OTEL_SERVICE_NAME, debug=settings.LOG_LEVEL.upper() == "DEBUG")

    gated = getattr(args, "gated", False) or settings.READINESS_GATING
    return asyncio.run(run_stack(build_container(config, settings), gated=gated))

if __name__ == "__main__":
    sys.exit(main())
