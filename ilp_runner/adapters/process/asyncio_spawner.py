# ilp_runner/adapters/process/asyncio_spawner.py
import asyncio
import os
import shutil
import subprocess
from typing import Optional

import structlog

from ilp_runner.core.domain.exceptions import SpawnError
from ilp_runner.core.domain.models import LaunchSpec, StdioPolicy
from ilp_runner.core.ports.process_spawner import IChildHandle, IProcessSpawner

logger = structlog.get_logger()

class AsyncioChildHandle(IChildHandle):
    """Wraps an `asyncio.subprocess.Process`."""

    def __init__(self, process: asyncio.subprocess.Process):
        self._process = process

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode

    async def wait(self) -> int:
        # Safe to await from several places (monitor + completion probe)
        return await self._process.wait()

class AsyncioProcessSpawner(IProcessSpawner):
    """
    Starts children with `asyncio.create_subprocess_exec`.

    - No shell: arguments (secrets included) are never re-parsed.
    - The executable is resolved against *our* PATH, because narrowed child
      environments do not carry one.
    - Standard streams are inherited unless the LaunchSpec says otherwise.
    """

    def __init__(self, search_path: Optional[str] = None):
        self.search_path = search_path

    def resolve(self, executable: str) -> str:
        if os.sep in executable:
            return executable
        path = self.search_path if self.search_path is not None else os.environ.get("PATH", os.defpath)
        found = shutil.which(executable, path=path)
        if found is None:
            raise SpawnError(executable, f"executable '{executable}' not found on PATH")
        return found

    async def spawn(self, spec: LaunchSpec) -> AsyncioChildHandle:
        stream = subprocess.DEVNULL if spec.stdio is StdioPolicy.DEVNULL else None

        try:
            program = self.resolve(spec.executable)
            process = await asyncio.create_subprocess_exec(
                program,
                *spec.args,
                env=spec.env,
                stdin=stream,
                stdout=stream,
                stderr=stream,
            )
        except SpawnError as e:
            raise SpawnError(spec.component.value, e.cause) from e
        except OSError as e:
            # FileNotFoundError, PermissionError, ENOEXEC...
            raise SpawnError(spec.component.value, f"{type(e).__name__}: {e.strerror or e}") from e

        logger.debug("process_started", component=spec.component.value, pid=process.pid, program=program)
        return AsyncioChildHandle(process)
