"""Start triggered jobs without waiting for them."""

import asyncio
import logging
import os
from typing import Protocol

from hooktrigger.models import Job
from hooktrigger.triggers import TriggerCause

logger = logging.getLogger(__name__)


class JobRunner(Protocol):
    def submit(self, job: Job, cause: TriggerCause, environment: dict[str, str]) -> None: ...


class ShellJobRunner:
    """Runs each job's command in a shell subprocess on the event loop."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    @property
    def running(self) -> int:
        return len(self._tasks)

    def submit(self, job: Job, cause: TriggerCause, environment: dict[str, str]) -> None:
        env = {**os.environ, **environment, "HOOK_CAUSE": cause.short_description}
        task = asyncio.create_task(self._run(job, env), name=f"job-{job.name}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, job: Job, env: dict[str, str]) -> int | None:
        logger.info("Starting job %s", job.name)
        try:
            proc = await asyncio.create_subprocess_shell(job.command, env=env)
        except (OSError, ValueError):
            logger.exception("Job %s failed to start", job.name)
            return None

        returncode = await proc.wait()
        if returncode:
            logger.warning("Job %s exited with code %d", job.name, returncode)
        else:
            logger.info("Job %s finished", job.name)
        return returncode

    async def drain(self) -> None:
        """Wait for all in-flight jobs to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
