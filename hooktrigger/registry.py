"""Job registries: which jobs are registered to fire on webhooks."""

import itertools
import json
import logging
from pathlib import Path
from typing import Protocol

from hooktrigger import db
from hooktrigger.models import Job, TriggerRegistration
from hooktrigger.triggers import UserAgentTrigger

logger = logging.getLogger(__name__)


class JobRegistry(Protocol):
    async def list_registrations(self) -> list[TriggerRegistration]: ...

    def is_eligible(self, job: Job) -> bool: ...


def is_buildable(job: Job) -> bool:
    """Disabled jobs and jobs without a command never run."""
    return job.enabled and bool(job.command.strip())


def read_jobs_file(path: str | Path) -> list[dict]:
    """Read job definitions from a JSON file.

    The file holds a list of objects with ``name`` and ``command`` keys and
    optional ``user_agent`` and ``enabled`` keys.
    """
    entries = json.loads(Path(path).read_text(encoding="utf-8"))
    return [
        {
            "name": entry["name"],
            "command": entry["command"],
            "user_agent": entry.get("user_agent", ""),
            "enabled": entry.get("enabled", True),
        }
        for entry in entries
    ]


class InMemoryJobRegistry:
    """Registry held in process memory, optionally seeded from a JSON file."""

    def __init__(self) -> None:
        self._registrations: dict[str, TriggerRegistration] = {}
        self._ids = itertools.count(1)

    def register(
        self,
        name: str,
        command: str,
        user_agent: str | None = "",
        enabled: bool = True,
    ) -> Job:
        """Register ``name``, replacing any earlier registration of the same job."""
        existing = self._registrations.get(name)
        job_id = existing.job.id if existing else next(self._ids)
        job = Job(id=job_id, name=name, command=command, enabled=enabled)
        self._registrations[name] = TriggerRegistration(job, UserAgentTrigger(user_agent))
        return job

    def unregister(self, name: str) -> None:
        self._registrations.pop(name, None)

    async def list_registrations(self) -> list[TriggerRegistration]:
        return list(self._registrations.values())

    def is_eligible(self, job: Job) -> bool:
        return is_buildable(job)

    def load_jobs_file(self, path: str | Path) -> int:
        """Register every job listed in a JSON file. Returns the number loaded."""
        entries = read_jobs_file(path)
        for entry in entries:
            self.register(**entry)
        logger.info("Loaded %d job(s) from %s", len(entries), path)
        return len(entries)


class PostgresJobRegistry:
    """Registry backed by the ``jobs`` table."""

    async def register(
        self,
        name: str,
        command: str,
        user_agent: str | None = "",
        enabled: bool = True,
    ) -> Job:
        return await db.create_job(name, command, user_agent_pattern=user_agent, enabled=enabled)

    async def load_jobs_file(self, path: str | Path) -> int:
        """Upsert every job listed in a JSON file. Returns the number loaded."""
        entries = read_jobs_file(path)
        for entry in entries:
            await self.register(**entry)
        logger.info("Loaded %d job(s) from %s", len(entries), path)
        return len(entries)

    async def list_registrations(self) -> list[TriggerRegistration]:
        rows = await db.list_registered_jobs()
        return [TriggerRegistration(job, UserAgentTrigger(pattern)) for job, pattern in rows]

    def is_eligible(self, job: Job) -> bool:
        return is_buildable(job)
