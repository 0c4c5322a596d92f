"""Match incoming webhooks against registered jobs and trigger them."""

import dataclasses
import logging
from dataclasses import dataclass, field

from hooktrigger.decoders import decode
from hooktrigger.environment import ENV_VAR_PREFIX, build_environment
from hooktrigger.errors import MissingContentType, WebhookError
from hooktrigger.models import Job, Webhook
from hooktrigger.registry import JobRegistry
from hooktrigger.runner import JobRunner
from hooktrigger.triggers import TriggerCause

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    hook: Webhook
    jobs: list[Job] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"Triggered {len(self.jobs)} build(s)."

    @property
    def status_code(self) -> int:
        # 501 tells the sender nothing was listening for this hook
        return 200 if self.jobs else 501


async def find_jobs_to_trigger(hook: Webhook, registry: JobRegistry) -> list[Job]:
    """Return the eligible jobs whose trigger accepts ``hook``."""
    jobs = []
    for registration in await registry.list_registrations():
        # Ignore disabled or not-yet-configured jobs
        if not registry.is_eligible(registration.job):
            continue

        if registration.trigger.accepts(hook):
            jobs.append(registration.job)

    return jobs


async def handle_webhook(
    body: bytes,
    content_type: str | None,
    user_agent: str | None,
    registry: JobRegistry,
    runner: JobRunner,
    prefix: str = ENV_VAR_PREFIX,
) -> DispatchResult:
    """Decode a webhook and start every job registered for it."""

    content_type = (content_type or "").strip()
    if not content_type:
        logger.warning("Received hook without Content-Type header.")
        raise MissingContentType()

    logger.info("Incoming webhook from user agent %s.", user_agent)
    logger.info("Incoming webhook content-type: %s.", content_type)
    try:
        hook = decode(body, content_type)
    except WebhookError as e:
        logger.warning("Rejected webhook: %s", e.message)
        raise
    hook = dataclasses.replace(hook, user_agent=user_agent or "")

    jobs = await find_jobs_to_trigger(hook, registry)
    logger.info("Incoming webhook %s triggered %d job(s).", hook, len(jobs))

    cause = TriggerCause(hook.user_agent)
    for job in jobs:
        runner.submit(job, cause, build_environment(hook, prefix))

    return DispatchResult(hook, jobs)
