"""Trigger criteria matched against incoming webhooks."""

from dataclasses import dataclass

from hooktrigger.models import Webhook


@dataclass(frozen=True)
class UserAgentTrigger:
    """Fires when the webhook's User-Agent contains ``user_agent``.

    Matching is a case-sensitive substring test. An empty pattern matches
    every webhook.
    """

    user_agent: str | None = ""

    def accepts(self, hook: Webhook) -> bool:
        return (self.user_agent or "") in (hook.user_agent or "")


@dataclass(frozen=True)
class TriggerCause:
    """Recorded on every job run started by a webhook."""

    user_agent: str = ""

    @property
    def short_description(self) -> str:
        if self.user_agent:
            return f"Started by webhook from {self.user_agent}"
        return "Started by webhook"
