"""Webhook and job models as dataclasses."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from hooktrigger.triggers import UserAgentTrigger

# Any value a decoded payload field can hold.
JsonValue = Union[str, int, float, bool, None, dict[str, "JsonValue"], list["JsonValue"]]


@dataclass(frozen=True)
class Webhook:
    """A decoded inbound webhook.

    ``user_agent`` comes from the request header, never from the body.
    ``fields`` holds every key/value pair found in the payload.
    """

    user_agent: str = ""
    fields: dict[str, JsonValue] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"Webhook(user_agent={self.user_agent!r})"


@dataclass
class Job:
    id: int
    name: str
    command: str
    enabled: bool = True
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Job":
        return cls(
            id=row["id"],
            name=row["name"],
            command=row["command"],
            enabled=row.get("enabled", True),
            created_at=row.get("created_at"),
        )


@dataclass
class TriggerRegistration:
    job: Job
    trigger: "UserAgentTrigger"
