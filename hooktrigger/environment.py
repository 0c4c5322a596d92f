"""Export webhook payload fields as job environment variables."""

import json
import logging
import re
from typing import Any

from hooktrigger.errors import EnrichmentFailure
from hooktrigger.models import Webhook

logger = logging.getLogger(__name__)

# Prefix applied to every exported variable
ENV_VAR_PREFIX = "HOOK_"

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_env_name(key: str) -> str:
    """Convert a camelCase key to UPPER_UNDERSCORE, e.g. artifactInfo_buildId -> ARTIFACT_INFO_BUILD_ID."""
    return _WORD_BOUNDARY.sub("_", key).upper()


def stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, list):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def serialize_payload(fields: dict[str, Any]) -> str:
    try:
        return json.dumps(fields, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise EnrichmentFailure(str(e)) from e


def flatten(fields: dict[str, Any], prefix: str = ENV_VAR_PREFIX) -> list[tuple[str, str]]:
    """Flatten payload fields into (name, value) environment pairs.

    Nested mappings are walked recursively, their keys joined with "_".
    Keys are visited in sorted order so the output is stable. A final
    ``<prefix>PAYLOAD`` pair carries the whole payload as JSON; it is
    dropped if the payload cannot be serialized.
    """
    pairs: list[tuple[str, str]] = []
    _export_values(pairs, prefix, "", fields)

    try:
        pairs.append((prefix + "PAYLOAD", serialize_payload(fields)))
    except EnrichmentFailure as e:
        logger.warning("Could not serialize webhook payload, %sPAYLOAD omitted: %s", prefix, e)

    return pairs


def _export_values(
    pairs: list[tuple[str, str]],
    prefix: str,
    nesting: str,
    values: dict[str, Any],
) -> None:
    for key in sorted(values):
        value = values[key]
        if isinstance(value, dict):
            _export_values(pairs, prefix, f"{nesting}{key}_", value)
        else:
            name = prefix + to_env_name(nesting + key)
            if "=" in name or "\0" in name:
                logger.warning("Skipping payload key %r, not a valid environment variable name", nesting + key)
                continue
            pairs.append((name, stringify(value).replace("\0", "")))


def build_environment(hook: Webhook, prefix: str = ENV_VAR_PREFIX) -> dict[str, str]:
    """Environment variables contributed to a job triggered by ``hook``."""
    return dict(flatten(hook.fields, prefix))
