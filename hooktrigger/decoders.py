"""Decode webhook bodies into Webhook models based on Content-Type."""

import json
from typing import Any, Callable
from urllib.parse import parse_qsl

from hooktrigger.errors import MalformedPayload, UnsupportedContentType
from hooktrigger.models import Webhook

APPLICATION_JSON = "application/json"
APPLICATION_FORM_URLENCODED = "application/x-www-form-urlencoded"


def mime_type(content_type: str) -> str:
    """Return the media type of a Content-Type header, without parameters."""
    return content_type.split(";", 1)[0].strip().lower()


def decode_json(body: bytes) -> dict[str, Any]:
    if not body.strip():
        raise MalformedPayload("This endpoint expects a POST request with JSON body.")
    try:
        payload = json.loads(body.decode("utf-8"))
    # ValueError covers bad UTF-8, bad JSON and integers past the digit limit
    except (ValueError, RecursionError) as e:
        raise MalformedPayload(f"Could not parse JSON body: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedPayload("JSON body must be an object.")
    return payload


def decode_form(body: bytes) -> dict[str, Any]:
    text = body.decode("utf-8", errors="replace")
    # Repeated keys: last one wins
    return dict(parse_qsl(text, keep_blank_values=True, encoding="utf-8", errors="replace"))


DECODERS: dict[str, Callable[[bytes], dict[str, Any]]] = {
    APPLICATION_JSON: decode_json,
    APPLICATION_FORM_URLENCODED: decode_form,
}


def decode(body: bytes, content_type: str) -> Webhook:
    """Decode a request body into a Webhook.

    Raises UnsupportedContentType for anything but JSON or URL-encoded form,
    and MalformedPayload when a JSON body does not parse to an object.
    """
    decoder = DECODERS.get(mime_type(content_type))
    if not decoder:
        raise UnsupportedContentType(content_type)

    return Webhook(fields=decoder(body))
