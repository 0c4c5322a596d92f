"""Exceptions raised while handling an inbound webhook."""


class WebhookError(Exception):
    """Base exception for request-terminal webhook failures."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class MissingContentType(WebhookError):
    def __init__(self):
        super().__init__("Could not determine hook type from Content-Type header.", status_code=415)


class UnsupportedContentType(WebhookError):
    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(f"Unsupported content type: {content_type}", status_code=400)


class MalformedPayload(WebhookError):
    """Body unreadable, or not a JSON object under a JSON content type."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class EnrichmentFailure(Exception):
    """The aggregate payload variable could not be built. Never fatal."""
