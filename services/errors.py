"""Error taxonomy for the sync pipeline and shared HTTP error bodies."""
from __future__ import annotations

from typing import Dict


class FigmaSyncError(Exception):
    """Base class for every error raised by this project."""


class ConfigurationError(FigmaSyncError):
    """A required setting is missing or malformed. Fatal; never retried."""


class UpstreamAPIError(FigmaSyncError):
    """Non-success HTTP status from the Figma or GitHub API (status 0: no response)."""

    def __init__(self, service: str, status: int, detail: str = "") -> None:
        self.service = service
        self.status = status
        self.detail = detail
        super().__init__(f"{service} API error: {status} {detail}".rstrip())


class UpstreamTimeout(FigmaSyncError):
    """An outbound call exceeded its timeout budget."""

    def __init__(self, service: str, url: str) -> None:
        self.service = service
        self.url = url
        super().__init__(f"{service} request timed out: {url}")


class SignatureMismatch(FigmaSyncError):
    """Webhook body does not match the supplied HMAC signature. Answered with 401."""


def error_payload(message: str) -> Dict[str, str]:
    """Return a consistent error body for API responses."""
    return {"error": message}
