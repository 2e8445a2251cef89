"""Exceptions raised by podbrief handlers.

Each error carries the HTTP status the API answers with.
"""

from typing import Optional


class PodbriefError(Exception):
    """Base exception for all podbrief errors."""

    status_code = 500


class InvalidRequest(PodbriefError):
    """Missing or malformed input identifiers."""

    status_code = 400


class NotFound(PodbriefError):
    """Referenced creator or episode does not exist."""

    status_code = 404


class UpstreamFetchError(PodbriefError):
    """The podcast site did not answer successfully."""

    status_code = 502

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ConfigurationError(PodbriefError):
    """Required configuration (the AI credential) is missing."""

    status_code = 500


class UpstreamAIError(PodbriefError):
    """The chat-completion endpoint returned a non-success response."""

    status_code = 502

    def __init__(self, status: Optional[int], body: str):
        super().__init__(f"AI API error: {status} - {body}")
        self.status = status
        self.body = body


class InvalidStatusTransition(PodbriefError):
    """An episode status change not allowed by the transition table."""

    def __init__(self, current, target):
        current_value = getattr(current, "value", current)
        target_value = getattr(target, "value", target)
        super().__init__(
            f"Illegal episode status transition: {current_value} -> {target_value}"
        )
        self.current = current
        self.target = target
