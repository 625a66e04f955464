"""
Exception hierarchy.

Everything the scheduling service can raise derives from ServiceError, so
callers that only care about "the generate call failed" can catch that one
class. The orchestrator catches any Exception anyway and only uses the
message text.
"""

from __future__ import annotations

from typing import Optional


class SmartScheduleError(Exception):
    """Base class for all project-specific errors."""


class ConfigurationError(SmartScheduleError):
    """Required configuration (e.g. the API key) is missing."""


class ServiceError(SmartScheduleError):
    """The external scheduling service failed."""


class ServiceRequestError(ServiceError):
    """
    Network failure or a non-2xx HTTP status.

    status_code is None when no response was received at all.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidResponseError(ServiceError):
    """The model answered, but not with the JSON we asked for."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw
