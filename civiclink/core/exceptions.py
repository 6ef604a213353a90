"""
Domain error taxonomy.

Every error is per-request: services raise these, the HTTP layer renders
them through ``register_exception_handlers`` and nothing here is fatal to
the process.
"""

# Standard library imports
from typing import Any


class CivicLinkError(Exception):
    status_code: int = 500
    code: str = "internal_server_error"
    default_message: str = "An unexpected error occurred."
    transient: bool = False

    def __init__(self, message: str | None = None, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class Unauthorized(CivicLinkError):
    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required"


class Forbidden(CivicLinkError):
    status_code = 403
    code = "forbidden"
    default_message = "You don't have permission to perform this action"


class NotFound(CivicLinkError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class Conflict(CivicLinkError):
    status_code = 409
    code = "conflict"
    default_message = "The resource was modified concurrently"


class ValidationFailed(CivicLinkError):
    status_code = 422
    code = "validation_failed"
    default_message = "Invalid request data"


class UpstreamUnavailable(CivicLinkError):
    status_code = 503
    code = "upstream_unavailable"
    default_message = "A backing service is unavailable, please retry"
    transient = True
