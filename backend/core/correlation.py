"""
Request correlation IDs.

Every request gets a short ID that is attached to log records, Sentry events
and error envelopes so a user-reported error can be matched to server logs.
"""

import uuid
from contextvars import ContextVar

# Request-scoped correlation ID, set by CorrelationIdMiddleware
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """
    Generate a short correlation ID.

    Returns:
        8-character hexadecimal string (e.g. "3f9a01bc").
    """
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    """Return the current request's correlation ID, or "" outside a request."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Bind a correlation ID to the current request context.

    Args:
        correlation_id: ID received from the client or freshly generated.
    """
    correlation_id_var.set(correlation_id)
