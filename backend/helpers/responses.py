"""
Builders for the uniform response envelope.

Success: ``{"success": true, "data": ..., "meta": ...}``
Failure: ``{"success": false, "error": {"code", "message", "details"?}, "correlation_id"}``
"""

from typing import Any

from pydantic_core import ErrorDetails

from models.schemas import PaginationMeta


def envelope(data: Any = None, meta: PaginationMeta | None = None) -> dict[str, Any]:
    """Wrap a payload in the success envelope."""
    return {"success": True, "data": data, "meta": meta}


def error_envelope(
    code: str,
    message: str,
    correlation_id: str | None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"success": False, "error": error, "correlation_id": correlation_id}


def validation_details(errors: list[ErrorDetails]) -> dict[str, list[str]]:
    """
    Group pydantic errors by dotted field path.

    The leading location segment (``body``, ``query``, ``path``) is dropped;
    errors raised at model level are reported under ``body``.

    Args:
        errors: ``RequestValidationError.errors()``

    Returns:
        Mapping of field path to messages, e.g. ``{"confirmPassword": [...]}``
    """
    details: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        path = ".".join(loc[1:]) if len(loc) > 1 else (loc[0] if loc else "body")
        details.setdefault(path, []).append(_error_message(error))
    return details


def validation_message(
    errors: list[ErrorDetails], default: str = "Invalid input"
) -> str:
    """
    Top-level message for a failed request.

    A cross-field rule raised by a model validator (``value_error`` located on
    the whole body) is the most useful thing to show; otherwise ``default``.
    """
    for error in errors:
        if error.get("type") == "value_error" and len(error.get("loc", ())) <= 1:
            return _error_message(error)
    return default


def _error_message(error: ErrorDetails) -> str:
    message = str(error.get("msg", "Invalid value"))
    if message.startswith("Value error, "):
        message = message[len("Value error, ") :]
    return message
