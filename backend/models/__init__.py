"""Models package - Pydantic schemas, settings and domain types."""

from .exceptions import DomainException, ErrorCode

__all__ = [
    "DomainException",
    "ErrorCode",
]
