"""Request-scoped correlation IDs, loguru setup and Sentry initialization."""

from core.correlation import (
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from core.logging_config import configure_logging, correlation_filter
from core.sentry_config import init_sentry

__all__ = [
    "configure_logging",
    "correlation_filter",
    "generate_correlation_id",
    "get_correlation_id",
    "init_sentry",
    "set_correlation_id",
]
