"""Rate limiter configuration module.

This module is separate from main.py to avoid circular imports when routers
need to access the limiter.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Limits for the unauthenticated auth endpoints
REGISTER_RATE_LIMIT = "5/hour"
LOGIN_RATE_LIMIT = "10/minute"

# Create rate limiter - imported by routers and main.py
limiter = Limiter(key_func=get_remote_address)
