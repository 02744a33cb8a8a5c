"""Rate limiter shared by all routers (keyed on client IP)."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from tms.config import settings

limiter = Limiter(key_func=get_remote_address)

# Per-route limit string, e.g. ``@limiter.limit(RATE_LIMIT)``
RATE_LIMIT = settings.rate_limit
