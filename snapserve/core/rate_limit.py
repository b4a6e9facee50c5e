from slowapi import Limiter
from slowapi.util import get_remote_address

from snapserve.core.config import settings

# Keyed by client address; switched off in tests via RATE_LIMIT_ENABLED
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["100/minute"],
    enabled=settings.RATE_LIMIT_ENABLED,
)
