from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from aurascan.core.config import settings

# Keyed by client address; every limited route shares one in-process counter store.
limiter = Limiter(key_func=get_remote_address)


def rate_limit(limit: str | None = None):
    """Per-client limit for a route, or a no-op when RATE_LIMIT_ENABLED is off.

    Routes that fan out to the scoring provider pass their own, tighter limit;
    everything else uses RATE_LIMIT.
    """
    if not settings.rate_limit_enabled:
        return lambda func: func
    return limiter.limit(limit or settings.rate_limit)
