# middleware/rate_limit.py
"""
Rate limiting configuration using slowapi.

Usage in route files:
    from middleware.rate_limit import limiter

    @router.post("/expensive")
    @limiter.limit("5/minute")
    async def my_endpoint(request: Request):
        ...
"""
import logging
import os

from slowapi import Limiter
from slowapi.util import get_remote_address

logger = logging.getLogger(__name__)


# ─── Default limits ────────────────────────────────────────────────
# Env-overridable so limits can be tuned per environment.
DEFAULT_RATE_LIMIT = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")
ANALYSIS_RATE_LIMIT = os.getenv("RATE_LIMIT_ANALYSIS", "10/minute")

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[DEFAULT_RATE_LIMIT],
    storage_uri=os.getenv("REDIS_URL", "memory://"),
    strategy="fixed-window",
    enabled=os.getenv("RATE_LIMIT_ENABLED", "1") == "1",
)
