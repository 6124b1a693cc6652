"""
security/rate_limiter.py
-------------------------
Rate limiting dependency to slow down credential guessing.
Limits the number of requests a client can send within a time window.
"""

import time
from collections import defaultdict

from fastapi import HTTPException, Request

from config import RATE_LIMIT_REQUESTS, RATE_LIMIT_WINDOW_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)

# In-memory storage for rate tracking: {client_key: [timestamp1, timestamp2, ...]}
_client_timestamps: dict[str, list[float]] = defaultdict(list)


def _cleanup(key: str, now: float) -> None:
    """Remove expired timestamps for a client, and the client once idle."""
    cutoff = now - RATE_LIMIT_WINDOW_SECONDS
    recent = [t for t in _client_timestamps.get(key, []) if t > cutoff]
    if recent:
        _client_timestamps[key] = recent
    else:
        _client_timestamps.pop(key, None)


def reset() -> None:
    """Forget all tracked clients."""
    _client_timestamps.clear()


def rate_limited(request: Request) -> None:
    """
    FastAPI dependency that enforces rate limiting per client address.

    Configuration (via .env):
        RATE_LIMIT_REQUESTS: Max requests per window (default: 30).
        RATE_LIMIT_WINDOW_SECONDS: Window duration in seconds (default: 60).

    Behavior:
        - Tracks request timestamps per client host.
        - If exceeded, rejects the request with HTTP 429.
    """
    key = request.client.host if request.client else "unknown"
    now = time.time()
    _cleanup(key, now)

    if len(_client_timestamps[key]) >= RATE_LIMIT_REQUESTS:
        logger.warning(f"Rate limit hit for client {key}")
        raise HTTPException(status_code=429, detail="Too many requests, try again later")

    _client_timestamps[key].append(now)
