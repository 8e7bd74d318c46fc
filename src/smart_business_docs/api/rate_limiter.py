"""Per-client rate limiting using a sliding window of request timestamps."""

import asyncio
import time
from typing import Dict, List, Optional

from fastapi import Request
from structlog import get_logger

logger = get_logger()

EXEMPT_PATHS = ("/health", "/metrics")


class RateLimitExceeded(Exception):
    """Exception raised when rate limit is exceeded."""
    pass


class RateLimiter:
    """Rate limiter keyed by client address and path."""

    def __init__(self, rate_limit: int = 50, time_window: int = 60):
        self.rate_limit = rate_limit
        self.time_window = time_window  # in seconds
        self.requests: Dict[str, List[float]] = {}
        self._lock = asyncio.Lock()
        self._cleanup_task: Optional[asyncio.Task] = None
        logger.info(
            "rate_limiter_initialized",
            rate_limit=rate_limit,
            time_window=time_window
        )

    async def start(self) -> None:
        """Start the periodic cleanup task."""
        if self._cleanup_task is None:
            self._cleanup_task = asyncio.create_task(self._periodic_cleanup())

    async def stop(self) -> None:
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None

    def _prune(self, key: str, now: float) -> List[float]:
        cutoff_time = now - self.time_window
        timestamps = [ts for ts in self.requests.get(key, []) if ts > cutoff_time]
        self.requests[key] = timestamps
        return timestamps

    async def _periodic_cleanup(self) -> None:
        """Drop keys whose timestamps have all left the window."""
        while True:
            try:
                await asyncio.sleep(self.time_window)
                async with self._lock:
                    now = time.monotonic()
                    for key in list(self.requests.keys()):
                        if not self._prune(key, now):
                            del self.requests[key]
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("rate_limiter_cleanup_error", error=str(e))

    async def check_rate_limit(self, key: str) -> int:
        """Record a request for the key and return how many remain in the window."""
        now = time.monotonic()

        async with self._lock:
            timestamps = self._prune(key, now)

            if len(timestamps) >= self.rate_limit:
                logger.warning(
                    "rate_limit_exceeded",
                    key=key,
                    current_requests=len(timestamps),
                    rate_limit=self.rate_limit
                )
                raise RateLimitExceeded(
                    f"Rate limit of {self.rate_limit} requests per {self.time_window} seconds exceeded"
                )

            timestamps.append(now)
            return self.rate_limit - len(timestamps)


def rate_limit_key(request: Request) -> str:
    client_ip = request.client.host if request.client else "unknown"
    return f"{client_ip}:{request.url.path}"


async def rate_limit_middleware(
    request: Request,
    rate_limiter: Optional[RateLimiter] = None
) -> Optional[int]:
    """Apply the limiter to a request; returns the remaining allowance."""
    if rate_limiter is None or request.url.path in EXEMPT_PATHS:
        return None
    return await rate_limiter.check_rate_limit(rate_limit_key(request))
