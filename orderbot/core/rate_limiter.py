"""
Sliding-window rate limiting for the webhook endpoint.

State lives in process memory, which matches the single-process deployment.
"""
from __future__ import annotations

import logging
import threading
import time
from collections import defaultdict

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

EXEMPT_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


class RateLimiter:
    """In-memory rate limiter with sliding window."""

    def __init__(self, requests: int = 60, window: int = 60, clock=time.time):
        """
        Args:
            requests: Maximum requests allowed in window
            window: Time window in seconds
        """
        self.requests = requests
        self.window = window
        self._clock = clock
        self.clients: dict[str, list[float]] = defaultdict(list)
        self.last_cleanup = clock()
        self._lock = threading.Lock()

    def is_allowed(self, client_id: str) -> tuple[bool, int]:
        """
        Check if client is allowed to make request.

        Returns:
            (allowed, remaining)
        """
        now = self._clock()
        with self._lock:
            if now - self.last_cleanup > 300:
                self._cleanup(now)
                self.last_cleanup = now

            cutoff = now - self.window
            timestamps = [ts for ts in self.clients[client_id] if ts > cutoff]
            self.clients[client_id] = timestamps

            if len(timestamps) < self.requests:
                timestamps.append(now)
                return True, self.requests - len(timestamps)
            return False, 0

    def _cleanup(self, now: float) -> None:
        cutoff = now - self.window
        for client_id in list(self.clients.keys()):
            timestamps = [ts for ts in self.clients[client_id] if ts > cutoff]
            if timestamps:
                self.clients[client_id] = timestamps
            else:
                del self.clients[client_id]

        logger.info("Rate limiter cleanup: %s active clients", len(self.clients))


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: RateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        client_id = f"ip:{client_ip}"

        allowed, remaining = self.limiter.is_allowed(client_id)
        if not allowed:
            logger.warning("Rate limit exceeded for %s on %s %s", client_id, request.method, request.url.path)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": f"Rate limit exceeded. Try again in {self.limiter.window} seconds."},
                headers={
                    "Retry-After": str(self.limiter.window),
                    "X-RateLimit-Limit": str(self.limiter.requests),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limiter.requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
