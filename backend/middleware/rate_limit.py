"""Rate limiting middleware for the Landing Zone portal API."""

import os
import time
from collections import defaultdict
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

# Assistant calls that may reach the language model
AI_ROUTE_SUFFIXES = ("/messages", "/recommendations")
AI_ROUTE_PREFIX = "/api/ai-assistant/conversations/"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Simple in-memory sliding-window rate limiter, per client address."""

    # Prune stale client keys every 5 minutes
    _CLEANUP_INTERVAL = 300

    def __init__(self, app, requests_per_minute: Optional[int] = None, ai_requests_per_minute: Optional[int] = None):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute or int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))
        self.ai_requests_per_minute = ai_requests_per_minute or int(os.getenv("AI_RATE_LIMIT_PER_MINUTE", "30"))
        self._requests: dict[str, list[float]] = defaultdict(list)
        self._last_cleanup = time.time()

    def _get_client_id(self, request: Request) -> str:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        if request.client:
            return request.client.host
        return "unknown"

    def _is_ai_route(self, request: Request) -> bool:
        path = request.url.path
        return request.method == "POST" and path.startswith(AI_ROUTE_PREFIX) and path.endswith(AI_ROUTE_SUFFIXES)

    def _cleanup_stale_keys(self) -> None:
        now = time.time()
        if now - self._last_cleanup < self._CLEANUP_INTERVAL:
            return
        self._last_cleanup = now
        window_start = now - 60
        stale_keys = [
            key for key, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for key in stale_keys:
            del self._requests[key]

    def _check_rate(self, client_id: str, limit: int) -> bool:
        """Record a request and report whether the client is within its limit."""
        now = time.time()
        window_start = now - 60

        self._requests[client_id] = [
            t for t in self._requests[client_id] if t > window_start
        ]

        if len(self._requests[client_id]) >= limit:
            return False

        self._requests[client_id].append(now)
        return True

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == "/api/health":
            return await call_next(request)

        self._cleanup_stale_keys()

        client_id = self._get_client_id(request)

        if self._is_ai_route(request):
            if not self._check_rate(f"{client_id}:ai", self.ai_requests_per_minute):
                return JSONResponse(
                    status_code=429,
                    content={"detail": "Assistant rate limit exceeded. Please wait before trying again."},
                )

        if not self._check_rate(client_id, self.requests_per_minute):
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded. Please wait before trying again."},
            )

        return await call_next(request)
