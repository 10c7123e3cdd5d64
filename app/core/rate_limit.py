"""
Rate limiting middleware using in-memory storage.

State is per process; with several uvicorn workers each worker keeps its
own window.
"""
import time
import logging
from collections import defaultdict
from typing import Dict, List

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response, JSONResponse

logger = logging.getLogger(__name__)

CAPTURE_PATH_FRAGMENT = "/recipes/capture"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Sliding window rate limiter with a general limit and a stricter one
    for recipe capture submissions, which each cost a webhook call.
    """

    def __init__(
        self,
        app,
        requests_per_minute: int = 60,
        capture_per_minute: int = 10
    ):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.capture_per_minute = capture_per_minute
        self._request_counts: Dict[str, List[float]] = defaultdict(list)
        self._capture_counts: Dict[str, List[float]] = defaultdict(list)

    def _get_client_id(self, request: Request) -> str:
        """
        Identify the caller by a hash of its bearer token, falling back to
        the originating IP address.
        """
        auth_header = request.headers.get("authorization", "")
        if auth_header:
            return f"auth:{hash(auth_header)}"

        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return f"ip:{forwarded.split(',')[0].strip()}"

        client_host = request.client.host if request.client else "unknown"
        return f"ip:{client_host}"

    def _is_rate_limited(
        self,
        counts: List[float],
        limit: int,
        window: int = 60
    ) -> bool:
        """
        Check whether the caller exceeded ``limit`` requests in ``window``
        seconds, recording the current request when it did not.
        """
        now = time.time()
        counts[:] = [t for t in counts if now - t < window]

        if len(counts) >= limit:
            return True

        counts.append(now)
        return False

    def _get_retry_after(self, counts: List[float], window: int = 60) -> int:
        """Seconds until the oldest request leaves the window."""
        if not counts:
            return 0
        oldest = min(counts)
        return max(1, int(window - (time.time() - oldest)))

    def _too_many(self, detail: str, counts: List[float]) -> JSONResponse:
        retry_after = self._get_retry_after(counts)
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"detail": detail},
            headers={"Retry-After": str(retry_after)}
        )

    async def dispatch(self, request: Request, call_next) -> Response:
        client_id = self._get_client_id(request)
        path = request.url.path

        if path == "/health":
            return await call_next(request)

        if CAPTURE_PATH_FRAGMENT in path and request.method == "POST":
            counts = self._capture_counts[client_id]
            if self._is_rate_limited(counts, self.capture_per_minute):
                logger.warning(f"Capture rate limit exceeded for {client_id}")
                return self._too_many(
                    "Too many requests. Please wait before trying again.",
                    counts
                )

        counts = self._request_counts[client_id]
        if self._is_rate_limited(counts, self.requests_per_minute):
            logger.warning(f"Rate limit exceeded for {client_id}")
            return self._too_many("Rate limit exceeded. Please slow down.", counts)

        return await call_next(request)
