"""Fixed-window rate limits per user or client IP (inquiries, password reset emails).

Counting and window expiry are done by the `limits` package; this module keys
requests and turns window stats into response headers.
"""
import math
import time
from dataclasses import dataclass

from fastapi import Request
from fastapi.responses import JSONResponse
from limits import RateLimitItem, parse
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter

from campsite_api.config import get_settings
from campsite_api.models.profile import Profile
from campsite_api.services.analytics import client_ip


@dataclass
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float  # epoch seconds when the current window ends
    retry_after: int  # seconds; 0 when allowed

    def headers(self) -> dict[str, str]:
        h = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(int(self.reset_at)),
        }
        if not self.allowed:
            h["Retry-After"] = str(self.retry_after)
        return h


class WindowRateLimiter:
    """A named fixed-window limit such as "5/24 hours", shared by every key in its namespace."""

    def __init__(self, namespace: str, limit: str, storage: Storage | None = None):
        self.namespace = namespace
        self.item: RateLimitItem = parse(limit)
        self.storage = storage or MemoryStorage()
        self._strategy = FixedWindowRateLimiter(self.storage)

    @property
    def max_requests(self) -> int:
        return self.item.amount

    def hit(self, key: str) -> RateLimitResult:
        """Consume one request for `key`."""
        allowed = self._strategy.hit(self.item, self.namespace, key)
        return self._result(key, allowed)

    def peek(self, key: str) -> RateLimitResult:
        """Current window for `key` without consuming a request."""
        return self._result(key, self._strategy.test(self.item, self.namespace, key))

    def _result(self, key: str, allowed: bool) -> RateLimitResult:
        stats = self._strategy.get_window_stats(self.item, self.namespace, key)
        now = time.time()
        reset_at = stats.reset_time
        if stats.remaining >= self.item.amount or reset_at <= now:
            # No hits in the current window; a new one would start now
            reset_at = now + self.item.get_expiry()
        return RateLimitResult(
            allowed=allowed,
            limit=self.item.amount,
            remaining=stats.remaining,
            reset_at=reset_at,
            retry_after=0 if allowed else max(1, math.ceil(reset_at - now)),
        )

    def reset(self, key: str | None = None) -> None:
        if key is None:
            self.storage.reset()
        else:
            self._strategy.clear(self.item, self.namespace, key)


_settings = get_settings()
inquiry_limiter = WindowRateLimiter(
    "inquiry",
    f"{_settings.inquiry_rate_limit_max}/{_settings.inquiry_rate_limit_window_hours} hours",
)
password_reset_limiter = WindowRateLimiter(
    "password-reset",
    f"{_settings.password_reset_rate_limit_max}/{_settings.password_reset_rate_limit_window_hours} hours",
)


def rate_limit_key(request: Request, user: Profile | None = None) -> str:
    if user is not None:
        return f"user:{user.id}"
    return f"ip:{client_ip(request) or 'unknown'}"


def too_many_requests(result: RateLimitResult, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"success": False, "error": message, "retryAfter": result.retry_after},
        headers=result.headers(),
    )
