"""
/api gate: per-IP fixed-window rate limit and optional bearer token.

Both run as router dependencies and read their settings from app.state.
"""
import hmac
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List

from fastapi import Request, Response

from core.exceptions import GateRejected

# table size above which expired windows are pruned
PRUNE_THRESHOLD = 10000


@dataclass
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after: int  # seconds until the current window ends

    def headers(self) -> Dict[str, str]:
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_after),
        }


class FixedWindowRateLimiter:
    """Counts hits per key in fixed windows of window_seconds."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # key -> [window_start, hits]
        self._windows: Dict[str, List[float]] = {}

    def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            if len(self._windows) > PRUNE_THRESHOLD:
                self._prune(now)

            window = self._windows.get(key)
            if window is None or now - window[0] >= self.window_seconds:
                window = [now, 0]
                self._windows[key] = window
            window[1] += 1
            hits = int(window[1])
            reset_after = max(0, math.ceil(window[0] + self.window_seconds - now))

        return RateLimitDecision(
            allowed=hits <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - hits),
            reset_after=reset_after,
        )

    def _prune(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if now - w[0] >= self.window_seconds]
        for key in expired:
            del self._windows[key]


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(request: Request, response: Response) -> None:
    limiter: FixedWindowRateLimiter = request.app.state.rate_limiter
    decision = limiter.hit(client_ip(request))
    headers = decision.headers()
    if not decision.allowed:
        headers["Retry-After"] = str(decision.reset_after)
        raise GateRejected(429, "rate_limited", headers=headers)
    response.headers.update(headers)


def require_app_token(request: Request) -> None:
    token_expected = request.app.state.config.app_token
    if not token_expected:
        return

    auth = request.headers.get("authorization", "")
    token = auth[len("Bearer "):] if auth.startswith("Bearer ") else ""
    if not hmac.compare_digest(token.encode("utf-8"), token_expected.encode("utf-8")):
        raise GateRejected(401, "Unauthorized")
