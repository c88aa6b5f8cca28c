"""
QuickJob - Rate Limiting

Per-client sliding windows on the authentication endpoints. Counters live
in process memory, so each worker limits independently.
"""

import math
import time
from collections import defaultdict, deque
from typing import NamedTuple, Optional
from starlette.types import ASGIApp, Receive, Scope, Send
from starlette.responses import JSONResponse


class RateRule(NamedTuple):
    limit: int
    window: int  # seconds


# Exact POST paths only
RATE_LIMIT_RULES: dict[str, RateRule] = {
    "/login": RateRule(10, 60),
    "/verify": RateRule(10, 60),
    "/auth/admin-login": RateRule(5, 60),
    "/signup-client": RateRule(10, 60),
    "/signup-professional": RateRule(10, 60),
}


class RateLimitStore:
    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._hits: dict[str, deque[float]] = defaultdict(deque)

    def hit(self, key: str, rule: RateRule) -> Optional[int]:
        """
        Count a request against ``key``.

        Returns None when the request is allowed, otherwise the number of
        seconds until the oldest hit leaves the window.
        """
        now = self._clock()
        hits = self._hits[key]
        while hits and hits[0] <= now - rule.window:
            hits.popleft()

        if len(hits) >= rule.limit:
            return max(1, math.ceil(hits[0] + rule.window - now))

        hits.append(now)
        return None

    def reset(self):
        self._hits.clear()


rate_limit_store = RateLimitStore()


def _client_host(scope: Scope) -> str:
    client = scope.get("client")
    return client[0] if client else "unknown"


class RateLimitMiddleware:
    """Answers 429 once a client exceeds the rule for the path it POSTs to."""

    def __init__(self, app: ASGIApp, store: RateLimitStore = rate_limit_store):
        self.app = app
        self.store = store

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        rule = None
        if scope["type"] == "http" and scope["method"] == "POST":
            rule = RATE_LIMIT_RULES.get(scope["path"])

        if rule is not None:
            retry_after = self.store.hit(f"{_client_host(scope)}:{scope['path']}", rule)
            if retry_after is not None:
                response = JSONResponse(
                    status_code=429,
                    content={"success": False, "message": "Too many requests. Please try again later."},
                    headers={"Retry-After": str(retry_after)},
                )
                await response(scope, receive, send)
                return

        await self.app(scope, receive, send)
