"""Per-client fixed-window request governor.

Each client identifier gets a counter that resets when its window expires.
Because windows are fixed, a client can land up to 2x the limit across a
window boundary (max at the tail of one window, max again at the head of
the next).
"""

import asyncio
import threading
import time
from dataclasses import dataclass
from typing import Callable

import structlog
from starlette.requests import Request

logger = structlog.get_logger(__name__)

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateLimitEntry:
    """Admitted-request counter for one client window."""
    count: int
    reset_at: float


class RequestGovernor:
    """Admits or rejects requests per client identifier.

    All reads and writes of the entry map happen under one lock, so two
    concurrent requests from the same client cannot both take the last slot.
    """

    def __init__(
        self,
        max_requests: int = 15,
        window_seconds: float = 600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def admit(self, identifier: str) -> bool:
        """Count a request for `identifier` and report whether it may proceed.

        Args:
            identifier: Client key, usually the caller's address.

        Returns:
            True if the request is admitted, False if the client is over its limit.
        """
        with self._lock:
            now = self._clock()
            entry = self._entries.get(identifier)

            if entry is None or now > entry.reset_at:
                self._entries[identifier] = RateLimitEntry(count=1, reset_at=now + self.window_seconds)
                return True

            if entry.count >= self.max_requests:
                return False

            entry.count += 1
            return True

    def sweep(self) -> int:
        """Drop entries whose window has already expired.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if now > entry.reset_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    async def run_sweeper(self, interval_seconds: float = 1800) -> None:
        """Sweep expired entries forever, once per interval. Cancel to stop."""
        while True:
            await asyncio.sleep(interval_seconds)
            removed = self.sweep()
            logger.debug("rate_limit.swept", removed=removed, remaining=len(self))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def client_identifier(request: Request) -> str:
    """Derive the rate-limit key for a request.

    Uses the first X-Forwarded-For hop when present, then the socket peer.
    The header is trusted as-is; only put this behind a proxy that sets it.
    """
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop

    if request.client and request.client.host:
        return request.client.host

    return UNKNOWN_CLIENT
