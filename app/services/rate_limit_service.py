"""
RateLimitService Module

In-memory, per-client submission limiting for the contact form.
"""

import time
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class RateLimitRecord:
    count: int
    window_start: float


class RateLimiter:
    """Fixed reset window limiter keyed by client identifier.

    A window opens on the first submission from a client and lasts
    ``window_seconds``; at most ``max_requests`` submissions are admitted in
    it. An expired record is replaced lazily on the next submission. The
    table holds at most ``max_clients`` records and drops the least recently
    used one when full.

    Client identifiers are self-asserted, so this is abuse friction rather
    than an access control.
    """

    def __init__(
        self,
        window_seconds: float = 60,
        max_requests: int = 3,
        max_clients: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.max_clients = max_clients
        self._clock = clock
        self._records: "OrderedDict[str, RateLimitRecord]" = OrderedDict()

    @classmethod
    def from_settings(cls) -> "RateLimiter":
        return cls(
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            max_clients=settings.RATE_LIMIT_MAX_CLIENTS,
        )

    def __len__(self) -> int:
        return len(self._records)

    def get_record(self, client_id: str) -> Optional[RateLimitRecord]:
        return self._records.get(client_id)

    def is_rate_limited(self, client_id: str, now: Optional[float] = None) -> bool:
        """
        Record a submission from ``client_id`` and report whether it is over quota.

        Args:
            client_id: Rate limit bucket key
            now: Current time in clock seconds, defaults to the limiter's clock

        Returns:
            True if the submission must be rejected, False otherwise
        """
        if now is None:
            now = self._clock()

        record = self._records.get(client_id)

        if record is None or now - record.window_start > self.window_seconds:
            self._store(client_id, RateLimitRecord(count=1, window_start=now))
            return False

        self._records.move_to_end(client_id)

        if record.count >= self.max_requests:
            logger.info(f"Rate limit reached for client {client_id} ({record.count} in window)")
            return True

        record.count += 1
        return False

    def reset(self) -> None:
        self._records.clear()

    def _store(self, client_id: str, record: RateLimitRecord) -> None:
        self._records[client_id] = record
        self._records.move_to_end(client_id)
        while len(self._records) > self.max_clients:
            evicted, _ = self._records.popitem(last=False)
            logger.debug(f"Evicted rate limit record for client {evicted}")
