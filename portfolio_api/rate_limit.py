# rate_limit.py
"""Sliding-window rate limiting for the public submission endpoint.

Each client identifier maps to the timestamps (epoch milliseconds) of its
recently accepted attempts. Stale timestamps are dropped when the client is
inspected; nothing expires in the background.

Two backing stores are provided: a bounded in-process mapping, which is
enough when each Lambda instance serves one request at a time, and a
DynamoDB table shared between instances. Concurrent instances writing the
same DynamoDB item can under- or over-count slightly; that is accepted.
"""

import logging
import time
from collections import OrderedDict
from decimal import Decimal
from typing import Callable, List, Optional

from .aws import scan_all

logger = logging.getLogger(__name__)

WINDOW_MS = 60_000
MAX_PER_WINDOW = 3


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class InMemoryWindowStore:
    """Process-local timestamp store, bounded to ``max_clients`` entries.

    The least recently touched client is evicted first once the bound is hit.
    """

    def __init__(self, max_clients: int = 10_000):
        self.max_clients = max_clients
        self._entries: "OrderedDict[str, List[int]]" = OrderedDict()

    def get(self, client_id: str) -> List[int]:
        return list(self._entries.get(client_id, ()))

    def set(self, client_id: str, timestamps: List[int], window_ms: int) -> None:
        self._entries[client_id] = list(timestamps)
        self._entries.move_to_end(client_id)
        while len(self._entries) > self.max_clients:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted rate limit entry for {evicted}")

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class DynamoDBWindowStore:
    """Timestamp store backed by a DynamoDB table keyed on ``clientId``.

    Items carry an ``expiresAt`` epoch-seconds attribute so the table's TTL
    setting can remove idle clients.
    """

    def __init__(self, table, key_name: str = "clientId"):
        self.table = table
        self.key_name = key_name

    def get(self, client_id: str) -> List[int]:
        response = self.table.get_item(Key={self.key_name: client_id}, ConsistentRead=True)
        item = response.get("Item") or {}
        return [int(ts) for ts in item.get("timestamps", [])]

    def set(self, client_id: str, timestamps: List[int], window_ms: int) -> None:
        newest = max(timestamps) if timestamps else now_ms()
        self.table.put_item(Item={
            self.key_name: client_id,
            "timestamps": [Decimal(ts) for ts in timestamps],
            "expiresAt": Decimal((newest + window_ms) // 1000 + 1),
        })

    def clear(self) -> None:
        """Delete every client row. Scans the whole table; meant for tests and manual resets."""
        rows = scan_all(self.table, ProjectionExpression="#k", ExpressionAttributeNames={"#k": self.key_name})
        with self.table.batch_writer() as batch:
            for row in rows:
                batch.delete_item(Key={self.key_name: row[self.key_name]})
        logger.info(f"Cleared {len(rows)} rate limit rows")


class SlidingWindowRateLimiter:
    """Allow at most ``max_per_window`` attempts per client in any trailing window."""

    def __init__(
        self,
        store=None,
        max_per_window: int = MAX_PER_WINDOW,
        window_ms: int = WINDOW_MS,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.store = store if store is not None else InMemoryWindowStore()
        self.max_per_window = max_per_window
        self.window_ms = window_ms
        self.clock = clock or now_ms

    def recent_attempts(self, client_id: str, now: Optional[int] = None) -> List[int]:
        """Timestamps for ``client_id`` that still fall inside the window."""
        if now is None:
            now = self.clock()
        return [ts for ts in self.store.get(client_id) if now - ts < self.window_ms]

    def allow(self, client_id: str) -> bool:
        """Record an attempt and return True, or return False once the client is over the limit.

        Rejected attempts are not recorded.
        """
        now = self.clock()
        recent = self.recent_attempts(client_id, now)

        if len(recent) >= self.max_per_window:
            logger.info(f"Rate limit hit for client {client_id} ({len(recent)} in window)")
            return False

        recent.append(now)
        self.store.set(client_id, recent, self.window_ms)
        return True

    def reset(self) -> None:
        self.store.clear()
