# services/idempotency.py
"""Per-instance memory of recently accepted idempotency keys."""

from collections import OrderedDict
from typing import Callable, Optional, Tuple


class IdempotencyCache:
    """Maps a caller-supplied key to the submission id it produced, for ``ttl_ms``."""

    def __init__(self, ttl_ms: int, clock: Callable[[], int], max_entries: int = 10_000):
        self.ttl_ms = ttl_ms
        self.clock = clock
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, Tuple[str, int]]" = OrderedDict()

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        submission_id, stored_at = entry
        if self.clock() - stored_at >= self.ttl_ms:
            del self._entries[key]
            return None
        return submission_id

    def remember(self, key: str, submission_id: str) -> None:
        self._entries[key] = (submission_id, self.clock())
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()
