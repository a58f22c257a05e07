"""Sliding-window limiter and its backing stores."""

from contextlib import contextmanager
from decimal import Decimal
from unittest.mock import MagicMock

from portfolio_api.rate_limit import (
    MAX_PER_WINDOW,
    WINDOW_MS,
    DynamoDBWindowStore,
    InMemoryWindowStore,
    SlidingWindowRateLimiter,
)

from .conftest import FakeClock


class DictTable:
    """Just enough of a DynamoDB Table over a dict, keyed by clientId."""

    def __init__(self):
        self.rows = {}

    def get_item(self, Key, ConsistentRead=False):
        row = self.rows.get(Key["clientId"])
        return {"Item": row} if row else {}

    def put_item(self, Item):
        self.rows[Item["clientId"]] = Item

    def delete_item(self, Key):
        self.rows.pop(Key["clientId"], None)

    def scan(self, **kwargs):
        return {"Items": [{"clientId": key} for key in self.rows]}

    @contextmanager
    def batch_writer(self):
        yield self


class TestSlidingWindow:
    def test_defaults(self):
        assert WINDOW_MS == 60_000
        assert MAX_PER_WINDOW == 3

    def test_fourth_attempt_in_window_is_rejected(self):
        clock = FakeClock()
        limiter = SlidingWindowRateLimiter(clock=clock)
        results = []
        for _ in range(4):
            results.append(limiter.allow("1.2.3.4"))
            clock.advance(1_000)
        assert results == [True, True, True, False]

    def test_allowed_again_once_oldest_attempt_leaves_window(self):
        clock = FakeClock()
        start = clock.now
        limiter = SlidingWindowRateLimiter(clock=clock)
        for offset in (0, 10_000, 20_000):
            clock.now = start + offset
            assert limiter.allow("client")

        clock.now = start + 59_999
        assert not limiter.allow("client")

        clock.now = start + 60_000
        assert limiter.allow("client")
        # Oldest slot was reused; the window is full again
        assert not limiter.allow("client")

    def test_rejected_attempts_are_not_recorded(self):
        clock = FakeClock()
        start = clock.now
        limiter = SlidingWindowRateLimiter(clock=clock)
        for offset in (0, 10_000, 20_000):
            clock.now = start + offset
            limiter.allow("client")

        clock.now = start + 30_000
        assert not limiter.allow("client")

        clock.now = start + 60_000
        assert limiter.allow("client")

    def test_clients_are_counted_separately(self):
        limiter = SlidingWindowRateLimiter(clock=FakeClock())
        for _ in range(3):
            assert limiter.allow("a")
        assert not limiter.allow("a")
        assert limiter.allow("b")

    def test_stale_timestamps_are_dropped_on_write(self):
        clock = FakeClock()
        store = InMemoryWindowStore()
        limiter = SlidingWindowRateLimiter(store=store, clock=clock)
        limiter.allow("client")
        clock.advance(WINDOW_MS + 1)
        limiter.allow("client")
        assert store.get("client") == [clock.now]

    def test_custom_limits(self):
        clock = FakeClock()
        limiter = SlidingWindowRateLimiter(max_per_window=1, window_ms=1_000, clock=clock)
        assert limiter.allow("c")
        assert not limiter.allow("c")
        clock.advance(1_000)
        assert limiter.allow("c")

    def test_reset_forgets_everyone(self):
        limiter = SlidingWindowRateLimiter(clock=FakeClock())
        for _ in range(3):
            limiter.allow("c")
        limiter.reset()
        assert limiter.allow("c")


class TestInMemoryStore:
    def test_evicts_least_recently_used_client(self):
        store = InMemoryWindowStore(max_clients=2)
        store.set("a", [1], WINDOW_MS)
        store.set("b", [2], WINDOW_MS)
        store.set("a", [1, 3], WINDOW_MS)
        store.set("c", [4], WINDOW_MS)

        assert len(store) == 2
        assert store.get("b") == []
        assert store.get("a") == [1, 3]
        assert store.get("c") == [4]

    def test_get_returns_a_copy(self):
        store = InMemoryWindowStore()
        store.set("a", [1], WINDOW_MS)
        store.get("a").append(2)
        assert store.get("a") == [1]


class TestDynamoDBStore:
    def test_reads_timestamps_as_ints(self):
        table = MagicMock()
        table.get_item.return_value = {"Item": {"clientId": "c", "timestamps": [Decimal(5), Decimal(7)]}}
        store = DynamoDBWindowStore(table)
        assert store.get("c") == [5, 7]
        table.get_item.assert_called_once_with(Key={"clientId": "c"}, ConsistentRead=True)

    def test_missing_client_has_no_history(self):
        table = MagicMock()
        table.get_item.return_value = {}
        assert DynamoDBWindowStore(table).get("c") == []

    def test_writes_decimals_and_expiry(self):
        table = MagicMock()
        DynamoDBWindowStore(table).set("c", [1_000, 61_000], WINDOW_MS)
        item = table.put_item.call_args.kwargs["Item"]
        assert item["clientId"] == "c"
        assert item["timestamps"] == [Decimal(1_000), Decimal(61_000)]
        assert item["expiresAt"] == Decimal(122)

    def test_limiter_over_shared_table(self):
        clock = FakeClock()
        table = DictTable()
        first = SlidingWindowRateLimiter(store=DynamoDBWindowStore(table), clock=clock)
        second = SlidingWindowRateLimiter(store=DynamoDBWindowStore(table), clock=clock)

        assert first.allow("c")
        assert second.allow("c")
        assert first.allow("c")
        assert not second.allow("c")

    def test_reset_clears_shared_table(self):
        clock = FakeClock()
        table = DictTable()
        limiter = SlidingWindowRateLimiter(store=DynamoDBWindowStore(table), clock=clock)
        for client_id in ("a", "a", "a", "b"):
            limiter.allow(client_id)
        assert not limiter.allow("a")

        limiter.reset()
        assert table.rows == {}
        assert limiter.allow("a")

    def test_clear_follows_pagination(self):
        table = MagicMock()
        table.scan.side_effect = [
            {"Items": [{"clientId": "a"}], "LastEvaluatedKey": {"clientId": "a"}},
            {"Items": [{"clientId": "b"}]},
        ]
        batch = table.batch_writer.return_value.__enter__.return_value

        DynamoDBWindowStore(table).clear()

        assert table.scan.call_count == 2
        assert table.scan.call_args.kwargs["ExclusiveStartKey"] == {"clientId": "a"}
        deleted = [c.kwargs["Key"] for c in batch.delete_item.call_args_list]
        assert deleted == [{"clientId": "a"}, {"clientId": "b"}]
