"""Unit tests for Metrics sink (hit/poll/error counters, last poll error)."""

import threading

import pytest

from outyet.core.metrics import (
    HIT_COUNT,
    POLL_COUNT,
    POLL_ERROR,
    POLL_ERROR_COUNT,
    Metrics,
    NullMetrics,
    get_metrics,
)


class TestMetrics:
    def test_initial_snapshot(self):
        m = Metrics()
        assert m.snapshot() == {
            HIT_COUNT: 0,
            POLL_COUNT: 0,
            POLL_ERROR_COUNT: 0,
            POLL_ERROR: None,
        }

    def test_increment_returns_new_value(self):
        m = Metrics()
        assert m.increment(POLL_COUNT) == 1
        assert m.increment(POLL_COUNT, 2) == 3
        assert m.poll_count == 3

    def test_counters_never_decrease(self):
        m = Metrics()
        with pytest.raises(ValueError):
            m.increment(HIT_COUNT, -1)

    def test_set_value(self):
        m = Metrics()
        m.set_value(POLL_ERROR, "HEAD https://example.com: connection refused")
        assert m.poll_error == "HEAD https://example.com: connection refused"
        assert m.snapshot()[POLL_ERROR] == "HEAD https://example.com: connection refused"

    def test_unknown_counter_is_created(self):
        m = Metrics()
        m.increment("custom")
        assert m.get("custom") == 1

    def test_thread_safety(self):
        m = Metrics()

        def worker():
            for _ in range(1000):
                m.increment(HIT_COUNT)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert m.hit_count == 4000

    def test_log_snapshot(self, caplog):
        m = Metrics()
        m.increment(POLL_COUNT)
        with caplog.at_level("INFO", logger="outyet.core.metrics"):
            m.log_snapshot()
        assert "poll_count=1" in caplog.text


def test_null_metrics_discards():
    m = NullMetrics()
    assert m.increment(HIT_COUNT) == 0
    m.set_value(POLL_ERROR, "x")
    assert m.snapshot() == {}


def test_get_metrics_is_process_wide():
    assert get_metrics() is get_metrics()
