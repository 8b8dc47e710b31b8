"""In-memory poll metrics: hit count, poll count, poll error count, last poll error."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Counter and value names exported at /debug/vars.
HIT_COUNT = "hit_count"
POLL_COUNT = "poll_count"
POLL_ERROR_COUNT = "poll_error_count"
POLL_ERROR = "poll_error"

COUNTER_NAMES = (HIT_COUNT, POLL_COUNT, POLL_ERROR_COUNT)


class MetricsSink(ABC):
    """Sink the poller reports into. Counters only ever increase."""

    @abstractmethod
    def increment(self, name: str, n: int = 1) -> int:
        """Add n to counter name and return the new value."""
        ...

    @abstractmethod
    def set_value(self, name: str, value: Optional[str]) -> None:
        """Set a string value (e.g. last poll error)."""
        ...

    def snapshot(self) -> Dict[str, Any]:
        return {}


class NullMetrics(MetricsSink):
    """Discards everything."""

    def increment(self, name: str, n: int = 1) -> int:
        return 0

    def set_value(self, name: str, value: Optional[str]) -> None:
        return


class Metrics(MetricsSink):
    """Thread-safe in-memory counters and values; never reset while the process lives."""

    def __init__(self):
        self._lock = threading.Lock()
        self._counters: Dict[str, int] = {name: 0 for name in COUNTER_NAMES}
        self._values: Dict[str, Optional[str]] = {POLL_ERROR: None}

    def increment(self, name: str, n: int = 1) -> int:
        if n < 0:
            raise ValueError(f"counter {name} cannot decrease (n={n})")
        with self._lock:
            self._counters[name] = self._counters.get(name, 0) + n
            return self._counters[name]

    def set_value(self, name: str, value: Optional[str]) -> None:
        with self._lock:
            self._values[name] = value

    def get(self, name: str) -> Any:
        with self._lock:
            if name in self._counters:
                return self._counters[name]
            return self._values.get(name)

    @property
    def hit_count(self) -> int:
        return self.get(HIT_COUNT)

    @property
    def poll_count(self) -> int:
        return self.get(POLL_COUNT)

    @property
    def poll_error_count(self) -> int:
        return self.get(POLL_ERROR_COUNT)

    @property
    def poll_error(self) -> Optional[str]:
        return self.get(POLL_ERROR)

    def snapshot(self) -> Dict[str, Any]:
        """Copy of all counters and values, for JSON export."""
        with self._lock:
            out: Dict[str, Any] = dict(self._counters)
            out.update(self._values)
            return out

    def log_snapshot(self) -> None:
        """Log current metrics snapshot."""
        snap = self.snapshot()
        parts = [f"{k}={snap[k]}" for k in sorted(snap) if snap[k] is not None]
        logger.info("metrics " + " ".join(parts))


_global_metrics: Optional[Metrics] = None


def get_metrics() -> Metrics:
    global _global_metrics
    if _global_metrics is None:
        _global_metrics = Metrics()
    return _global_metrics
