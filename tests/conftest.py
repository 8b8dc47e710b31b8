"""Pytest fixtures for outyet tests."""

import sys
import threading
from pathlib import Path
from typing import List, Optional, Sequence

import pytest
import yaml

# Ensure project root is in path for outyet imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from outyet.config import settings  # noqa: E402
from outyet.core.metrics import Metrics  # noqa: E402
from outyet.poller.prober import ProbeOutcome, Prober  # noqa: E402


class ScriptedProber(Prober):
    """Returns the given outcomes in order, then repeats the last one. Records every URL probed.

    on_probe(call_index) runs before each outcome is returned.
    """

    def __init__(self, outcomes: Sequence[ProbeOutcome], on_probe=None):
        self._outcomes = list(outcomes)
        self._on_probe = on_probe
        self._lock = threading.Lock()
        self.urls: List[str] = []
        self.closed = False

    @property
    def calls(self) -> int:
        with self._lock:
            return len(self.urls)

    def probe(self, url: str) -> ProbeOutcome:
        with self._lock:
            idx = len(self.urls)
            self.urls.append(url)
        if self._on_probe:
            self._on_probe(idx)
        return self._outcomes[min(idx, len(self._outcomes) - 1)]

    def close(self) -> None:
        self.closed = True


class RecordingSleeper:
    """Sleeper double: records requested periods and returns immediately.

    With max_calls set, the max_calls-th sleep blocks on release (so tests can stop a never-ending loop).
    """

    def __init__(self, max_calls: Optional[int] = None):
        self.periods: List[float] = []
        self.max_calls = max_calls
        self.reached = threading.Event()
        self.release = threading.Event()

    def __call__(self, seconds: float) -> None:
        self.periods.append(seconds)
        if self.max_calls is not None and len(self.periods) >= self.max_calls:
            self.reached.set()
            self.release.wait(5)


def fail(n: int, detail: Optional[str] = None) -> List[ProbeOutcome]:
    return [ProbeOutcome(success=False, error_detail=detail, status_code=None if detail else 404)] * n


OK = ProbeOutcome(success=True, status_code=200)


@pytest.fixture
def example_path() -> Path:
    """Packaged defaults file."""
    return Path(settings.__file__).resolve().parent / "config.yaml.example"


@pytest.fixture
def example_config(example_path: Path) -> dict:
    """Load the example config dict from YAML."""
    with open(example_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@pytest.fixture
def metrics() -> Metrics:
    return Metrics()


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()
