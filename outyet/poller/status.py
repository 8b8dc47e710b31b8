"""PollingStatus: background loop that probes a URL until it answers 200 OK, then flips to CONFIRMED once.

The loop runs on its own daemon thread; request handlers read the state concurrently through
is_confirmed(). One lock guards every read and the single write of the state. The lock is never
held while probing or sleeping.
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from outyet.core.logging_utils import log_poll_transition, log_probe, new_trace_id
from outyet.core.metrics import HIT_COUNT, POLL_COUNT, POLL_ERROR, POLL_ERROR_COUNT, MetricsSink, get_metrics
from outyet.poller.prober import HttpProber, ProbeOutcome, Prober
from outyet.poller.state import PollState, can_transition

logger = logging.getLogger(__name__)

# Non-positive poll periods are clamped to this so the loop always yields between probes.
MIN_POLL_PERIOD_SEC = 0.1

Sleeper = Callable[[float], Any]
CompletionHook = Callable[[], None]


@dataclass(frozen=True)
class PollTarget:
    """URL to probe and seconds between probes. Immutable once built."""

    url: str
    period: float

    def __post_init__(self):
        if not isinstance(self.url, str) or not self.url.strip():
            raise ValueError("poll target url must be a non-empty string")
        try:
            period = float(self.period)
        except (TypeError, ValueError):
            raise ValueError(f"poll target period must be seconds, got {self.period!r}") from None
        if not math.isfinite(period):
            raise ValueError(f"poll target period must be finite, got {self.period!r}")


class PollingStatus:
    """Holds PENDING/CONFIRMED for one target and runs the loop that moves it to CONFIRMED.

    Args:
        target: what to poll and how often.
        prober: single-attempt checker; defaults to HttpProber().
        metrics: sink for hit/poll/error counters; defaults to the process-wide Metrics.
        sleeper: called with the poll period between failed probes. Defaults to waiting on the
            stop event, so stop() interrupts the sleep.
        on_confirmed: zero-argument hook called exactly once, after the transition to CONFIRMED.
    """

    def __init__(
        self,
        target: PollTarget,
        prober: Optional[Prober] = None,
        metrics: Optional[MetricsSink] = None,
        sleeper: Optional[Sleeper] = None,
        on_confirmed: Optional[CompletionHook] = None,
    ):
        self.target = target
        self._prober = prober if prober is not None else HttpProber()
        self._metrics = metrics if metrics is not None else get_metrics()
        self._stop_event = threading.Event()
        self._sleeper = sleeper if sleeper is not None else self._stop_event.wait
        self._on_confirmed = on_confirmed
        self._trace_id = new_trace_id()

        self._lock = threading.Lock()  # protects _state and _thread
        self._state = PollState.PENDING
        self._thread: Optional[threading.Thread] = None

    @property
    def period(self) -> float:
        """Effective seconds between probes (target period, clamped to MIN_POLL_PERIOD_SEC)."""
        return max(float(self.target.period), MIN_POLL_PERIOD_SEC)

    @property
    def state(self) -> PollState:
        with self._lock:
            return self._state

    def is_confirmed(self) -> bool:
        """True once a probe has succeeded. Safe from any thread; counts as a hit."""
        self._metrics.increment(HIT_COUNT)
        with self._lock:
            return self._state is PollState.CONFIRMED

    def start(self) -> threading.Thread:
        """Start the polling loop on a daemon thread and return it. Raises RuntimeError if already started."""
        with self._lock:
            if self._thread is not None:
                raise RuntimeError(f"polling of {self.target.url} already started")
            self._thread = threading.Thread(
                target=self._poll, name=f"outyet-poll-{self._trace_id}", daemon=True
            )
            thread = self._thread
        logger.info("Polling %s every %.1fs (trace_id=%s)", self.target.url, self.period, self._trace_id)
        thread.start()
        return thread

    def stop(self) -> None:
        """Ask the loop to exit at its next suspension point. State is left as is."""
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the loop thread. Returns True if it has finished (or was never started)."""
        with self._lock:
            thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def is_running(self) -> bool:
        with self._lock:
            thread = self._thread
        return thread is not None and thread.is_alive()

    def _poll(self) -> None:
        attempts = 0
        while not self._stop_event.is_set():
            attempts += 1
            if self._probe_once(attempts).success:
                self._confirm(attempts)
                return
            self._sleeper(self.period)
        logger.info("Polling %s stopped after %d attempts without confirmation", self.target.url, attempts)

    def _probe_once(self, attempt: int) -> ProbeOutcome:
        self._metrics.increment(POLL_COUNT)
        try:
            outcome = self._prober.probe(self.target.url)
        except Exception as e:
            logger.exception("Prober failed on %s", self.target.url)
            outcome = ProbeOutcome(success=False, error_detail=str(e) or type(e).__name__)
        if outcome.is_error:
            self._metrics.set_value(POLL_ERROR, outcome.error_detail)
            self._metrics.increment(POLL_ERROR_COUNT)
        log_probe(
            self.target.url,
            attempt,
            outcome.success,
            status_code=outcome.status_code,
            error=outcome.error_detail,
            trace_id=self._trace_id,
        )
        return outcome

    def _confirm(self, attempts: int) -> None:
        with self._lock:
            from_state = self._state
            if not can_transition(from_state, PollState.CONFIRMED):
                return
            self._state = PollState.CONFIRMED
        log_poll_transition(
            from_state.value,
            PollState.CONFIRMED.value,
            self.target.url,
            attempts,
            trace_id=self._trace_id,
        )
        if self._on_confirmed:
            try:
                self._on_confirmed()
            except Exception as e:
                logger.warning("on_confirmed hook error: %s", e)
