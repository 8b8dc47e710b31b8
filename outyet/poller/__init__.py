"""Poller: prober, poll state and the background PollingStatus loop."""

from outyet.poller.prober import HttpProber, ProbeOutcome, Prober
from outyet.poller.state import PollState
from outyet.poller.status import MIN_POLL_PERIOD_SEC, PollingStatus, PollTarget

__all__ = [
    "HttpProber",
    "MIN_POLL_PERIOD_SEC",
    "PollState",
    "PollTarget",
    "PollingStatus",
    "ProbeOutcome",
    "Prober",
]
