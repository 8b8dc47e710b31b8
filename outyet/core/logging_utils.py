"""Structured logging for probe outcomes and poll state transitions."""

import logging
import uuid
from typing import Optional

logger = logging.getLogger(__name__)


def new_trace_id() -> str:
    return str(uuid.uuid4())[:8]


def _ensure_trace_id(extra: dict) -> str:
    trace_id = extra.get("trace_id")
    if not trace_id:
        trace_id = new_trace_id()
        extra["trace_id"] = trace_id
    return trace_id


def _format(event: str, extra: dict) -> str:
    return event + " " + " ".join(f"{k}={v}" for k, v in sorted(extra.items()))


def log_probe(
    url: str,
    attempt: int,
    success: bool,
    status_code: Optional[int] = None,
    error: Optional[str] = None,
    trace_id: Optional[str] = None,
    extra: Optional[dict] = None,
) -> None:
    """Log one probe attempt. Transport errors at WARNING, everything else at DEBUG."""
    extra = extra or {}
    if trace_id:
        extra["trace_id"] = trace_id
    _ensure_trace_id(extra)
    extra["url"] = url
    extra["attempt"] = attempt
    extra["success"] = success
    if status_code is not None:
        extra["status_code"] = status_code
    if error:
        extra["error"] = repr(error)
        logger.warning(_format("probe", extra))
        return
    logger.debug(_format("probe", extra))


def log_poll_transition(
    from_state: str,
    to_state: str,
    url: str,
    attempts: int,
    trace_id: Optional[str] = None,
    extra: Optional[dict] = None,
) -> None:
    """Log poll state transition: trace_id, from_state, to_state, url, attempts."""
    extra = extra or {}
    if trace_id:
        extra["trace_id"] = trace_id
    _ensure_trace_id(extra)
    extra["from_state"] = from_state
    extra["to_state"] = to_state
    extra["url"] = url
    extra["attempts"] = attempts
    logger.info(_format("poll_transition", extra))
