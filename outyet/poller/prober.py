"""Single-attempt existence check against a remote URL."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx

_DEFAULT_TIMEOUT_SEC = 10.0


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of one probe. error_detail is set only for transport-level failures."""

    success: bool
    error_detail: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def is_error(self) -> bool:
        return self.error_detail is not None


class Prober(ABC):
    """probe(url) -> ProbeOutcome. One attempt per call, no retries."""

    @abstractmethod
    def probe(self, url: str) -> ProbeOutcome:
        ...

    def close(self) -> None:
        """Release any held resources. Default: nothing to release."""
        return


class HttpProber(Prober):
    """HEAD the URL; success iff the (redirect-followed) response is 200 OK.

    One httpx.Client (connection pool, TLS context) is reused across probes until close().
    """

    def __init__(
        self,
        timeout: float = _DEFAULT_TIMEOUT_SEC,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if timeout is None or timeout <= 0:
            raise ValueError(f"probe timeout must be positive, got {timeout!r}")
        self.timeout = float(timeout)
        self._client = httpx.Client(
            timeout=self.timeout,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def probe(self, url: str) -> ProbeOutcome:
        try:
            r = self._client.head(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return ProbeOutcome(success=False, error_detail=f"HEAD {url}: {str(e) or type(e).__name__}")
        return ProbeOutcome(success=r.status_code == httpx.codes.OK, status_code=r.status_code)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpProber":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
