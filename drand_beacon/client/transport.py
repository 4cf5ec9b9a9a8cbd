"""
drand_beacon.client.transport
-----------------------------

Transports fetch one URL and return its decoded JSON body.

`HttpTransport` is the only implementation shipped; tests and embedders can
pass any object with a compatible `fetch(url)` method.

Failure mapping:
  - HTTP 404 → NotFound, never retried
  - connection error, timeout or any other non-200 status → retried
    `retries` times with linear backoff, then NotResponding
  - a body that is not JSON → NotResponding, not retried
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional, Protocol

import requests

from ..constants import DEFAULT_BACKOFF_S, DEFAULT_RETRIES, DEFAULT_TIMEOUT_S
from ..errors import NotFound, NotResponding
from ..metrics import METRICS, Metrics
from ..version import __version__

logger = logging.getLogger(__name__)

__all__ = ["Transport", "HttpTransport"]


class Transport(Protocol):
    def fetch(self, url: str) -> Any:
        """Return the decoded JSON body served at `url`."""
        ...


class HttpTransport:
    """
    `requests`-based transport with bounded retries.

    Args:
        timeout_s: per-request timeout.
        retries:   extra attempts after the first failed one.
        backoff_s: attempt n waits n*backoff_s before retrying.
        session:   optional pre-configured `requests.Session`.
    """

    def __init__(
        self,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        retries: int = DEFAULT_RETRIES,
        backoff_s: float = DEFAULT_BACKOFF_S,
        session: Optional[requests.Session] = None,
        metrics: Metrics = METRICS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.timeout_s = timeout_s
        self.retries = max(0, int(retries))
        self.backoff_s = backoff_s
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", f"drand-beacon/{__version__}")
        self._metrics = metrics
        self._sleep = sleep

    def fetch(self, url: str) -> Any:
        attempts = self.retries + 1
        last_error = ""
        for attempt in range(1, attempts + 1):
            try:
                r = self.session.get(url, timeout=self.timeout_s, headers={"Accept": "application/json"})
            except requests.RequestException as e:
                self._metrics.record_fetch("unreachable")
                last_error = f"{type(e).__name__}: {e}"
            else:
                if r.status_code == 404:
                    self._metrics.record_fetch("not_found")
                    raise NotFound(f"{url}: HTTP 404")
                if r.status_code != 200:
                    self._metrics.record_fetch("http_error")
                    last_error = f"HTTP {r.status_code}"
                else:
                    try:
                        data = r.json()
                    except ValueError as e:
                        self._metrics.record_fetch("invalid")
                        raise NotResponding(f"{url}: response is not JSON") from e
                    self._metrics.record_fetch("ok")
                    return data

            if attempt < attempts:
                delay = self.backoff_s * attempt
                logger.warning(
                    "fetch %s failed (%s); retry %d/%d in %.2fs",
                    url, last_error, attempt, self.retries, delay,
                )
                self._sleep(delay)

        raise NotResponding(f"{url}: {last_error} after {attempts} attempt(s)")

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
