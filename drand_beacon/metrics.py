"""
Prometheus metrics for beacon verification and fetching.

Instruments:
  • verifications_total: verdicts produced, labeled by verdict kind
  • verify_seconds     : time spent verifying one beacon (pairing dominated)
  • fetches_total      : HTTP fetches against a drand endpoint, labeled by outcome

Label vocabularies are closed so cardinality stays bounded; no per-round or
per-URL labels.

Usage
-----
    from drand_beacon.metrics import METRICS

    with METRICS.verify_timer():
        verdict = ...
    METRICS.record_verdict(verdict.kind.value)
    METRICS.record_fetch("ok")

Construct your own `Metrics` with a fresh `CollectorRegistry` in tests or
when embedding into an application with its own registry.
"""

from __future__ import annotations

from contextlib import contextmanager
from time import perf_counter
from typing import Iterable

from prometheus_client import REGISTRY, Counter, Histogram

from .errors import VerdictKind

_VERDICT_OUTCOMES = tuple(k.value for k in VerdictKind)

_FETCH_OUTCOMES = (
    "ok",           # 2xx with a decodable JSON body
    "not_found",    # 404
    "http_error",   # any other non-2xx status
    "unreachable",  # connection error / timeout after retries
    "invalid",      # body was not JSON
)

# Pure-Python pairings take tens of milliseconds up to a few seconds.
_VERIFY_BUCKETS = (
    0.01, 0.025, 0.05,
    0.1, 0.25, 0.5,
    1.0, 2.5, 5.0, 10.0,
)


class Metrics:
    """
    Container for all drand-beacon Prometheus instruments.

    Args:
        namespace: Prometheus metric namespace (prefix).
        subsystem: Prometheus metric subsystem.
        registry:  Prometheus registry to register the metrics with.
    """

    def __init__(
        self,
        *,
        namespace: str = "drand",
        subsystem: str = "beacon",
        registry=REGISTRY,
        verify_buckets: Iterable[float] = _VERIFY_BUCKETS,
    ) -> None:
        self.verifications_total = Counter(
            "verifications_total",
            "Number of beacon verifications, labeled by verdict.",
            labelnames=("outcome",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.fetches_total = Counter(
            "fetches_total",
            "Number of HTTP fetches against a drand endpoint, labeled by outcome.",
            labelnames=("outcome",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.verify_seconds = Histogram(
            "verify_seconds",
            "Time spent verifying one beacon (seconds).",
            buckets=tuple(verify_buckets),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )

    def record_verdict(self, outcome: str) -> None:
        if outcome not in _VERDICT_OUTCOMES:
            outcome = VerdictKind.MALFORMED_INPUT.value
        self.verifications_total.labels(outcome=outcome).inc()

    def record_fetch(self, outcome: str) -> None:
        if outcome not in _FETCH_OUTCOMES:
            outcome = "invalid"
        self.fetches_total.labels(outcome=outcome).inc()

    def observe_verify(self, seconds: float) -> None:
        self.verify_seconds.observe(float(seconds))

    @contextmanager
    def verify_timer(self):
        """
        Time a verification block.

        The block must not let exceptions out; the verifier converts every
        outcome into a verdict inside the timed region.
        """
        start = perf_counter()
        try:
            yield
        finally:
            self.observe_verify(perf_counter() - start)


METRICS = Metrics()

__all__ = [
    "Metrics",
    "METRICS",
]
