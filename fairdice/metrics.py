"""
Prometheus metrics for fair rounds.

Counters for the round pipeline:
  • rounds_total:             rounds reaching a terminal state, by outcome
  • contributions_total:      counterpart contributions, by outcome
  • verifications_total:      audit checks of revealed rounds, by outcome
  • sampling_redraws_total:   rejection-sampling redraws in SecureRandom

Label cardinality is kept low: only an `outcome` label with a small, finite
vocabulary. No per-round or per-purpose labels.

Usage
-----
    from fairdice.metrics import METRICS

    METRICS.record_round("revealed")
    METRICS.record_contribution("invalid")

Construct your own `Metrics` with a separate `CollectorRegistry` when the
default process registry is not wanted (tests do this).
"""

from __future__ import annotations

from prometheus_client import REGISTRY, Counter

_ROUND_OUTCOMES = (
    "revealed",     # contribution accepted, key and host value disclosed
    "cancelled",    # abandoned while awaiting; secrets discarded unrevealed
)

_CONTRIBUTION_OUTCOMES = (
    "accepted",
    "invalid",      # not an integer in [0, range)
)

_VERIFY_OUTCOMES = (
    "ok",
    "mismatch",
)


class Metrics:
    """
    Container for the fair dice Prometheus instruments.

    Args:
        namespace: Prometheus metric namespace (prefix).
        subsystem: Prometheus metric subsystem.
        registry:  Prometheus registry to register the metrics with.
    """

    def __init__(
        self,
        *,
        namespace: str = "fairdice",
        subsystem: str = "protocol",
        registry=REGISTRY,
    ) -> None:
        self.registry = registry
        self.rounds_total = Counter(
            "rounds_total",
            "Fair rounds that reached a terminal state, labeled by outcome.",
            labelnames=("outcome",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.contributions_total = Counter(
            "contributions_total",
            "Counterpart contributions processed, labeled by outcome.",
            labelnames=("outcome",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.verifications_total = Counter(
            "verifications_total",
            "Commitment verifications performed, labeled by outcome.",
            labelnames=("outcome",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.sampling_redraws_total = Counter(
            "sampling_redraws_total",
            "Samples rejected and redrawn to keep uniform draws unbiased.",
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )

    # ----- Recording helpers -------------------------------------------------

    def record_round(self, outcome: str) -> None:
        if outcome not in _ROUND_OUTCOMES:
            raise ValueError(f"unknown round outcome: {outcome!r}")
        self.rounds_total.labels(outcome=outcome).inc()

    def record_contribution(self, outcome: str) -> None:
        if outcome not in _CONTRIBUTION_OUTCOMES:
            outcome = "invalid"
        self.contributions_total.labels(outcome=outcome).inc()

    def record_verification(self, ok: bool) -> None:
        self.verifications_total.labels(outcome="ok" if ok else "mismatch").inc()

    def record_redraw(self, n: int = 1) -> None:
        if n > 0:
            self.sampling_redraws_total.inc(n)


# Singleton used by most components
METRICS = Metrics()

__all__ = [
    "Metrics",
    "METRICS",
]
