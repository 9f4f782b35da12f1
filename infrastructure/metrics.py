"""Prometheus metrics for the beat-cut pipeline.

Exposes cut-level context in metrics so dashboards show how often tracks
fall back to forced cuts, not just generic HTTP stats.

Metrics:
    beatcut_pipeline_runs_total          Counter by status (success/error)
    beatcut_pipeline_latency_seconds     Histogram of BeatCutEngine.process latency
    beatcut_cuts_emitted_total           Counter by tempo and kind (onset/forced)

Usage::

    from infrastructure.metrics import LatencyTimer, record_pipeline_run

    with LatencyTimer() as t:
        session = engine.process(buffer, 30.0)
    record_pipeline_run(status="success", latency_seconds=t.elapsed)
"""

from __future__ import annotations

import logging
import time

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

_REGISTRY = CollectorRegistry()

pipeline_runs_total = Counter(
    "beatcut_pipeline_runs_total",
    "Total cut pipeline runs by status",
    ["status"],
    registry=_REGISTRY,
)

pipeline_latency_seconds = Histogram(
    "beatcut_pipeline_latency_seconds",
    "Trim + detect + encode latency in seconds",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
    registry=_REGISTRY,
)

cuts_emitted_total = Counter(
    "beatcut_cuts_emitted_total",
    "Cuts emitted by tempo and kind (onset or forced)",
    ["tempo", "kind"],
    registry=_REGISTRY,
)

logger.debug("Prometheus metrics registry initialized")


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def record_pipeline_run(*, status: str, latency_seconds: float | None = None) -> None:
    """Record a finished pipeline run.

    Args:
        status: "success" or "error".
        latency_seconds: Wall-clock time of the run. Only observed when given.
    """
    pipeline_runs_total.labels(status=status).inc()
    if latency_seconds is not None:
        pipeline_latency_seconds.observe(latency_seconds)


def record_cuts(tempo: str, *, onset: int, forced: int) -> None:
    """Add one detection run's cut counts.

    Args:
        tempo: Profile name, e.g. "normal".
        onset: Number of amplitude-triggered cuts.
        forced: Number of cuts forced by the maximum spacing.
    """
    if onset:
        cuts_emitted_total.labels(tempo=tempo, kind="onset").inc(onset)
    if forced:
        cuts_emitted_total.labels(tempo=tempo, kind="forced").inc(forced)


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
    """
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            result = run_pipeline()
        record_pipeline_run(status="success", latency_seconds=t.elapsed)
    """

    def __init__(self) -> None:
        """Initialize timer."""
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        """Start timing."""
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        """Stop timing and record elapsed."""
        self.elapsed = time.perf_counter() - self._start
