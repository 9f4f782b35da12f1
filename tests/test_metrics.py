"""
Tests for infrastructure/metrics.py — Prometheus counters and LatencyTimer.

Counters live in a module-level registry shared across the test session, so
every assertion compares a before/after delta instead of an absolute value.
"""

import time

from infrastructure.metrics import (
    _REGISTRY,
    LatencyTimer,
    get_metrics_response,
    record_cuts,
    record_pipeline_run,
)


def _value(name: str, **labels: str) -> float:
    return _REGISTRY.get_sample_value(name, labels) or 0.0


class TestRecordPipelineRun:
    def test_increments_status_counter(self):
        before = _value("beatcut_pipeline_runs_total", status="success")
        record_pipeline_run(status="success")
        assert _value("beatcut_pipeline_runs_total", status="success") == before + 1

    def test_latency_observed_only_when_given(self):
        before = _value("beatcut_pipeline_latency_seconds_count")
        record_pipeline_run(status="error")
        assert _value("beatcut_pipeline_latency_seconds_count") == before
        record_pipeline_run(status="success", latency_seconds=0.02)
        assert _value("beatcut_pipeline_latency_seconds_count") == before + 1


class TestRecordCuts:
    def test_counts_by_kind(self):
        onset_before = _value("beatcut_cuts_emitted_total", tempo="fast", kind="onset")
        forced_before = _value("beatcut_cuts_emitted_total", tempo="fast", kind="forced")
        record_cuts("fast", onset=5, forced=2)
        assert _value("beatcut_cuts_emitted_total", tempo="fast", kind="onset") == onset_before + 5
        assert (
            _value("beatcut_cuts_emitted_total", tempo="fast", kind="forced") == forced_before + 2
        )

    def test_zero_counts_leave_counter_alone(self):
        before = _value("beatcut_cuts_emitted_total", tempo="slow", kind="forced")
        record_cuts("slow", onset=0, forced=0)
        assert _value("beatcut_cuts_emitted_total", tempo="slow", kind="forced") == before


class TestExposition:
    def test_response_contains_metric_names(self):
        record_pipeline_run(status="success")
        body, content_type = get_metrics_response()
        assert b"beatcut_pipeline_runs_total" in body
        assert content_type.startswith("text/plain")


class TestLatencyTimer:
    def test_measures_elapsed(self):
        with LatencyTimer() as t:
            time.sleep(0.01)
        assert t.elapsed >= 0.005

    def test_elapsed_zero_before_exit(self):
        assert LatencyTimer().elapsed == 0.0
