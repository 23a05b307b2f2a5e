"""Metrics — duration estimates and timelines derived from plan structure."""

from activity_plan.metrics.aggregator import (
    PlanMetrics,
    compute_plan_metrics,
    estimate_duration_seconds,
    flatten_steps,
    node_duration_seconds,
    step_duration_seconds,
)
from activity_plan.metrics.timeline import TimelineEntry, build_timeline

__all__ = [
    "PlanMetrics",
    "TimelineEntry",
    "build_timeline",
    "compute_plan_metrics",
    "estimate_duration_seconds",
    "flatten_steps",
    "node_duration_seconds",
    "step_duration_seconds",
]
