"""Structured workout / activity plan representation.

Build plans with :func:`create_plan`, ingest stored documents with
:func:`normalize_plan`, and derive estimates with
:func:`estimate_duration_seconds`.
"""

from activity_plan.builder import PlanBuilder, create_plan, get_template
from activity_plan.errors import (
    BuilderAlreadyFinalized,
    EmptyPlan,
    EmptyRepetitionSteps,
    InvalidDuration,
    InvalidIntensity,
    InvalidRepeatCount,
    MalformedLegacyNode,
    MalformedLegacyPlan,
    MalformedNode,
    PlanError,
    UnknownDurationUnit,
    UnknownTargetType,
)
from activity_plan.metrics import (
    compute_plan_metrics,
    estimate_duration_seconds,
    flatten_steps,
)
from activity_plan.models import (
    ActivityClassification,
    Duration,
    PlanStructure,
    Repetition,
    Step,
    Target,
    TargetMetric,
)
from activity_plan.normalization import normalize_plan
from activity_plan.serialization import to_garmin_json, to_wire

__all__ = [
    "ActivityClassification",
    "BuilderAlreadyFinalized",
    "Duration",
    "EmptyPlan",
    "EmptyRepetitionSteps",
    "InvalidDuration",
    "InvalidIntensity",
    "InvalidRepeatCount",
    "MalformedLegacyNode",
    "MalformedLegacyPlan",
    "MalformedNode",
    "PlanBuilder",
    "PlanError",
    "PlanStructure",
    "Repetition",
    "Step",
    "Target",
    "TargetMetric",
    "UnknownDurationUnit",
    "UnknownTargetType",
    "compute_plan_metrics",
    "create_plan",
    "estimate_duration_seconds",
    "flatten_steps",
    "get_template",
    "normalize_plan",
    "to_garmin_json",
    "to_wire",
]
