"""Data models for activity plan structures."""

from activity_plan.models.enums import (
    BuilderState,
    DurationKind,
    DurationUnit,
    SegmentRole,
    TargetMetric,
)
from activity_plan.models.nodes import Node, Repetition, Step
from activity_plan.models.plan import ActivityClassification, PlanStructure
from activity_plan.models.values import Duration, IntensityRange, Target

__all__ = [
    "ActivityClassification",
    "BuilderState",
    "Duration",
    "DurationKind",
    "DurationUnit",
    "IntensityRange",
    "Node",
    "PlanStructure",
    "Repetition",
    "SegmentRole",
    "Step",
    "Target",
    "TargetMetric",
]
