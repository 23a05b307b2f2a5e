"""Canonical wire encoding of PlanStructures.

This is the boundary shape read and written by persistence, rendering and
compliance collaborators. ``activity_plan.normalization`` is the inverse.

All functions are pure (no I/O).
"""

from __future__ import annotations

import json
from typing import Any

from activity_plan.models.enums import DurationKind, DurationUnit, TargetMetric
from activity_plan.models.nodes import Node, Repetition, Step
from activity_plan.models.plan import PlanStructure
from activity_plan.models.values import Duration, IntensityRange, Target

NODE_TYPE_STEP = "step"
NODE_TYPE_REPETITION = "repetition"

DURATION_KIND_TAGS: dict[DurationKind, str] = {
    DurationKind.TIME: "time",
    DurationKind.DISTANCE: "distance",
    DurationKind.REPETITIONS: "repetitions",
}

DURATION_UNIT_TAGS: dict[DurationUnit, str] = {
    DurationUnit.SECONDS: "seconds",
    DurationUnit.MINUTES: "minutes",
    DurationUnit.HOURS: "hours",
    DurationUnit.METERS: "meters",
    DurationUnit.KILOMETERS: "kilometers",
    DurationUnit.REPS: "reps",
}

TARGET_METRIC_TAGS: dict[TargetMetric, str] = {
    TargetMetric.RELATIVE_TO_FTP: "%FTP",
    TargetMetric.RELATIVE_TO_THRESHOLD_HR: "%ThresholdHR",
    TargetMetric.RELATIVE_TO_MAX_HR: "%MaxHR",
    TargetMetric.ABSOLUTE_WATTS: "watts",
    TargetMetric.CADENCE: "cadence",
    TargetMetric.PERCEIVED_EFFORT: "RPE",
    TargetMetric.ABSOLUTE_HEART_RATE: "bpm",
}

# Reverse lookups used by the normalizer.
DURATION_KINDS_BY_TAG = {tag: kind for kind, tag in DURATION_KIND_TAGS.items()}
DURATION_UNITS_BY_TAG = {tag: unit for unit, tag in DURATION_UNIT_TAGS.items()}
TARGET_METRICS_BY_TAG = {tag: metric for metric, tag in TARGET_METRIC_TAGS.items()}


def to_wire(plan: PlanStructure) -> dict[str, Any]:
    """Convert a PlanStructure to its canonical wire dict."""
    result: dict[str, Any] = {
        "version": plan.version,
        "name": plan.name,
    }
    if plan.description is not None:
        result["description"] = plan.description

    classification: dict[str, Any] = {"category": plan.activity_classification.category}
    if plan.activity_classification.location is not None:
        classification["location"] = plan.activity_classification.location
    result["activityClassification"] = classification

    if plan.estimated_duration_seconds is not None:
        result["estimatedDurationSeconds"] = plan.estimated_duration_seconds
    if plan.estimated_training_stress is not None:
        result["estimatedTrainingStress"] = plan.estimated_training_stress

    result["structure"] = {"steps": [_node_to_wire(node) for node in plan.nodes]}
    return result


def to_wire_json(plan: PlanStructure, indent: int = 2) -> str:
    """Convert a PlanStructure to a canonical JSON string."""
    return json.dumps(to_wire(plan), indent=indent)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _node_to_wire(node: Node) -> dict[str, Any]:
    if isinstance(node, Repetition):
        return _repetition_to_wire(node)
    return _step_to_wire(node)


def _step_to_wire(step: Step) -> dict[str, Any]:
    result: dict[str, Any] = {
        "type": NODE_TYPE_STEP,
        "name": step.name,
        "duration": duration_to_wire(step.duration),
        "targets": [target_to_wire(t) for t in step.targets],
    }
    if step.notes is not None:
        result["notes"] = step.notes
    if step.description is not None:
        result["description"] = step.description
    if step.segment_label is not None:
        result["segmentLabel"] = step.segment_label
    return result


def _repetition_to_wire(block: Repetition) -> dict[str, Any]:
    result: dict[str, Any] = {
        "type": NODE_TYPE_REPETITION,
        "repeat": block.repeat_count,
        "steps": [_step_to_wire(s) for s in block.steps],
    }
    if block.segment_label is not None:
        result["segmentLabel"] = block.segment_label
    return result


def duration_to_wire(duration: Duration) -> dict[str, Any]:
    return {
        "type": DURATION_KIND_TAGS[duration.kind],
        "value": duration.value,
        "unit": DURATION_UNIT_TAGS[duration.unit],
    }


def target_to_wire(target: Target) -> dict[str, Any]:
    result: dict[str, Any] = {"type": TARGET_METRIC_TAGS[target.metric]}
    if isinstance(target.intensity, IntensityRange):
        result["min"] = target.intensity.min
        result["max"] = target.intensity.max
        if target.intensity.target is not None:
            result["target"] = target.intensity.target
    else:
        result["intensity"] = target.intensity
    return result
