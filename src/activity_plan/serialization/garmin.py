"""Garmin Connect JSON export for PlanStructure objects.

Converts a canonical PlanStructure into a Garmin Connect workout dict that
can be uploaded through ``garmin_client`` and synced to a watch.

Relative targets (%FTP, %ThresholdHR, %MaxHR) can only be sent to the
device as absolute zones, so they are converted when an AthleteProfile is
supplied and dropped to ``no.target`` otherwise. Every target is also
written into the step notes so nothing is lost on the watch.

All functions are pure (no I/O, no network calls).
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from activity_plan.description import describe_plan, format_step_targets
from activity_plan.models.enums import (
    PERCENTAGE_METRICS,
    DurationKind,
    SegmentRole,
    TargetMetric,
)
from activity_plan.models.nodes import Repetition, Step
from activity_plan.models.plan import PlanStructure
from activity_plan.models.values import Target

# Garmin enforces limits on certain text fields.
_GARMIN_NAME_MAX = 32
_GARMIN_DESCRIPTION_MAX = 1024
_GARMIN_STEP_NOTES_MAX = 200

# Single-value targets are widened into a band of this half-width.
_PERCENT_TOLERANCE_POINTS = 5.0
_ABSOLUTE_TOLERANCE_FRACTION = 0.05
_BPM_TOLERANCE = 5.0
_CADENCE_TOLERANCE = 5.0

# Garmin stepType ids / keys.
_STEP_TYPES = {
    "warmup": 1,
    "cooldown": 2,
    "interval": 3,
    "recovery": 4,
    "rest": 5,
    "repeat": 6,
}

_END_CONDITIONS = {
    DurationKind.TIME: (2, "time"),
    DurationKind.DISTANCE: (3, "distance"),
    DurationKind.REPETITIONS: (10, "reps"),
}

_SPORT_TYPES = {
    "running": 1,
    "cycling": 2,
    "other": 3,
    "swimming": 4,
    "strength_training": 5,
}

# Substring of the activity category → Garmin sport key.
_CATEGORY_SPORTS = (
    ("run", "running"),
    ("bike", "cycling"),
    ("cycl", "cycling"),
    ("ride", "cycling"),
    ("swim", "swimming"),
    ("strength", "strength_training"),
)

# Metric → (Garmin target type id, key), in priority order.
_TARGET_PRIORITY = (
    (TargetMetric.ABSOLUTE_WATTS, (2, "power.zone")),
    (TargetMetric.RELATIVE_TO_FTP, (2, "power.zone")),
    (TargetMetric.ABSOLUTE_HEART_RATE, (4, "heart.rate.zone")),
    (TargetMetric.RELATIVE_TO_THRESHOLD_HR, (4, "heart.rate.zone")),
    (TargetMetric.RELATIVE_TO_MAX_HR, (4, "heart.rate.zone")),
    (TargetMetric.CADENCE, (3, "cadence")),
)


@dataclass(frozen=True)
class AthleteProfile:
    """Reference values used to turn relative targets into absolute ones."""

    ftp: float | None = None          # watts
    threshold_hr: float | None = None  # bpm
    max_hr: float | None = None        # bpm


def to_garmin_json(plan: PlanStructure, profile: AthleteProfile | None = None) -> dict:
    """Convert a PlanStructure to a Garmin Connect-compatible dict."""
    profile = profile or AthleteProfile()
    sport = _sport_type(plan)
    _, description = describe_plan(plan)

    order = _StepCounter()
    steps = []
    for node in plan.nodes:
        if isinstance(node, Repetition):
            steps.append(_convert_repetition(node, order, profile))
        else:
            steps.append(_convert_step(node, order, profile))

    return {
        "workoutName": plan.name[:_GARMIN_NAME_MAX],
        "description": description[:_GARMIN_DESCRIPTION_MAX],
        "sportType": dict(sport),
        "workoutSegments": [
            {
                "segmentOrder": 1,
                "sportType": dict(sport),
                "workoutSteps": steps,
            }
        ],
    }


def to_garmin_json_string(
    plan: PlanStructure,
    profile: AthleteProfile | None = None,
    indent: int = 2,
) -> str:
    """Convert a PlanStructure to a Garmin-compatible JSON string."""
    return json.dumps(to_garmin_json(plan, profile), indent=indent)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


class _StepCounter:
    """Garmin numbers steps (including repeat groups) across the whole workout."""

    def __init__(self) -> None:
        self._value = 0

    def next(self) -> int:
        self._value += 1
        return self._value


def _sport_type(plan: PlanStructure) -> dict:
    category = plan.activity_classification.category.lower()
    key = "other"
    for needle, sport in _CATEGORY_SPORTS:
        if needle in category:
            key = sport
            break
    return {"sportTypeId": _SPORT_TYPES[key], "sportTypeKey": key}


def _step_type_key(step: Step) -> str:
    if step.role == SegmentRole.WARMUP:
        return "warmup"
    if step.role == SegmentRole.COOLDOWN:
        return "cooldown"
    if not step.targets:
        return "rest"
    return "interval"


def _convert_step(step: Step, order: _StepCounter, profile: AthleteProfile) -> dict:
    """Build an ExecutableStepDTO for a leaf step."""
    key = _step_type_key(step)
    condition_id, condition_key = _END_CONDITIONS[step.duration.kind]
    if step.duration.kind == DurationKind.TIME:
        end_value = step.duration.total_seconds
    elif step.duration.kind == DurationKind.DISTANCE:
        end_value = step.duration.total_meters
    else:
        end_value = step.duration.value

    result = {
        "type": "ExecutableStepDTO",
        "stepOrder": order.next(),
        "stepType": {"stepTypeId": _STEP_TYPES[key], "stepTypeKey": key},
        "description": step.name,
        "endCondition": {
            "conditionTypeId": condition_id,
            "conditionTypeKey": condition_key,
        },
        "endConditionValue": end_value,
    }
    result.update(_build_target(step, profile))

    notes = _step_notes(step)
    if notes:
        result["stepNotes"] = notes[:_GARMIN_STEP_NOTES_MAX]
    return result


def _convert_repetition(
    block: Repetition,
    order: _StepCounter,
    profile: AthleteProfile,
) -> dict:
    """Build a RepeatGroupDTO with nested executable steps."""
    step_order = order.next()
    children = [_convert_step(child, order, profile) for child in block.steps]
    return {
        "type": "RepeatGroupDTO",
        "stepOrder": step_order,
        "stepType": {"stepTypeId": _STEP_TYPES["repeat"], "stepTypeKey": "repeat"},
        "numberOfIterations": block.repeat_count,
        "endCondition": {
            "conditionTypeId": 7,
            "conditionTypeKey": "iterations",
        },
        "endConditionValue": block.repeat_count,
        "workoutSteps": children,
    }


def _step_notes(step: Step) -> str:
    parts = []
    if step.notes:
        parts.append(step.notes)
    if step.targets:
        parts.append(f"Targets: {format_step_targets(step)}")
    return " | ".join(parts)


def _build_target(step: Step, profile: AthleteProfile) -> dict:
    """Pick the highest-priority target Garmin can enforce.

    Priority: power > heart rate > cadence > no target.
    """
    by_metric = {t.metric: t for t in step.targets}
    for metric, (type_id, type_key) in _TARGET_PRIORITY:
        target = by_metric.get(metric)
        if target is None:
            continue
        band = target_band(target, profile)
        if band is None:
            continue
        low, high = band
        return {
            "targetType": {
                "workoutTargetTypeId": type_id,
                "workoutTargetTypeKey": type_key,
            },
            "targetValueOne": low,
            "targetValueTwo": high,
        }

    return {
        "targetType": {
            "workoutTargetTypeId": 1,
            "workoutTargetTypeKey": "no.target",
        },
        "targetValueOne": None,
        "targetValueTwo": None,
    }


def target_band(target: Target, profile: AthleteProfile) -> tuple[float, float] | None:
    """Absolute (low, high) band for *target*, or None if it cannot be resolved.

    Single intensities are widened by the metric's tolerance; relative
    metrics are scaled by the matching profile reference value.
    """
    if target.is_range:
        low, high = target.bounds
    else:
        value = target.nominal
        if target.metric in PERCENTAGE_METRICS:
            tolerance = _PERCENT_TOLERANCE_POINTS
        elif target.metric == TargetMetric.ABSOLUTE_HEART_RATE:
            tolerance = _BPM_TOLERANCE
        elif target.metric == TargetMetric.CADENCE:
            tolerance = _CADENCE_TOLERANCE
        else:
            tolerance = value * _ABSOLUTE_TOLERANCE_FRACTION
        low, high = value - tolerance, value + tolerance

    if target.metric in PERCENTAGE_METRICS:
        reference = {
            TargetMetric.RELATIVE_TO_FTP: profile.ftp,
            TargetMetric.RELATIVE_TO_THRESHOLD_HR: profile.threshold_hr,
            TargetMetric.RELATIVE_TO_MAX_HR: profile.max_hr,
        }[target.metric]
        if not reference:
            return None
        low, high = low / 100 * reference, high / 100 * reference

    return (round(max(low, 0.0)), round(high))
