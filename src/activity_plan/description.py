"""Description builder — human-readable labels for plans, steps and targets.

Used for plan previews, Garmin step notes and migration reports.
"""

from __future__ import annotations

from activity_plan.metrics.aggregator import compute_plan_metrics
from activity_plan.models.enums import DurationUnit, TargetMetric
from activity_plan.models.nodes import Repetition, Step
from activity_plan.models.plan import PlanStructure
from activity_plan.models.values import Duration, IntensityRange, Target

_UNIT_SUFFIX: dict[DurationUnit, str] = {
    DurationUnit.SECONDS: "s",
    DurationUnit.MINUTES: " min",
    DurationUnit.HOURS: " h",
    DurationUnit.METERS: " m",
    DurationUnit.KILOMETERS: " km",
    DurationUnit.REPS: " reps",
}

_METRIC_LABELS: dict[TargetMetric, str] = {
    TargetMetric.RELATIVE_TO_FTP: "% FTP",
    TargetMetric.RELATIVE_TO_THRESHOLD_HR: "% ThresholdHR",
    TargetMetric.RELATIVE_TO_MAX_HR: "% MaxHR",
    TargetMetric.ABSOLUTE_WATTS: "W",
    TargetMetric.CADENCE: " rpm",
    TargetMetric.PERCEIVED_EFFORT: "/10",
    TargetMetric.ABSOLUTE_HEART_RATE: " bpm",
}

# Lower bounds of Z5..Z2; anything below the last is Z1.
_ZONE_FLOORS: dict[TargetMetric, tuple[float, float, float, float]] = {
    TargetMetric.RELATIVE_TO_FTP: (106, 91, 76, 56),
    TargetMetric.RELATIVE_TO_THRESHOLD_HR: (95, 85, 75, 65),
    TargetMetric.RELATIVE_TO_MAX_HR: (95, 85, 75, 65),
    TargetMetric.PERCEIVED_EFFORT: (9, 7, 5, 3),
}


def _num(value: float) -> str:
    return f"{value:g}"


def format_seconds(seconds: float) -> str:
    """Format a second count as ``H:MM:SS`` or ``M:SS``."""
    total = int(round(seconds))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_duration(duration: Duration) -> str:
    """Format a duration in its authored unit, e.g. ``10 min`` or ``400 m``."""
    return f"{_num(duration.value)}{_UNIT_SUFFIX[duration.unit]}"


def format_target(target: Target) -> str:
    """Format a target, e.g. ``90% FTP``, ``84-97% FTP (90)`` or ``RPE 7/10``."""
    label = _METRIC_LABELS[target.metric]
    prefix = "RPE " if target.metric == TargetMetric.PERCEIVED_EFFORT else ""
    if isinstance(target.intensity, IntensityRange):
        band = target.intensity
        text = f"{prefix}{_num(band.min)}-{_num(band.max)}{label}"
        if band.target is not None:
            text += f" ({_num(band.target)})"
        return text
    return f"{prefix}{_num(target.intensity)}{label}"


def format_step_targets(step: Step) -> str:
    """All of a step's targets joined with ``+``."""
    if not step.targets:
        return "No targets"
    return " + ".join(format_target(t) for t in step.targets)


def intensity_zone(target: Target) -> int | None:
    """Zone 1-5 for percentage and RPE targets; None for absolute metrics."""
    floors = _ZONE_FLOORS.get(target.metric)
    if floors is None:
        return None
    value = target.nominal
    for zone, floor in zip((5, 4, 3, 2), floors):
        if value >= floor:
            return zone
    return 1


def describe_step(step: Step) -> str:
    """One-line summary: ``Tempo — 20 min @ 92% ThresholdHR``."""
    line = f"{step.name} — {format_duration(step.duration)}"
    if step.targets:
        line += f" @ {format_step_targets(step)}"
    return line


def describe_plan(plan: PlanStructure) -> tuple[str, str]:
    """Build a plan title and a multi-line description.

    Computed and author-supplied durations are listed separately; the two
    are never reconciled.
    """
    metrics = compute_plan_metrics(plan)
    classification = plan.activity_classification
    kind = classification.category
    if classification.location:
        kind = f"{classification.location} {kind}"

    title = f"{plan.name} ({kind})"

    lines: list[str] = []
    if plan.description:
        lines.append(plan.description)
    lines.append(f"Estimated time: {format_seconds(metrics.computed_duration_seconds)}")
    if metrics.has_untimed_steps:
        lines.append(
            f"  + {metrics.untimed_step_count} distance/rep step(s) not included in time"
        )
    if metrics.author_duration_seconds is not None:
        lines.append(f"Author estimate: {format_seconds(metrics.author_duration_seconds)}")
    if metrics.author_training_stress is not None:
        lines.append(f"Training stress: {_num(metrics.author_training_stress)}")

    lines.append("")
    for node in plan.nodes:
        if isinstance(node, Repetition):
            header = f"{node.repeat_count}x"
            if node.segment_label:
                header += f" {node.segment_label}"
            lines.append(header + ":")
            for step in node.steps:
                lines.append(f"  - {describe_step(step)}")
        else:
            lines.append(f"- {describe_step(node)}")

    return title, "\n".join(lines)
