"""Plan templates — ready-made sample plans built through PlanBuilder.

Each template is a zero-argument factory returning a fresh PlanStructure.
They double as reference material for authors and as fixtures for the
export and migration paths.
"""

from __future__ import annotations

from typing import Callable

from activity_plan.builder.builder import create_plan
from activity_plan.models.plan import ActivityClassification, PlanStructure
from activity_plan.models.values import Duration, Target

_RUN_OUTDOOR = ActivityClassification("run", "outdoor")
_BIKE_INDOOR = ActivityClassification("bike", "indoor")
_BIKE_OUTDOOR = ActivityClassification("bike", "outdoor")
_STRENGTH_INDOOR = ActivityClassification("strength", "indoor")


def tempo_run() -> PlanStructure:
    """10 min warm-up, 20 min tempo, 10 min cool-down."""
    return (
        create_plan("Tempo Run", _RUN_OUTDOOR, description="Steady tempo effort")
        .append_warmup(Duration.minutes(10), targets=[Target.threshold_hr(75)])
        .append_step(
            "Tempo",
            Duration.minutes(20),
            targets=[Target.threshold_hr(92), Target.rpe(7)],
            notes="Maintain steady tempo pace",
        )
        .append_cooldown(Duration.minutes(10), targets=[Target.threshold_hr(70)])
        .finalize()
    )


def vo2max_intervals() -> PlanStructure:
    """5 x (3 min hard / 3 min easy) between warm-up and cool-down."""
    return (
        create_plan("VO2 Max Intervals", _BIKE_INDOOR)
        .append_warmup(Duration.minutes(15), targets=[Target.ftp(65)])
        .append_interval(
            5,
            [
                {
                    "name": "Hard",
                    "duration": Duration.minutes(3),
                    "targets": [Target.ftp(110), Target.bpm(180)],
                    "notes": "Push hard!",
                },
                {
                    "name": "Recovery",
                    "duration": Duration.minutes(3),
                    "targets": [Target.ftp(55)],
                    "notes": "Easy spin",
                },
            ],
            segment_label="VO2 Max",
        )
        .append_cooldown(Duration.minutes(10), targets=[Target.ftp(60)])
        .finalize()
    )


def strength_circuit() -> PlanStructure:
    """Squat and bench sets counted in reps, with timed rest."""
    return (
        create_plan("Strength Circuit", _STRENGTH_INDOOR)
        .append_warmup(Duration.minutes(5), notes="Dynamic stretching")
        .append_interval(
            3,
            [
                {"name": "Squats", "duration": Duration.reps(10), "targets": [Target.rpe(7)]},
                {"name": "Rest", "duration": Duration.seconds(90)},
            ],
            segment_label="Squats",
        )
        .append_interval(
            3,
            [
                {"name": "Bench Press", "duration": Duration.reps(8), "targets": [Target.rpe(8)]},
                {"name": "Rest", "duration": Duration.seconds(90)},
            ],
            segment_label="Bench Press",
        )
        .append_cooldown(Duration.minutes(5), notes="Static stretching")
        .finalize()
    )


def endurance_ride() -> PlanStructure:
    """Two hours steady aerobic riding."""
    return (
        create_plan("Endurance Ride", _BIKE_OUTDOOR)
        .append_warmup(Duration.minutes(15), targets=[Target.ftp(60)])
        .append_step(
            "Endurance",
            Duration.hours(2),
            targets=[Target.ftp(70), Target.bpm(145)],
            notes="Stay aerobic, conversational pace",
        )
        .append_cooldown(Duration.minutes(10), targets=[Target.ftp(55)])
        .finalize()
    )


def threshold_intervals() -> PlanStructure:
    """3 x (8 min threshold / 4 min recovery)."""
    return (
        create_plan("Threshold Intervals", _BIKE_INDOOR)
        .append_warmup(Duration.minutes(15), targets=[Target.ftp(65)])
        .append_interval(
            3,
            [
                {
                    "name": "Threshold",
                    "duration": Duration.minutes(8),
                    "targets": [Target.ftp(95), Target.threshold_hr(100)],
                    "notes": "Sustainable hard effort",
                },
                {
                    "name": "Recovery",
                    "duration": Duration.minutes(4),
                    "targets": [Target.ftp(55)],
                },
            ],
            segment_label="Threshold",
        )
        .append_cooldown(Duration.minutes(10), targets=[Target.ftp(60)])
        .finalize()
    )


PLAN_TEMPLATES: dict[str, Callable[[], PlanStructure]] = {
    "tempo_run": tempo_run,
    "vo2max_intervals": vo2max_intervals,
    "strength_circuit": strength_circuit,
    "endurance_ride": endurance_ride,
    "threshold_intervals": threshold_intervals,
}

TEMPLATE_NAMES: tuple[str, ...] = tuple(PLAN_TEMPLATES)


def get_template(name: str) -> PlanStructure:
    """Build the named template. Raises KeyError for unknown names."""
    try:
        factory = PLAN_TEMPLATES[name]
    except KeyError:
        raise KeyError(f"Unknown plan template {name!r}; choose from {', '.join(TEMPLATE_NAMES)}") from None
    return factory()
