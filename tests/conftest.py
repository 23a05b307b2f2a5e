"""Shared test fixtures: sample plans and legacy plan documents."""

from __future__ import annotations

import pytest

from activity_plan.builder import create_plan
from activity_plan.models.plan import ActivityClassification, PlanStructure
from activity_plan.models.values import Duration, Target


@pytest.fixture
def interval_plan() -> PlanStructure:
    """Warm-up 10, build 5, 3 x (10 work / 5 recovery), cool-down 10 → 70 min."""
    return (
        create_plan("Sweet Spot Builder", ActivityClassification("bike", "indoor"))
        .append_warmup(Duration.minutes(10), targets=[Target.ftp(55)])
        .append_step("Build", Duration.minutes(5), targets=[Target.ftp(75)])
        .append_interval(
            3,
            [
                {
                    "name": "Interval",
                    "duration": Duration.minutes(10),
                    "targets": [Target.ftp(90), Target.cadence(90)],
                    "notes": "Stay seated",
                },
                {"name": "Recovery", "duration": Duration.minutes(5), "targets": [Target.ftp(55)]},
            ],
            segment_label="Main Set",
        )
        .append_cooldown(Duration.minutes(10), targets=[Target.ftp(50)])
        .finalize()
    )


@pytest.fixture
def untimed_plan() -> PlanStructure:
    """Only distance and repetition-count steps: no time estimate."""
    return (
        create_plan("Track Session", ActivityClassification("run", "outdoor"))
        .append_step("Easy Mile", Duration.meters(1600))
        .append_interval(
            4,
            [
                {"name": "400m", "duration": Duration.meters(400), "targets": [Target.rpe(8)]},
                {"name": "Strides", "duration": Duration.reps(4)},
            ],
        )
        .append_step("Jog Home", Duration.kilometers(2))
        .finalize()
    )


@pytest.fixture
def legacy_document() -> dict:
    """Hand-written plan document in the legacy snake_case encoding."""
    return {
        "version": "1.0",
        "name": "Easy Run",
        "description": "Conversational pace",
        "activity_type": "run",
        "estimated_duration": 2700,
        "estimated_tss": 35,
        "structure": {
            "steps": [
                {
                    "type": "step",
                    "name": "Warm-up",
                    "duration": {"type": "time", "value": 300, "unit": "seconds"},
                    "targets": [{"type": "%ThresholdHR", "intensity": 65}],
                },
                {
                    "type": "step",
                    "name": "Main",
                    "duration": {"type": "time", "value": 2100, "unit": "seconds"},
                    "targets": [
                        {"type": "%ThresholdHR", "intensity": 75},
                        {"type": "RPE", "intensity": 4},
                    ],
                    "notes": "Nose breathing",
                },
                {
                    "type": "step",
                    "name": "Cool-down",
                    "duration": {"type": "time", "value": 300, "unit": "seconds"},
                },
            ]
        },
    }


@pytest.fixture
def indoor_bike_document() -> dict:
    """Flat legacy encoding: top-level steps, singular target, intensityClass."""
    return {
        "name": "Over-Unders",
        "modality": "bike",
        "environment": "indoor",
        "steps": [
            {
                "name": "Warm-up",
                "duration": {"type": "time", "seconds": 600},
                "target": {"type": "%FTP", "min": 50, "max": 65},
                "intensityClass": "WarmUp",
            },
            {
                "repeat": 4,
                "steps": [
                    {
                        "name": "Over",
                        "duration": {"type": "time", "seconds": 60},
                        "target": {"type": "%FTP", "min": 102, "max": 108, "target": 105},
                    },
                    {
                        "name": "Under",
                        "duration": {"type": "time", "seconds": 120},
                        "target": {"type": "%FTP", "target": 92},
                    },
                ],
            },
            {
                "name": "Cool-down",
                "duration": {"type": "time", "seconds": 300},
                "intensityClass": "CoolDown",
            },
        ],
    }
