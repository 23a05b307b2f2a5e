"""Enumerations and domain constants for activity plan structures."""

from enum import IntEnum, auto


class DurationKind(IntEnum):
    """How a step's duration is measured."""

    TIME = auto()
    DISTANCE = auto()
    REPETITIONS = auto()


class DurationUnit(IntEnum):
    """Units a duration may be authored in. Each unit belongs to one kind."""

    SECONDS = auto()
    MINUTES = auto()
    HOURS = auto()
    METERS = auto()
    KILOMETERS = auto()
    REPS = auto()


class TargetMetric(IntEnum):
    """Physiological metrics an intensity target can be expressed against."""

    RELATIVE_TO_FTP = auto()
    RELATIVE_TO_THRESHOLD_HR = auto()
    RELATIVE_TO_MAX_HR = auto()
    ABSOLUTE_WATTS = auto()
    CADENCE = auto()
    PERCEIVED_EFFORT = auto()
    ABSOLUTE_HEART_RATE = auto()


class SegmentRole(IntEnum):
    """Presentation role of a step. Never affects aggregation."""

    WARMUP = auto()
    MAIN = auto()
    COOLDOWN = auto()


class BuilderState(IntEnum):
    """PlanBuilder lifecycle. FINALIZED is terminal."""

    BUILDING = auto()
    FINALIZED = auto()


# ---------------------------------------------------------------------------
# Duration units
# ---------------------------------------------------------------------------

UNIT_KIND: dict[DurationUnit, DurationKind] = {
    DurationUnit.SECONDS: DurationKind.TIME,
    DurationUnit.MINUTES: DurationKind.TIME,
    DurationUnit.HOURS: DurationKind.TIME,
    DurationUnit.METERS: DurationKind.DISTANCE,
    DurationUnit.KILOMETERS: DurationKind.DISTANCE,
    DurationUnit.REPS: DurationKind.REPETITIONS,
}

SECONDS_PER_UNIT: dict[DurationUnit, int] = {
    DurationUnit.SECONDS: 1,
    DurationUnit.MINUTES: 60,
    DurationUnit.HOURS: 3600,
}

METERS_PER_UNIT: dict[DurationUnit, int] = {
    DurationUnit.METERS: 1,
    DurationUnit.KILOMETERS: 1000,
}

# ---------------------------------------------------------------------------
# Target plausibility bounds (exclusive lower bound 0, inclusive upper)
# ---------------------------------------------------------------------------
# Percentage metrics allow supra-threshold efforts (sprints, VO2max) up to 200%
TARGET_UPPER_BOUNDS: dict[TargetMetric, float] = {
    TargetMetric.RELATIVE_TO_FTP: 200.0,
    TargetMetric.RELATIVE_TO_THRESHOLD_HR: 200.0,
    TargetMetric.RELATIVE_TO_MAX_HR: 200.0,
    TargetMetric.ABSOLUTE_WATTS: 5000.0,
    TargetMetric.CADENCE: 300.0,
    TargetMetric.PERCEIVED_EFFORT: 10.0,   # RPE 0-10 scale
    TargetMetric.ABSOLUTE_HEART_RATE: 250.0,
}

PERCENTAGE_METRICS = frozenset({
    TargetMetric.RELATIVE_TO_FTP,
    TargetMetric.RELATIVE_TO_THRESHOLD_HR,
    TargetMetric.RELATIVE_TO_MAX_HR,
})

# ---------------------------------------------------------------------------
# Plan-level constants
# ---------------------------------------------------------------------------
PLAN_VERSION = "1.0"

WARMUP_LABEL = "warmup"
COOLDOWN_LABEL = "cooldown"

DEFAULT_WARMUP_NAME = "Warm-up"
DEFAULT_COOLDOWN_NAME = "Cool-down"
DEFAULT_REST_NAME = "Rest"
