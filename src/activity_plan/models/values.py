"""Duration and intensity-target value types.

Both are frozen dataclasses validated in ``__post_init__`` so that an
invalid value can never exist. Authored magnitudes and units are stored
exactly as given; conversions happen only in derived accessors.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Union

from activity_plan.errors import (
    InvalidDuration,
    InvalidIntensity,
    UnknownDurationUnit,
    UnknownTargetType,
)
from activity_plan.models.enums import (
    METERS_PER_UNIT,
    SECONDS_PER_UNIT,
    TARGET_UPPER_BOUNDS,
    UNIT_KIND,
    DurationKind,
    DurationUnit,
    TargetMetric,
)


def is_finite_number(value: object) -> bool:
    """True for real, finite, non-bool numbers. Ints too large for a float are rejected."""
    if not isinstance(value, Real) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


@dataclass(frozen=True)
class Duration:
    """A positive quantity of time, distance or repetitions.

    Examples::

        Duration.minutes(10)
        Duration.meters(400)
        Duration.reps(12)
    """

    kind: DurationKind
    value: float
    unit: DurationUnit

    def __post_init__(self) -> None:
        if not isinstance(self.kind, DurationKind):
            raise UnknownDurationUnit(f"Unknown duration kind: {self.kind!r}")
        if not isinstance(self.unit, DurationUnit) or UNIT_KIND[self.unit] != self.kind:
            raise UnknownDurationUnit(
                f"Unit {self.unit!r} is not valid for a {self.kind.name.lower()} duration"
            )
        if not is_finite_number(self.value):
            raise InvalidDuration(f"Duration value must be a finite number, got {self.value!r}")
        if self.value <= 0:
            raise InvalidDuration(f"Duration value must be > 0, got {self.value!r}")
        if self.kind == DurationKind.REPETITIONS and self.value != int(self.value):
            raise InvalidDuration(f"Repetition count must be a whole number, got {self.value!r}")

    # --- constructors -----------------------------------------------------

    @classmethod
    def seconds(cls, value: float) -> Duration:
        return cls(DurationKind.TIME, value, DurationUnit.SECONDS)

    @classmethod
    def minutes(cls, value: float) -> Duration:
        return cls(DurationKind.TIME, value, DurationUnit.MINUTES)

    @classmethod
    def hours(cls, value: float) -> Duration:
        return cls(DurationKind.TIME, value, DurationUnit.HOURS)

    @classmethod
    def meters(cls, value: float) -> Duration:
        return cls(DurationKind.DISTANCE, value, DurationUnit.METERS)

    @classmethod
    def kilometers(cls, value: float) -> Duration:
        return cls(DurationKind.DISTANCE, value, DurationUnit.KILOMETERS)

    @classmethod
    def reps(cls, value: int) -> Duration:
        return cls(DurationKind.REPETITIONS, value, DurationUnit.REPS)

    # --- derived ----------------------------------------------------------

    @property
    def is_time(self) -> bool:
        return self.kind == DurationKind.TIME

    @property
    def total_seconds(self) -> float:
        """Duration in seconds. Only defined for time-based durations."""
        if not self.is_time:
            raise ValueError(f"{self.kind.name.lower()} duration has no fixed time")
        return self.value * SECONDS_PER_UNIT[self.unit]

    @property
    def total_meters(self) -> float:
        """Duration in meters. Only defined for distance-based durations."""
        if self.kind != DurationKind.DISTANCE:
            raise ValueError(f"{self.kind.name.lower()} duration has no distance")
        return self.value * METERS_PER_UNIT[self.unit]


def _check_intensity(metric: TargetMetric, value: object, label: str) -> None:
    if not is_finite_number(value):
        raise InvalidIntensity(f"{label} must be a finite number, got {value!r}")
    upper = TARGET_UPPER_BOUNDS[metric]
    if not 0 < value <= upper:
        raise InvalidIntensity(
            f"{label} {value!r} outside plausible range (0, {upper:g}] for {metric.name}"
        )


@dataclass(frozen=True)
class IntensityRange:
    """A min/max band with an optional preferred value inside it."""

    min: float
    max: float
    target: float | None = None


Intensity = Union[float, IntensityRange]


@dataclass(frozen=True)
class Target:
    """An intensity target against one physiological metric.

    A step may carry several independent targets (e.g. power and heart rate).
    """

    metric: TargetMetric
    intensity: Intensity

    def __post_init__(self) -> None:
        if not isinstance(self.metric, TargetMetric):
            raise UnknownTargetType(f"Unknown target metric: {self.metric!r}")
        if isinstance(self.intensity, IntensityRange):
            band = self.intensity
            _check_intensity(self.metric, band.min, "Range min")
            _check_intensity(self.metric, band.max, "Range max")
            if band.min > band.max:
                raise InvalidIntensity(f"Range min {band.min!r} exceeds max {band.max!r}")
            if band.target is not None:
                _check_intensity(self.metric, band.target, "Range target")
                if not band.min <= band.target <= band.max:
                    raise InvalidIntensity(
                        f"Range target {band.target!r} not within [{band.min!r}, {band.max!r}]"
                    )
        else:
            _check_intensity(self.metric, self.intensity, "Intensity")

    # --- constructors -----------------------------------------------------

    @classmethod
    def ftp(cls, intensity: float) -> Target:
        return cls(TargetMetric.RELATIVE_TO_FTP, intensity)

    @classmethod
    def threshold_hr(cls, intensity: float) -> Target:
        return cls(TargetMetric.RELATIVE_TO_THRESHOLD_HR, intensity)

    @classmethod
    def max_hr(cls, intensity: float) -> Target:
        return cls(TargetMetric.RELATIVE_TO_MAX_HR, intensity)

    @classmethod
    def watts(cls, intensity: float) -> Target:
        return cls(TargetMetric.ABSOLUTE_WATTS, intensity)

    @classmethod
    def cadence(cls, intensity: float) -> Target:
        return cls(TargetMetric.CADENCE, intensity)

    @classmethod
    def rpe(cls, intensity: float) -> Target:
        return cls(TargetMetric.PERCEIVED_EFFORT, intensity)

    @classmethod
    def bpm(cls, intensity: float) -> Target:
        return cls(TargetMetric.ABSOLUTE_HEART_RATE, intensity)

    @classmethod
    def range(
        cls,
        metric: TargetMetric,
        min: float,
        max: float,
        target: float | None = None,
    ) -> Target:
        return cls(metric, IntensityRange(min=min, max=max, target=target))

    # --- derived ----------------------------------------------------------

    @property
    def is_range(self) -> bool:
        return isinstance(self.intensity, IntensityRange)

    @property
    def nominal(self) -> float:
        """Single representative intensity: the value, range target, or midpoint."""
        if isinstance(self.intensity, IntensityRange):
            if self.intensity.target is not None:
                return self.intensity.target
            return (self.intensity.min + self.intensity.max) / 2
        return self.intensity

    @property
    def bounds(self) -> tuple[float, float]:
        """(low, high) band. A single intensity yields a zero-width band."""
        if isinstance(self.intensity, IntensityRange):
            return (self.intensity.min, self.intensity.max)
        return (self.intensity, self.intensity)
