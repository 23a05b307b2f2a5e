"""Plan tree nodes: leaf Steps and one-level Repetition blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from activity_plan.errors import (
    EmptyRepetitionSteps,
    InvalidRepeatCount,
    MalformedNode,
)
from activity_plan.models.enums import COOLDOWN_LABEL, WARMUP_LABEL, SegmentRole
from activity_plan.models.values import Duration, Target


@dataclass(frozen=True)
class Step:
    """A single leaf step: one duration, zero or more intensity targets.

    ``segment_label`` groups steps for presentation; the reserved labels
    ``"warmup"`` and ``"cooldown"`` give the step its SegmentRole.
    """

    name: str
    duration: Duration
    targets: tuple[Target, ...] = field(default_factory=tuple)
    notes: str | None = None
    description: str | None = None
    segment_label: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise MalformedNode(f"Step name must be a non-empty string, got {self.name!r}")
        if not isinstance(self.duration, Duration):
            raise MalformedNode(f"Step {self.name!r} duration must be a Duration")
        for attr in ("notes", "description", "segment_label"):
            value = getattr(self, attr)
            if value is not None and not isinstance(value, str):
                raise MalformedNode(f"Step {self.name!r} {attr} must be a string")
        # Accept any iterable of targets but store a tuple
        targets = tuple(self.targets)
        for target in targets:
            if not isinstance(target, Target):
                raise MalformedNode(f"Step {self.name!r} has a non-Target entry: {target!r}")
        object.__setattr__(self, "targets", targets)

    @property
    def role(self) -> SegmentRole:
        if self.segment_label == WARMUP_LABEL:
            return SegmentRole.WARMUP
        if self.segment_label == COOLDOWN_LABEL:
            return SegmentRole.COOLDOWN
        return SegmentRole.MAIN


@dataclass(frozen=True)
class Repetition:
    """An ordered group of Steps repeated ``repeat_count`` times.

    Only Steps may be nested: a Repetition never contains another Repetition.
    """

    repeat_count: int
    steps: tuple[Step, ...]
    segment_label: str | None = None

    def __post_init__(self) -> None:
        validate_repeat_count(self.repeat_count)
        if self.segment_label is not None and not isinstance(self.segment_label, str):
            raise MalformedNode("Repetition segment_label must be a string")
        steps = tuple(self.steps)
        if not steps:
            raise EmptyRepetitionSteps("Repetition must contain at least one step")
        for child in steps:
            if isinstance(child, Repetition):
                raise MalformedNode("Repetitions cannot be nested inside repetitions")
            if not isinstance(child, Step):
                raise MalformedNode(f"Repetition child is not a Step: {child!r}")
        object.__setattr__(self, "steps", steps)


Node = Union[Step, Repetition]


def validate_repeat_count(value: object) -> None:
    """Raise InvalidRepeatCount unless *value* is an integer >= 1."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise InvalidRepeatCount(f"Repeat count must be an integer >= 1, got {value!r}")
