"""Exception hierarchy for activity plan construction and normalization.

Every exception carries a ``kind`` class attribute naming the error kind
(e.g. ``"InvalidDuration"``) so authoring tools and migration reports can
render field-level messages without matching on class names.
"""

from __future__ import annotations

from dataclasses import dataclass


class PlanError(Exception):
    """Base exception for all activity_plan errors."""

    kind: str = "PlanError"


class InvalidValue(PlanError, ValueError):
    """A value failed validation at construction time."""

    kind = "InvalidValue"


class InvalidDuration(InvalidValue):
    """Duration magnitude is not a finite number greater than zero."""

    kind = "InvalidDuration"


class InvalidIntensity(InvalidValue):
    """Target intensity is outside the metric's plausible range."""

    kind = "InvalidIntensity"


class InvalidRepeatCount(InvalidValue):
    """Repetition count is not an integer >= 1."""

    kind = "InvalidRepeatCount"


class EmptyRepetitionSteps(InvalidValue):
    """Repetition block has no steps."""

    kind = "EmptyRepetitionSteps"


class EmptyPlan(InvalidValue):
    """Plan has no top-level nodes."""

    kind = "EmptyPlan"


class UnknownDurationUnit(InvalidValue):
    """Duration type or unit tag is not recognised, or does not match its kind."""

    kind = "UnknownDurationUnit"


class UnknownTargetType(InvalidValue):
    """Target metric tag is not one of the supported metrics."""

    kind = "UnknownTargetType"


class MalformedNode(PlanError, TypeError):
    """Structural problem: wrong field type, missing field, illegal nesting."""

    kind = "MalformedNode"


class BuilderAlreadyFinalized(PlanError, RuntimeError):
    """The builder was used after ``finalize()``."""

    kind = "BuilderAlreadyFinalized"


@dataclass(frozen=True)
class MalformedLegacyNode:
    """One problem found while normalizing a plan document.

    Attributes:
        path: Location inside the document, e.g. ``structure.steps[2].targets[0]``.
        kind: Error kind name (``InvalidRepeatCount``, ``UnknownTargetType``, ...).
        reason: Human-readable message.
    """

    path: str
    kind: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.kind}: {self.reason}"


class MalformedLegacyPlan(PlanError, ValueError):
    """Batch report of every malformed node found in one plan document."""

    kind = "MalformedLegacyNode"

    def __init__(self, issues: tuple[MalformedLegacyNode, ...] | list[MalformedLegacyNode]) -> None:
        self.issues: tuple[MalformedLegacyNode, ...] = tuple(issues)
        lines = "; ".join(str(issue) for issue in self.issues)
        super().__init__(f"{len(self.issues)} malformed node(s): {lines}")
