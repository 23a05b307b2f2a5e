"""Plan Structure — the canonical, deeply immutable activity plan."""

from __future__ import annotations

from dataclasses import dataclass

from activity_plan.errors import EmptyPlan, MalformedNode
from activity_plan.models.enums import PLAN_VERSION
from activity_plan.models.nodes import Node, Repetition, Step
from activity_plan.models.values import is_finite_number


@dataclass(frozen=True)
class ActivityClassification:
    """What kind of activity a plan is for, e.g. ``run`` / ``outdoor``."""

    category: str
    location: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.category, str) or not self.category.strip():
            raise MalformedNode(
                f"Activity category must be a non-empty string, got {self.category!r}"
            )


@dataclass(frozen=True)
class PlanStructure:
    """An ordered sequence of Step / Repetition nodes plus plan metadata.

    ``estimated_duration_seconds`` and ``estimated_training_stress`` are
    author-supplied annotations, kept verbatim. They are not guaranteed to
    match the value computed by ``activity_plan.metrics``.

    Edits go through ``dataclasses.replace`` and yield a new plan.
    """

    name: str
    activity_classification: ActivityClassification
    nodes: tuple[Node, ...]
    version: str = PLAN_VERSION
    description: str | None = None
    estimated_duration_seconds: float | None = None
    estimated_training_stress: float | None = None

    def __post_init__(self) -> None:
        validate_plan_metadata(
            self.name,
            self.activity_classification,
            self.version,
            self.description,
            self.estimated_duration_seconds,
            self.estimated_training_stress,
        )
        nodes = tuple(self.nodes)
        if not nodes:
            raise EmptyPlan("Plan must have at least one step")
        for node in nodes:
            if not isinstance(node, (Step, Repetition)):
                raise MalformedNode(f"Plan node is not a Step or Repetition: {node!r}")
        object.__setattr__(self, "nodes", nodes)

    @property
    def step_count(self) -> int:
        """Number of top-level nodes."""
        return len(self.nodes)

    @property
    def repetitions(self) -> tuple[Repetition, ...]:
        return tuple(node for node in self.nodes if isinstance(node, Repetition))


def validate_plan_metadata(
    name: object,
    activity_classification: object,
    version: object,
    description: object = None,
    estimated_duration_seconds: object = None,
    estimated_training_stress: object = None,
) -> None:
    """Raise MalformedNode if any plan-level field has the wrong shape."""
    if not isinstance(name, str) or not name.strip():
        raise MalformedNode(f"Plan name must be a non-empty string, got {name!r}")
    if not isinstance(version, str) or not version:
        raise MalformedNode(f"Plan version must be a non-empty string, got {version!r}")
    if not isinstance(activity_classification, ActivityClassification):
        raise MalformedNode("activity_classification must be an ActivityClassification")
    if description is not None and not isinstance(description, str):
        raise MalformedNode(f"Plan description must be a string, got {description!r}")
    for attr, value in (
        ("estimated_duration_seconds", estimated_duration_seconds),
        ("estimated_training_stress", estimated_training_stress),
    ):
        if value is not None and not is_finite_number(value):
            raise MalformedNode(f"{attr} must be a finite number, got {value!r}")
