"""Metrics aggregator — duration estimates derived from a plan's structure.

Only time-based steps contribute to the time estimate. Distance- and
repetition-based steps contribute zero: turning them into wall-clock time
needs a pace model, and guessing one would produce misleading numbers.

Author-supplied estimates on the plan are passed through untouched and
reported next to the computed value, never reconciled with it.
"""

from __future__ import annotations

from dataclasses import dataclass

from activity_plan.models.enums import DurationKind
from activity_plan.models.nodes import Node, Repetition, Step
from activity_plan.models.plan import PlanStructure


@dataclass(frozen=True)
class PlanMetrics:
    """Structure-derived metrics next to the author's own annotations."""

    computed_duration_seconds: float
    author_duration_seconds: float | None
    author_training_stress: float | None
    total_distance_meters: float
    total_repetitions: int
    leaf_step_count: int
    untimed_step_count: int

    @property
    def has_untimed_steps(self) -> bool:
        return self.untimed_step_count > 0


def step_duration_seconds(step: Step) -> float:
    """Time contribution of one step: its seconds if time-based, else 0."""
    if step.duration.kind == DurationKind.TIME:
        return step.duration.total_seconds
    return 0


def node_duration_seconds(node: Node) -> float:
    """Time contribution of a top-level node, repetitions multiplied out."""
    if isinstance(node, Repetition):
        per_iteration = sum(step_duration_seconds(s) for s in node.steps)
        return node.repeat_count * per_iteration
    return step_duration_seconds(node)


def estimate_duration_seconds(plan: PlanStructure) -> float:
    """Total estimated duration of *plan* in seconds (time-based steps only)."""
    return sum(node_duration_seconds(node) for node in plan.nodes)


def flatten_steps(plan: PlanStructure) -> tuple[Step, ...]:
    """Leaf steps in execution order, each repetition expanded in place."""
    leaves: list[Step] = []
    for node in plan.nodes:
        if isinstance(node, Repetition):
            for _ in range(node.repeat_count):
                leaves.extend(node.steps)
        else:
            leaves.append(node)
    return tuple(leaves)


def compute_plan_metrics(plan: PlanStructure) -> PlanMetrics:
    """Compute every structure-derived metric for *plan*."""
    leaves = flatten_steps(plan)
    distance = 0.0
    repetitions = 0
    untimed = 0
    for step in leaves:
        kind = step.duration.kind
        if kind == DurationKind.DISTANCE:
            distance += step.duration.total_meters
            untimed += 1
        elif kind == DurationKind.REPETITIONS:
            repetitions += int(step.duration.value)
            untimed += 1

    return PlanMetrics(
        computed_duration_seconds=estimate_duration_seconds(plan),
        author_duration_seconds=plan.estimated_duration_seconds,
        author_training_stress=plan.estimated_training_stress,
        total_distance_meters=distance,
        total_repetitions=repetitions,
        leaf_step_count=len(leaves),
        untimed_step_count=untimed,
    )
