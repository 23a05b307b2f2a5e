"""PlanBuilder — fluent, fail-fast construction of PlanStructures.

Each ``append_*`` call builds and validates its node immediately, so an
authoring tool gets the error at the exact call that caused it. Only the
whole-plan check (at least one node) waits for ``finalize()``.

Usage::

    plan = (
        create_plan("Sweet Spot", ActivityClassification("bike", "indoor"))
        .append_warmup(Duration.minutes(10), targets=[Target.ftp(55)])
        .append_interval(3, [
            {"name": "Work", "duration": Duration.minutes(10), "targets": [Target.ftp(90)]},
            {"name": "Recover", "duration": Duration.minutes(5)},
        ])
        .append_cooldown(Duration.minutes(10))
        .finalize()
    )
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Union

from activity_plan.errors import BuilderAlreadyFinalized, EmptyPlan, MalformedNode
from activity_plan.models.enums import (
    COOLDOWN_LABEL,
    DEFAULT_COOLDOWN_NAME,
    DEFAULT_REST_NAME,
    DEFAULT_WARMUP_NAME,
    PLAN_VERSION,
    WARMUP_LABEL,
    BuilderState,
)
from activity_plan.models.nodes import Node, Repetition, Step
from activity_plan.models.plan import (
    ActivityClassification,
    PlanStructure,
    validate_plan_metadata,
)
from activity_plan.models.values import Duration, Target

logger = logging.getLogger(__name__)

StepSpec = Union[Step, Mapping[str, Any]]


class PlanBuilder:
    """Accumulates top-level nodes and finalizes them into a PlanStructure.

    Not safe for concurrent use: callers must serialize appends on one
    instance. ``finalize()`` may be called once; afterwards every method
    that changes the plan raises ``BuilderAlreadyFinalized``.
    """

    def __init__(
        self,
        name: str,
        activity_classification: ActivityClassification | str,
        description: str | None = None,
        version: str = PLAN_VERSION,
        estimated_duration_seconds: float | None = None,
        estimated_training_stress: float | None = None,
    ) -> None:
        if isinstance(activity_classification, str):
            activity_classification = ActivityClassification(activity_classification)
        validate_plan_metadata(
            name,
            activity_classification,
            version,
            description,
            estimated_duration_seconds,
            estimated_training_stress,
        )
        self._name = name
        self._classification = activity_classification
        self._description = description
        self._version = version
        self._estimated_duration_seconds = estimated_duration_seconds
        self._estimated_training_stress = estimated_training_stress
        self._nodes: list[Node] = []
        self._state = BuilderState.BUILDING

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> BuilderState:
        return self._state

    @property
    def step_count(self) -> int:
        """Number of top-level nodes appended so far."""
        return len(self._nodes)

    @property
    def leaf_count(self) -> int:
        """Number of leaf steps once repetitions are expanded."""
        total = 0
        for node in self._nodes:
            if isinstance(node, Repetition):
                total += node.repeat_count * len(node.steps)
            else:
                total += 1
        return total

    # ------------------------------------------------------------------
    # Appends
    # ------------------------------------------------------------------

    def append_step(
        self,
        name: str,
        duration: Duration,
        targets: Iterable[Target] = (),
        notes: str | None = None,
        description: str | None = None,
        segment_label: str | None = None,
    ) -> PlanBuilder:
        """Append a single step."""
        self._ensure_building()
        step = Step(
            name=name,
            duration=duration,
            targets=tuple(targets),
            notes=notes,
            description=description,
            segment_label=segment_label,
        )
        self._nodes.append(step)
        logger.debug("Appended step %r (%d nodes)", name, len(self._nodes))
        return self

    def append_interval(
        self,
        repeat_count: int,
        steps: Iterable[StepSpec],
        segment_label: str | None = None,
    ) -> PlanBuilder:
        """Append a repetition block.

        ``steps`` may hold Step instances or mappings of ``append_step``
        keyword arguments (``name``, ``duration``, ``targets``, ...).
        """
        self._ensure_building()
        children = tuple(_coerce_step(spec) for spec in steps)
        block = Repetition(
            repeat_count=repeat_count,
            steps=children,
            segment_label=segment_label,
        )
        self._nodes.append(block)
        logger.debug(
            "Appended %dx repetition of %d step(s) (%d nodes)",
            repeat_count, len(children), len(self._nodes),
        )
        return self

    def append_warmup(
        self,
        duration: Duration,
        name: str = DEFAULT_WARMUP_NAME,
        targets: Iterable[Target] = (),
        notes: str | None = None,
        description: str | None = None,
    ) -> PlanBuilder:
        """Append a step tagged with the reserved ``warmup`` segment label."""
        return self.append_step(
            name, duration, targets, notes, description, segment_label=WARMUP_LABEL,
        )

    def append_cooldown(
        self,
        duration: Duration,
        name: str = DEFAULT_COOLDOWN_NAME,
        targets: Iterable[Target] = (),
        notes: str | None = None,
        description: str | None = None,
    ) -> PlanBuilder:
        """Append a step tagged with the reserved ``cooldown`` segment label."""
        return self.append_step(
            name, duration, targets, notes, description, segment_label=COOLDOWN_LABEL,
        )

    def append_rest(
        self,
        duration: Duration,
        name: str = DEFAULT_REST_NAME,
        notes: str | None = None,
    ) -> PlanBuilder:
        """Append a target-free recovery step."""
        return self.append_step(name, duration, (), notes)

    # ------------------------------------------------------------------
    # Finalize
    # ------------------------------------------------------------------

    def finalize(self) -> PlanStructure:
        """Validate the accumulated nodes and return an immutable PlanStructure.

        Raises:
            EmptyPlan: no node was appended.
            BuilderAlreadyFinalized: ``finalize()`` was already called.
        """
        self._ensure_building()
        if not self._nodes:
            raise EmptyPlan("Plan must have at least one step")

        plan = PlanStructure(
            name=self._name,
            activity_classification=self._classification,
            nodes=tuple(self._nodes),
            version=self._version,
            description=self._description,
            estimated_duration_seconds=self._estimated_duration_seconds,
            estimated_training_stress=self._estimated_training_stress,
        )
        self._state = BuilderState.FINALIZED
        logger.debug("Finalized plan %r with %d node(s)", self._name, len(plan.nodes))
        return plan

    def _ensure_building(self) -> None:
        if self._state is BuilderState.FINALIZED:
            raise BuilderAlreadyFinalized(
                f"Builder for plan {self._name!r} has already been finalized"
            )


def _coerce_step(spec: StepSpec) -> Step:
    if isinstance(spec, Step):
        return spec
    if isinstance(spec, Repetition):
        raise MalformedNode("Repetitions cannot be nested inside repetitions")
    if isinstance(spec, Mapping):
        try:
            return Step(
                name=spec["name"],
                duration=spec["duration"],
                targets=tuple(spec.get("targets", ())),
                notes=spec.get("notes"),
                description=spec.get("description"),
                segment_label=spec.get("segment_label"),
            )
        except KeyError as exc:
            raise MalformedNode(f"Interval step is missing {exc.args[0]!r}") from exc
    raise MalformedNode(f"Interval step must be a Step or mapping, got {spec!r}")


def create_plan(
    name: str,
    activity_classification: ActivityClassification | str,
    **kwargs: Any,
) -> PlanBuilder:
    """Create a new PlanBuilder."""
    return PlanBuilder(name, activity_classification, **kwargs)
