"""Tests for PlanStructure and ActivityClassification."""

from __future__ import annotations

import dataclasses

import pytest

from activity_plan.errors import EmptyPlan, MalformedNode
from activity_plan.models.enums import PLAN_VERSION
from activity_plan.models.nodes import Repetition, Step
from activity_plan.models.plan import ActivityClassification, PlanStructure
from activity_plan.models.values import Duration


def _make_plan(nodes, **overrides) -> PlanStructure:
    defaults = dict(
        name="Test Plan",
        activity_classification=ActivityClassification("run"),
        nodes=nodes,
    )
    defaults.update(overrides)
    return PlanStructure(**defaults)


_STEP = Step("Easy", Duration.minutes(30))


class TestActivityClassification:
    def test_location_optional(self) -> None:
        assert ActivityClassification("run").location is None

    def test_empty_category_fails(self) -> None:
        with pytest.raises(MalformedNode):
            ActivityClassification("")


class TestPlanStructure:
    def test_defaults(self) -> None:
        plan = _make_plan([_STEP])
        assert plan.version == PLAN_VERSION
        assert plan.nodes == (_STEP,)
        assert plan.estimated_duration_seconds is None

    def test_empty_plan_fails(self) -> None:
        with pytest.raises(EmptyPlan):
            _make_plan([])

    def test_nodes_must_be_nodes(self) -> None:
        with pytest.raises(MalformedNode):
            _make_plan([_STEP, "cooldown"])

    def test_author_estimates_kept_verbatim(self) -> None:
        plan = _make_plan(
            [_STEP],
            estimated_duration_seconds=3600,
            estimated_training_stress=42.5,
        )
        assert plan.estimated_duration_seconds == 3600
        assert plan.estimated_training_stress == 42.5

    def test_oversized_estimate_fails(self) -> None:
        with pytest.raises(MalformedNode):
            _make_plan([_STEP], estimated_duration_seconds=10 ** 400)

    def test_description_must_be_string(self) -> None:
        with pytest.raises(MalformedNode):
            _make_plan([_STEP], description=["x"])

    def test_non_numeric_estimate_fails(self) -> None:
        with pytest.raises(MalformedNode):
            _make_plan([_STEP], estimated_training_stress="high")

    def test_step_count_and_repetitions(self) -> None:
        block = Repetition(4, [_STEP])
        plan = _make_plan([_STEP, block, _STEP])
        assert plan.step_count == 3
        assert plan.repetitions == (block,)

    def test_is_frozen(self) -> None:
        plan = _make_plan([_STEP])
        with pytest.raises(dataclasses.FrozenInstanceError):
            plan.name = "Other"  # type: ignore[misc]

    def test_replace_yields_new_plan(self) -> None:
        plan = _make_plan([_STEP])
        renamed = dataclasses.replace(plan, name="Renamed")
        assert renamed.name == "Renamed"
        assert plan.name == "Test Plan"
        assert renamed.nodes is plan.nodes
