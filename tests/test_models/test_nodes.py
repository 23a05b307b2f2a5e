"""Tests for Step and Repetition nodes."""

from __future__ import annotations

import pytest

from activity_plan.errors import EmptyRepetitionSteps, InvalidRepeatCount, MalformedNode
from activity_plan.models.enums import SegmentRole
from activity_plan.models.nodes import Repetition, Step
from activity_plan.models.values import Duration, Target


def _make_step(name: str = "Work", **overrides) -> Step:
    defaults = dict(name=name, duration=Duration.minutes(5))
    defaults.update(overrides)
    return Step(**defaults)


class TestStep:
    def test_defaults(self) -> None:
        step = _make_step()
        assert step.targets == ()
        assert step.notes is None
        assert step.role == SegmentRole.MAIN

    def test_targets_coerced_to_tuple(self) -> None:
        step = _make_step(targets=[Target.ftp(90), Target.bpm(160)])
        assert isinstance(step.targets, tuple)
        assert len(step.targets) == 2

    def test_reserved_labels_set_role(self) -> None:
        assert _make_step(segment_label="warmup").role == SegmentRole.WARMUP
        assert _make_step(segment_label="cooldown").role == SegmentRole.COOLDOWN
        assert _make_step(segment_label="Main Set").role == SegmentRole.MAIN

    def test_empty_name_fails(self) -> None:
        with pytest.raises(MalformedNode):
            _make_step(name="  ")

    def test_duration_must_be_duration(self) -> None:
        with pytest.raises(MalformedNode):
            _make_step(duration=300)

    def test_non_target_entry_fails(self) -> None:
        with pytest.raises(MalformedNode):
            _make_step(targets=[{"type": "%FTP", "intensity": 90}])

    def test_notes_must_be_string(self) -> None:
        with pytest.raises(MalformedNode):
            _make_step(notes=42)


class TestRepetition:
    def test_create(self) -> None:
        block = Repetition(3, [_make_step("Work"), _make_step("Rest")])
        assert block.repeat_count == 3
        assert isinstance(block.steps, tuple)
        assert [s.name for s in block.steps] == ["Work", "Rest"]

    @pytest.mark.parametrize("count", [0, -2, 2.5, "3", True, None])
    def test_invalid_repeat_count(self, count) -> None:
        with pytest.raises(InvalidRepeatCount):
            Repetition(count, [_make_step()])

    def test_empty_steps(self) -> None:
        with pytest.raises(EmptyRepetitionSteps):
            Repetition(2, [])

    def test_nested_repetition_rejected(self) -> None:
        inner = Repetition(2, [_make_step()])
        with pytest.raises(MalformedNode, match="nested"):
            Repetition(2, [_make_step(), inner])

    def test_segment_label_must_be_string(self) -> None:
        with pytest.raises(MalformedNode):
            Repetition(2, [_make_step()], segment_label=["Main"])

    def test_non_step_child_rejected(self) -> None:
        with pytest.raises(MalformedNode):
            Repetition(2, ["Work"])
