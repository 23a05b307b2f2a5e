"""Tests for the metrics aggregator."""

from __future__ import annotations

import pytest

from activity_plan.builder import create_plan
from activity_plan.metrics import (
    compute_plan_metrics,
    estimate_duration_seconds,
    flatten_steps,
    node_duration_seconds,
    step_duration_seconds,
)
from activity_plan.models.nodes import Repetition, Step
from activity_plan.models.values import Duration


class TestStepDuration:
    def test_time_step(self) -> None:
        assert step_duration_seconds(Step("S", Duration.minutes(2))) == 120

    @pytest.mark.parametrize("duration", [Duration.meters(400), Duration.reps(10)])
    def test_untimed_step_is_zero(self, duration) -> None:
        assert step_duration_seconds(Step("S", duration)) == 0


class TestRepetitionExpansion:
    @pytest.mark.parametrize("count", [1, 2, 5, 12])
    def test_flattened_leaf_count_and_time(self, count) -> None:
        steps = [Step("Work", Duration.seconds(40)), Step("Rest", Duration.seconds(20))]
        block = Repetition(count, steps)
        plan = create_plan("P", "run").append_interval(count, steps).finalize()

        leaves = flatten_steps(plan)
        assert len(leaves) == count * len(steps)
        assert node_duration_seconds(block) == count * 60
        assert sum(step_duration_seconds(s) for s in leaves) == count * 60

    def test_flatten_keeps_order(self, interval_plan) -> None:
        names = [s.name for s in flatten_steps(interval_plan)]
        assert names == [
            "Warm-up", "Build",
            "Interval", "Recovery", "Interval", "Recovery", "Interval", "Recovery",
            "Cool-down",
        ]


class TestEstimateDuration:
    def test_interval_plan(self, interval_plan) -> None:
        assert estimate_duration_seconds(interval_plan) == 4200

    def test_untimed_plan_is_zero(self, untimed_plan) -> None:
        # Distance and rep steps take real time but have no pace model to
        # convert them, so they contribute nothing.
        assert estimate_duration_seconds(untimed_plan) == 0

    def test_mixed_plan_counts_only_time(self) -> None:
        plan = (
            create_plan("Mixed", "run")
            .append_warmup(Duration.minutes(10))
            .append_step("Tempo", Duration.kilometers(5))
            .append_cooldown(Duration.minutes(10))
            .finalize()
        )
        assert estimate_duration_seconds(plan) == 1200


class TestPlanMetrics:
    def test_interval_plan(self, interval_plan) -> None:
        metrics = compute_plan_metrics(interval_plan)
        assert metrics.computed_duration_seconds == 4200
        assert metrics.leaf_step_count == 9
        assert metrics.total_distance_meters == 0
        assert not metrics.has_untimed_steps

    def test_untimed_plan(self, untimed_plan) -> None:
        metrics = compute_plan_metrics(untimed_plan)
        assert metrics.computed_duration_seconds == 0
        assert metrics.total_distance_meters == 1600 + 4 * 400 + 2000
        assert metrics.total_repetitions == 4 * 4
        assert metrics.untimed_step_count == 10
        assert metrics.has_untimed_steps

    def test_author_estimates_not_reconciled(self) -> None:
        plan = (
            create_plan(
                "5k Repeats", "run",
                estimated_duration_seconds=3600,
                estimated_training_stress=70,
            )
            .append_interval(3, [Step("Rep", Duration.kilometers(1))])
            .finalize()
        )
        metrics = compute_plan_metrics(plan)
        assert metrics.computed_duration_seconds == 0
        assert metrics.author_duration_seconds == 3600
        assert metrics.author_training_stress == 70
        assert plan.estimated_duration_seconds == 3600
