"""Tests for timeline construction."""

from __future__ import annotations

from activity_plan.metrics import build_timeline, estimate_duration_seconds
from activity_plan.metrics.timeline import total_timeline_seconds


class TestTimeline:
    def test_offsets_are_cumulative(self, interval_plan) -> None:
        timeline = build_timeline(interval_plan)
        assert len(timeline) == 9
        assert (timeline[0].start_seconds, timeline[0].end_seconds) == (0, 600)
        assert (timeline[1].start_seconds, timeline[1].end_seconds) == (600, 900)
        for prev, cur in zip(timeline, timeline[1:]):
            assert cur.start_seconds == prev.end_seconds

    def test_ends_at_estimate(self, interval_plan) -> None:
        timeline = build_timeline(interval_plan)
        assert total_timeline_seconds(timeline) == estimate_duration_seconds(interval_plan)

    def test_repetition_indices(self, interval_plan) -> None:
        timeline = build_timeline(interval_plan)
        assert timeline[0].repetition_index is None
        assert [e.repetition_index for e in timeline[2:8]] == [0, 0, 1, 1, 2, 2]
        assert {e.node_index for e in timeline[2:8]} == {2}
        assert timeline[-1].node_index == 3

    def test_untimed_steps_take_no_time(self, untimed_plan) -> None:
        timeline = build_timeline(untimed_plan)
        assert all(e.duration_seconds == 0 for e in timeline)
        assert total_timeline_seconds(timeline) == 0

    def test_entries_are_plain_floats(self, interval_plan) -> None:
        entry = build_timeline(interval_plan)[0]
        assert type(entry.start_seconds) is float

    def test_empty_timeline_total(self) -> None:
        assert total_timeline_seconds(()) == 0.0
