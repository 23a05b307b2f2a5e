"""Timeline — per-step start/end offsets for previews and step charts.

Offsets follow the aggregator's policy: untimed (distance / repetition)
steps occupy zero seconds, so the last entry ends exactly at
``estimate_duration_seconds(plan)``.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from activity_plan.metrics.aggregator import step_duration_seconds
from activity_plan.models.nodes import Repetition, Step
from activity_plan.models.plan import PlanStructure


@dataclass(frozen=True)
class TimelineEntry:
    """One leaf step placed on the plan's time axis.

    Attributes:
        index: Position in the expanded (flattened) step sequence.
        step: The leaf step.
        start_seconds: Offset of the step start from plan start.
        end_seconds: Offset of the step end from plan start.
        node_index: Index of the top-level node the step came from.
        repetition_index: Zero-based iteration within its repetition,
            or None for top-level steps.
    """

    index: int
    step: Step
    start_seconds: float
    end_seconds: float
    node_index: int
    repetition_index: int | None = None

    @property
    def duration_seconds(self) -> float:
        return self.end_seconds - self.start_seconds


def build_timeline(plan: PlanStructure) -> tuple[TimelineEntry, ...]:
    """Lay every leaf step of *plan* out on a cumulative time axis."""
    placed: list[tuple[Step, int, int | None]] = []
    for node_index, node in enumerate(plan.nodes):
        if isinstance(node, Repetition):
            for iteration in range(node.repeat_count):
                for step in node.steps:
                    placed.append((step, node_index, iteration))
        else:
            placed.append((node, node_index, None))

    durations = np.array(
        [step_duration_seconds(step) for step, _, _ in placed], dtype=np.float64,
    )
    ends = np.cumsum(durations)
    starts = ends - durations

    return tuple(
        TimelineEntry(
            index=i,
            step=step,
            start_seconds=float(starts[i]),
            end_seconds=float(ends[i]),
            node_index=node_index,
            repetition_index=iteration,
        )
        for i, (step, node_index, iteration) in enumerate(placed)
    )


def total_timeline_seconds(timeline: tuple[TimelineEntry, ...]) -> float:
    """End offset of the last entry (0 for an empty timeline)."""
    if not timeline:
        return 0.0
    return timeline[-1].end_seconds
