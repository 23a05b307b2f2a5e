"""Position-based navigation through a plan tree.

A position is a tuple of indices: ``(i,)`` addresses top-level node *i*;
``(i, j)`` addresses step *j* inside repetition *i*. Navigation is
stateless with respect to repetition iterations; a caller executing the
plan keeps its own iteration counters (see ``advance``).
"""

from __future__ import annotations

from collections.abc import Iterator

from activity_plan.models.nodes import Repetition, Step
from activity_plan.models.plan import PlanStructure

Position = tuple[int, ...]


def step_at(plan: PlanStructure, position: Position) -> Step | None:
    """Return the step at *position*, or None if it does not exist.

    A position pointing at a repetition resolves to its first step.
    """
    if not position or len(position) > 2:
        return None
    i = position[0]
    if not 0 <= i < len(plan.nodes):
        return None
    node = plan.nodes[i]

    if isinstance(node, Repetition):
        j = position[1] if len(position) == 2 else 0
        if not 0 <= j < len(node.steps):
            return None
        return node.steps[j]

    if len(position) == 2:
        return None
    return node


def next_position(plan: PlanStructure, position: Position) -> Position | None:
    """Position of the next step in plan order, ignoring iteration counts.

    Entering a repetition yields its first child; leaving a repetition's
    last child yields the next top-level node. Returns None at plan end.
    """
    if step_at(plan, position) is None:
        return None
    position = _resolve(plan, position)

    if len(position) == 2:
        i, j = position
        block = plan.nodes[i]
        assert isinstance(block, Repetition)
        if j + 1 < len(block.steps):
            return (i, j + 1)
    return _enter(plan, position[0] + 1)


def advance(
    plan: PlanStructure,
    position: Position,
    iteration: int = 0,
) -> tuple[Position, int] | None:
    """Next ``(position, iteration)`` when executing *plan* for real.

    At the end of a repetition's last child, loops back to its first child
    until ``repeat_count`` iterations are done.
    """
    if step_at(plan, position) is None:
        return None
    position = _resolve(plan, position)

    if len(position) == 2:
        i, j = position
        block = plan.nodes[i]
        assert isinstance(block, Repetition)
        if j + 1 < len(block.steps):
            return (i, j + 1), iteration
        if iteration + 1 < block.repeat_count:
            return (i, 0), iteration + 1

    nxt = _enter(plan, position[0] + 1)
    if nxt is None:
        return None
    return nxt, 0


def iter_leaf_positions(plan: PlanStructure) -> Iterator[Position]:
    """Yield each leaf position once, in plan order."""
    position = _enter(plan, 0)
    while position is not None:
        yield position
        position = next_position(plan, position)


def _enter(plan: PlanStructure, index: int) -> Position | None:
    if index >= len(plan.nodes):
        return None
    if isinstance(plan.nodes[index], Repetition):
        return (index, 0)
    return (index,)


def _resolve(plan: PlanStructure, position: Position) -> Position:
    # A bare repetition index means its first child.
    if len(position) == 1 and isinstance(plan.nodes[position[0]], Repetition):
        return (position[0], 0)
    return position
