"""Schema normalizer — the single ingestion point for plan documents.

Accepts either historical encoding and returns the canonical PlanStructure:

* **Canonical** — the wire shape written by ``activity_plan.serialization.wire``
  (camelCase plan keys, ``structure.steps``).
* **Legacy** — hand-written literal documents: snake_case plan keys
  (``activity_type``, ``estimated_duration``, ``estimated_tss``) and/or a
  bare top-level ``steps`` list, steps carrying a singular ``target`` and
  an ``intensityClass``, nodes told apart by ``type`` or by a ``repeat`` key.

Validation is batched: every malformed node is recorded and one
``MalformedLegacyPlan`` is raised at the end, so a bulk migration gets the
full list of problems per document. No partial plan is ever returned.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import IntEnum, auto
from typing import Any, Callable, TypeVar

from activity_plan.errors import (
    EmptyPlan,
    MalformedLegacyNode,
    MalformedLegacyPlan,
    MalformedNode,
    PlanError,
    UnknownDurationUnit,
    UnknownTargetType,
)
from activity_plan.models.enums import (
    COOLDOWN_LABEL,
    PLAN_VERSION,
    UNIT_KIND,
    WARMUP_LABEL,
    DurationKind,
    DurationUnit,
)
from activity_plan.models.nodes import Node, Repetition, Step, validate_repeat_count
from activity_plan.models.plan import ActivityClassification, PlanStructure
from activity_plan.models.values import Duration, Target, is_finite_number
from activity_plan.serialization.wire import (
    DURATION_KINDS_BY_TAG,
    DURATION_UNITS_BY_TAG,
    NODE_TYPE_REPETITION,
    NODE_TYPE_STEP,
    TARGET_METRICS_BY_TAG,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LEGACY_PLAN_KEYS = ("activity_type", "estimated_duration", "estimated_tss")

# Legacy intensityClass values that imply a reserved segment label.
_INTENSITY_CLASS_LABELS = {
    "WarmUp": WARMUP_LABEL,
    "CoolDown": COOLDOWN_LABEL,
}

# Compact duration form: {"type": "time", "seconds": 600}
_COMPACT_DURATION_FIELDS: dict[DurationKind, tuple[str, DurationUnit]] = {
    DurationKind.TIME: ("seconds", DurationUnit.SECONDS),
    DurationKind.DISTANCE: ("meters", DurationUnit.METERS),
    DurationKind.REPETITIONS: ("count", DurationUnit.REPS),
}


class PlanEncoding(IntEnum):
    """Historical encodings a plan document may arrive in."""

    CANONICAL = auto()
    LEGACY = auto()


def detect_encoding(document: Mapping[str, Any]) -> PlanEncoding:
    """Classify a plan document by its top-level keys."""
    if any(key in document for key in _LEGACY_PLAN_KEYS):
        return PlanEncoding.LEGACY
    if "steps" in document and "structure" not in document:
        return PlanEncoding.LEGACY
    return PlanEncoding.CANONICAL


def normalize_plan(document: Mapping[str, Any]) -> PlanStructure:
    """Normalize a plan document in either encoding to a PlanStructure.

    Raises:
        MalformedLegacyPlan: one or more problems were found; ``issues``
            lists every one of them with its path.
    """
    if not isinstance(document, Mapping):
        raise MalformedLegacyPlan([
            MalformedLegacyNode("", MalformedNode.kind, "Plan document must be an object"),
        ])

    encoding = detect_encoding(document)
    issues = _IssueLog()
    plan = _normalize_document(document, encoding, issues)

    if issues.entries:
        logger.warning(
            "Plan %r has %d malformed node(s)",
            document.get("name"),
            len(issues.entries),
        )
        raise MalformedLegacyPlan(issues.entries)
    assert plan is not None
    logger.debug("Normalized %s plan %r", encoding.name.lower(), plan.name)
    return plan


# ---------------------------------------------------------------------------
# Issue collection
# ---------------------------------------------------------------------------


class _IssueLog:
    """Accumulates MalformedLegacyNode entries during one normalization."""

    def __init__(self) -> None:
        self.entries: list[MalformedLegacyNode] = []

    def add(self, path: str, exc: PlanError) -> None:
        self.entries.append(MalformedLegacyNode(path=path, kind=exc.kind, reason=str(exc)))

    def capture(self, path: str, fn: Callable[..., T], *args: Any) -> T | None:
        """Run *fn*; on a PlanError record it under *path* and return None."""
        try:
            return fn(*args)
        except PlanError as exc:
            self.add(path, exc)
            return None

    def __len__(self) -> int:
        return len(self.entries)


# ---------------------------------------------------------------------------
# Plan level
# ---------------------------------------------------------------------------


def _normalize_document(
    document: Mapping[str, Any],
    encoding: PlanEncoding,
    issues: _IssueLog,
) -> PlanStructure | None:
    before = len(issues)

    name = document.get("name")
    if not isinstance(name, str) or not name.strip():
        issues.add("name", MalformedNode(f"Plan name must be a non-empty string, got {name!r}"))

    version = document.get("version", PLAN_VERSION)
    if isinstance(version, (int, float)) and not isinstance(version, bool):
        version = str(version)
    if not isinstance(version, str) or not version:
        issues.add("version", MalformedNode(f"Plan version must be a string, got {version!r}"))

    description = document.get("description")
    if description is not None and not isinstance(description, str):
        issues.add("description", MalformedNode("Plan description must be a string"))

    classification = _normalize_classification(document, issues)

    if encoding == PlanEncoding.LEGACY:
        duration_key, stress_key = "estimated_duration", "estimated_tss"
    else:
        duration_key, stress_key = "estimatedDurationSeconds", "estimatedTrainingStress"
    estimated_duration = _optional_number(document, duration_key, issues)
    estimated_stress = _optional_number(document, stress_key, issues)

    steps_path, raw_steps = _locate_steps(document)
    nodes = _normalize_nodes(raw_steps, steps_path, issues)

    if len(issues) > before:
        return None
    return issues.capture(
        "",
        PlanStructure,
        name,
        classification,
        tuple(nodes),
        version,
        description,
        estimated_duration,
        estimated_stress,
    )


def _normalize_classification(
    document: Mapping[str, Any],
    issues: _IssueLog,
) -> ActivityClassification | None:
    if "activityClassification" in document:
        path, raw = "activityClassification", document["activityClassification"]
    elif "activity_type" in document:
        path, raw = "activity_type", document["activity_type"]
    elif "modality" in document:
        path = "modality"
        raw = {"category": document["modality"], "location": document.get("environment")}
    else:
        issues.add(
            "activityClassification",
            MalformedNode("Plan has no activity classification"),
        )
        return None

    if isinstance(raw, str):
        return issues.capture(path, ActivityClassification, raw)
    if isinstance(raw, Mapping):
        location = raw.get("location")
        if location is not None and not isinstance(location, str):
            issues.add(f"{path}.location", MalformedNode("Location must be a string"))
            return None
        return issues.capture(path, ActivityClassification, raw.get("category"), location)
    issues.add(path, MalformedNode(f"Activity classification must be a string or object, got {raw!r}"))
    return None


def _optional_number(document: Mapping[str, Any], key: str, issues: _IssueLog) -> float | None:
    value = document.get(key)
    if value is None:
        return None
    if not is_finite_number(value):
        issues.add(key, MalformedNode(f"{key} must be a finite number, got {value!r}"))
        return None
    return value


def _locate_steps(document: Mapping[str, Any]) -> tuple[str, Any]:
    structure = document.get("structure")
    if isinstance(structure, Mapping):
        return "structure.steps", structure.get("steps")
    if structure is not None:
        return "structure", structure
    return "steps", document.get("steps")


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


def _normalize_nodes(raw_steps: Any, path: str, issues: _IssueLog) -> list[Node]:
    if not isinstance(raw_steps, list):
        issues.add(path, MalformedNode(f"Expected a list of steps, got {type(raw_steps).__name__}"))
        return []
    if not raw_steps:
        issues.add(path, EmptyPlan("Plan must have at least one step"))
        return []

    nodes: list[Node] = []
    for i, raw in enumerate(raw_steps):
        node_path = f"{path}[{i}]"
        node_type = issues.capture(node_path, _node_type, raw)
        if node_type == NODE_TYPE_REPETITION:
            node = _normalize_repetition(raw, node_path, issues)
        elif node_type == NODE_TYPE_STEP:
            node = _normalize_step(raw, node_path, issues)
        else:
            node = None
        if node is not None:
            nodes.append(node)
    return nodes


def _node_type(raw: Any) -> str:
    if not isinstance(raw, Mapping):
        raise MalformedNode(f"Node must be an object, got {type(raw).__name__}")
    tag = raw.get("type")
    if tag is None:
        return NODE_TYPE_REPETITION if "repeat" in raw else NODE_TYPE_STEP
    if tag in (NODE_TYPE_STEP, NODE_TYPE_REPETITION):
        return tag
    raise MalformedNode(f"Unknown node type {tag!r}")


def _normalize_repetition(
    raw: Mapping[str, Any],
    path: str,
    issues: _IssueLog,
) -> Repetition | None:
    before = len(issues)
    repeat = raw.get("repeat", raw.get("repeatCount"))
    segment_label = raw.get("segmentLabel", raw.get("segmentName"))
    issues.capture(f"{path}.repeat", validate_repeat_count, repeat)

    raw_children = raw.get("steps")
    children: list[Step] = []
    if not isinstance(raw_children, list):
        issues.add(f"{path}.steps", MalformedNode("Repetition steps must be a list"))
    else:
        for j, child in enumerate(raw_children):
            child_path = f"{path}.steps[{j}]"
            child_type = issues.capture(child_path, _node_type, child)
            if child_type == NODE_TYPE_REPETITION:
                issues.add(
                    child_path,
                    MalformedNode("Repetitions cannot be nested inside repetitions"),
                )
            elif child_type == NODE_TYPE_STEP:
                step = _normalize_step(child, child_path, issues)
                if step is not None:
                    children.append(step)

    if len(issues) > before:
        return None
    return issues.capture(path, Repetition, repeat, tuple(children), segment_label)


def _normalize_step(raw: Mapping[str, Any], path: str, issues: _IssueLog) -> Step | None:
    before = len(issues)

    duration = issues.capture(f"{path}.duration", _normalize_duration, raw.get("duration"))

    targets: list[Target] = []
    if "targets" in raw and raw["targets"] is not None:
        raw_targets = raw["targets"]
        if not isinstance(raw_targets, list):
            issues.add(f"{path}.targets", MalformedNode("Step targets must be a list"))
        else:
            for k, raw_target in enumerate(raw_targets):
                target = issues.capture(f"{path}.targets[{k}]", _normalize_target, raw_target)
                if target is not None:
                    targets.append(target)
    elif raw.get("target") is not None:
        target = issues.capture(f"{path}.target", _normalize_target, raw["target"])
        if target is not None:
            targets.append(target)

    segment_label = raw.get("segmentLabel", raw.get("segmentName"))
    intensity_class = raw.get("intensityClass")
    if intensity_class is not None and not isinstance(intensity_class, str):
        issues.add(
            f"{path}.intensityClass",
            MalformedNode(f"intensityClass must be a string, got {intensity_class!r}"),
        )
    elif segment_label is None:
        segment_label = _INTENSITY_CLASS_LABELS.get(intensity_class)

    if len(issues) > before:
        return None
    return issues.capture(
        path,
        Step,
        raw.get("name"),
        duration,
        tuple(targets),
        raw.get("notes"),
        raw.get("description"),
        segment_label,
    )


def _normalize_duration(raw: Any) -> Duration:
    if not isinstance(raw, Mapping):
        raise MalformedNode(f"Duration must be an object, got {raw!r}")
    type_tag = raw.get("type")
    kind = _lookup_tag(DURATION_KINDS_BY_TAG, type_tag)
    if kind is None:
        raise UnknownDurationUnit(f"Unknown duration type {type_tag!r}")

    if "value" in raw:
        unit_tag = raw.get("unit")
        unit = _lookup_tag(DURATION_UNITS_BY_TAG, unit_tag)
        if unit is None:
            raise UnknownDurationUnit(f"Unknown duration unit {unit_tag!r}")
        if UNIT_KIND[unit] != kind:
            raise UnknownDurationUnit(f"Unit {unit_tag!r} is not valid for a {type_tag} duration")
        return Duration(kind, raw["value"], unit)

    field_name, unit = _COMPACT_DURATION_FIELDS[kind]
    if field_name not in raw:
        raise MalformedNode("Duration is missing 'value'")
    return Duration(kind, raw[field_name], unit)


def _normalize_target(raw: Any) -> Target:
    if not isinstance(raw, Mapping):
        raise MalformedNode(f"Target must be an object, got {raw!r}")
    type_tag = raw.get("type")
    metric = _lookup_tag(TARGET_METRICS_BY_TAG, type_tag)
    if metric is None:
        raise UnknownTargetType(f"Unknown target type {type_tag!r}")

    if raw.get("intensity") is not None:
        return Target(metric, raw["intensity"])
    if raw.get("min") is not None and raw.get("max") is not None:
        return Target.range(metric, raw["min"], raw["max"], raw.get("target"))
    if raw.get("target") is not None:
        return Target(metric, raw["target"])
    raise MalformedNode("Target needs 'intensity' or 'min'/'max'")


def _lookup_tag(table: Mapping[str, T], tag: Any) -> T | None:
    # Tags come straight from JSON and may be lists or objects.
    if not isinstance(tag, str):
        return None
    return table.get(tag)
