"""Normalization — ingest plan documents in any historical encoding."""

from activity_plan.normalization.normalizer import (
    PlanEncoding,
    detect_encoding,
    normalize_plan,
)

__all__ = ["PlanEncoding", "detect_encoding", "normalize_plan"]
