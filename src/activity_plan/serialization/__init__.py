"""Serialization module — canonical wire form and device exports."""

from activity_plan.serialization.garmin import (
    AthleteProfile,
    to_garmin_json,
    to_garmin_json_string,
)
from activity_plan.serialization.wire import to_wire, to_wire_json

__all__ = [
    "AthleteProfile",
    "to_garmin_json",
    "to_garmin_json_string",
    "to_wire",
    "to_wire_json",
]
