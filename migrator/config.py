"""Environment-variable-based configuration for the migration CLI."""

from __future__ import annotations

import os
from pathlib import Path

GARMIN_EMAIL: str = os.environ.get("GARMIN_EMAIL", "")
GARMIN_PASSWORD: str = os.environ.get("GARMIN_PASSWORD", "")
TOKEN_DIR: Path = Path(os.environ.get("GARMIN_TOKEN_DIR", "~/.garminconnect")).expanduser()
SOURCE_DIR: Path = Path(os.environ.get("PLAN_SOURCE_DIR", "plans/legacy"))
OUTPUT_DIR: Path = Path(os.environ.get("PLAN_OUTPUT_DIR", "plans/canonical"))
LOG_LEVEL: str = os.environ.get("MIGRATOR_LOG_LEVEL", "INFO")
