"""Garmin Connect facade for uploading and scheduling activity plans.

All calls go through ``_safe_call``, which retries HTTP 429 responses with
exponential backoff and wraps every other failure in ``GarminAPIError``.
"""

from __future__ import annotations

import logging
import time
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Callable, Optional

from garminconnect import Garmin

from activity_plan.models.plan import PlanStructure
from activity_plan.serialization.garmin import AthleteProfile, to_garmin_json
from garmin_client.auth import DEFAULT_TOKEN_DIR, create_session
from garmin_client.exceptions import GarminAPIError, GarminRateLimitError

logger = logging.getLogger(__name__)

_MAX_RETRIES = 3
_BASE_BACKOFF_S = 2


class GarminClient:
    """Upload, schedule, list and delete workouts on Garmin Connect."""

    def __init__(
        self,
        email: str | None = None,
        password: str | None = None,
        token_dir: Path | str = DEFAULT_TOKEN_DIR,
        prompt_mfa: Optional[Callable[[], str]] = None,
    ) -> None:
        self._garmin = create_session(
            email=email or "",
            password=password or "",
            token_dir=token_dir,
            prompt_mfa=prompt_mfa,
        )

    @classmethod
    def from_garmin(cls, garmin: Garmin) -> GarminClient:
        """Wrap an already-authenticated Garmin session."""
        obj = cls.__new__(cls)
        obj._garmin = garmin
        return obj

    # ------------------------------------------------------------------
    # Workouts
    # ------------------------------------------------------------------

    def upload_workout(self, workout_json: dict) -> int:
        """Upload a Garmin workout dict. Returns the assigned workoutId."""
        resp = self._safe_call(self._garmin.upload_workout, workout_json)
        if isinstance(resp, dict) and "workoutId" in resp:
            workout_id = int(resp["workoutId"])
            logger.info("Uploaded workout %r as id=%d", workout_json.get("workoutName"), workout_id)
            return workout_id
        raise GarminAPIError(f"Unexpected upload response: {resp}")

    def upload_plan(self, plan: PlanStructure, profile: AthleteProfile | None = None) -> int:
        """Export *plan* to Garmin JSON and upload it. Returns the workoutId."""
        return self.upload_workout(to_garmin_json(plan, profile))

    def schedule_workout(self, workout_id: int, target_date: date) -> None:
        """Put an uploaded workout on the calendar for *target_date*."""
        date_str = target_date.isoformat()
        self._safe_call(
            self._garmin.garth.post,
            "connectapi",
            f"/workout-service/schedule/{workout_id}",
            json={"date": date_str},
            api=True,
        )
        logger.info("Scheduled workout %d for %s", workout_id, date_str)

    def upload_and_schedule_plan(
        self,
        plan: PlanStructure,
        target_date: date,
        profile: AthleteProfile | None = None,
    ) -> int:
        """Upload *plan* and schedule it on *target_date*. Returns the workoutId."""
        workout_id = self.upload_plan(plan, profile)
        self.schedule_workout(workout_id, target_date)
        return workout_id

    def upload_plans(
        self,
        plans: list[PlanStructure],
        start_date: date | None = None,
        profile: AthleteProfile | None = None,
    ) -> list[int]:
        """Upload plans in order, one per day from *start_date* if given."""
        ids: list[int] = []
        for i, plan in enumerate(plans):
            if start_date is None:
                ids.append(self.upload_plan(plan, profile))
            else:
                target = start_date + timedelta(days=i)
                ids.append(self.upload_and_schedule_plan(plan, target, profile))
        return ids

    def get_workouts(self, limit: int = 100) -> list[dict]:
        """List existing workouts on the account."""
        return self._safe_call(self._garmin.get_workouts, 0, limit) or []

    def delete_workout(self, workout_id: int) -> None:
        """Delete a workout from the account."""
        self._safe_call(
            self._garmin.garth.delete,
            "connectapi",
            f"/workout-service/workout/{workout_id}",
            api=True,
        )
        logger.info("Deleted workout %d", workout_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _safe_call(self, fn: Callable, *args: Any, **kwargs: Any) -> Any:
        """Call *fn*, retrying with exponential backoff on HTTP 429."""
        last_exc: Exception | None = None
        for attempt in range(_MAX_RETRIES):
            try:
                return fn(*args, **kwargs)
            except Exception as exc:
                last_exc = exc
                status = getattr(exc, "status", None) or getattr(exc, "status_code", None)
                if status != 429:
                    raise GarminAPIError(str(exc), status_code=status) from exc
                wait = _BASE_BACKOFF_S * (2 ** attempt)
                logger.warning(
                    "Rate limited (attempt %d/%d), retrying in %ds",
                    attempt + 1, _MAX_RETRIES, wait,
                )
                time.sleep(wait)

        raise GarminRateLimitError(f"Rate limited after {_MAX_RETRIES} retries: {last_exc}")
