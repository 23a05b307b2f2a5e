"""Tests for garmin_client.client — mock-based, no real network calls."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock, call, patch

import pytest

from activity_plan.builder import get_template
from activity_plan.serialization.garmin import AthleteProfile
from garmin_client.client import GarminClient
from garmin_client.exceptions import GarminAPIError, GarminRateLimitError


@pytest.fixture
def mock_garmin():
    """Create a mock Garmin instance."""
    mock = MagicMock()
    mock.garth = MagicMock()
    return mock


@pytest.fixture
def client(mock_garmin):
    """Create a GarminClient with a mocked Garmin session."""
    with patch("garmin_client.client.create_session", return_value=mock_garmin):
        c = GarminClient(email="test@test.com", password="pass")
    return c


def _rate_limited() -> Exception:
    exc = Exception("Too many requests")
    exc.status = 429
    return exc


# ---------------------------------------------------------------------------
# upload_workout / upload_plan
# ---------------------------------------------------------------------------


class TestUploadWorkout:
    def test_returns_workout_id(self, client, mock_garmin):
        mock_garmin.upload_workout.return_value = {"workoutId": 12345}
        wid = client.upload_workout({"workoutName": "Test"})
        assert wid == 12345
        mock_garmin.upload_workout.assert_called_once_with({"workoutName": "Test"})

    def test_raises_on_unexpected_response(self, client, mock_garmin):
        mock_garmin.upload_workout.return_value = {"error": "bad"}
        with pytest.raises(GarminAPIError, match="Unexpected upload response"):
            client.upload_workout({"workoutName": "Test"})

    def test_raises_on_api_error(self, client, mock_garmin):
        exc = Exception("Server error")
        exc.status = 500
        mock_garmin.upload_workout.side_effect = exc
        with pytest.raises(GarminAPIError) as exc_info:
            client.upload_workout({"workoutName": "Test"})
        assert exc_info.value.status_code == 500

    def test_upload_plan_exports_first(self, client, mock_garmin):
        mock_garmin.upload_workout.return_value = {"workoutId": 7}
        plan = get_template("threshold_intervals")
        assert client.upload_plan(plan, AthleteProfile(ftp=250)) == 7
        sent = mock_garmin.upload_workout.call_args.args[0]
        assert sent["workoutName"] == "Threshold Intervals"
        assert sent["sportType"]["sportTypeKey"] == "cycling"


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------


class TestScheduleWorkout:
    def test_posts_to_schedule_endpoint(self, client, mock_garmin):
        client.schedule_workout(99, date(2026, 11, 2))
        mock_garmin.garth.post.assert_called_once_with(
            "connectapi",
            "/workout-service/schedule/99",
            json={"date": "2026-11-02"},
            api=True,
        )

    def test_upload_plans_one_per_day(self, client, mock_garmin):
        mock_garmin.upload_workout.side_effect = [{"workoutId": 1}, {"workoutId": 2}]
        plans = [get_template("tempo_run"), get_template("endurance_ride")]

        ids = client.upload_plans(plans, start_date=date(2026, 11, 2))

        assert ids == [1, 2]
        dates = [c.kwargs["json"]["date"] for c in mock_garmin.garth.post.call_args_list]
        assert dates == ["2026-11-02", "2026-11-03"]

    def test_upload_plans_without_schedule(self, client, mock_garmin):
        mock_garmin.upload_workout.return_value = {"workoutId": 5}
        ids = client.upload_plans([get_template("tempo_run")])
        assert ids == [5]
        mock_garmin.garth.post.assert_not_called()


# ---------------------------------------------------------------------------
# Listing and deleting
# ---------------------------------------------------------------------------


class TestWorkoutManagement:
    def test_get_workouts(self, client, mock_garmin):
        mock_garmin.get_workouts.return_value = [{"workoutId": 1}]
        assert client.get_workouts(limit=10) == [{"workoutId": 1}]
        mock_garmin.get_workouts.assert_called_once_with(0, 10)

    def test_get_workouts_none(self, client, mock_garmin):
        mock_garmin.get_workouts.return_value = None
        assert client.get_workouts() == []

    def test_delete_workout(self, client, mock_garmin):
        client.delete_workout(42)
        mock_garmin.garth.delete.assert_called_once_with(
            "connectapi", "/workout-service/workout/42", api=True,
        )


# ---------------------------------------------------------------------------
# Rate limiting
# ---------------------------------------------------------------------------


class TestRateLimit:
    @patch("garmin_client.client.time.sleep")
    def test_retries_then_succeeds(self, mock_sleep, client, mock_garmin):
        mock_garmin.upload_workout.side_effect = [_rate_limited(), {"workoutId": 3}]
        assert client.upload_workout({"workoutName": "Test"}) == 3
        mock_sleep.assert_called_once_with(2)

    @patch("garmin_client.client.time.sleep")
    def test_gives_up_after_retries(self, mock_sleep, client, mock_garmin):
        mock_garmin.upload_workout.side_effect = _rate_limited()
        with pytest.raises(GarminRateLimitError):
            client.upload_workout({"workoutName": "Test"})
        assert mock_sleep.call_args_list == [call(2), call(4), call(8)]


class TestFromGarmin:
    def test_wraps_existing_session(self, mock_garmin):
        mock_garmin.get_workouts.return_value = []
        c = GarminClient.from_garmin(mock_garmin)
        assert c.get_workouts() == []
