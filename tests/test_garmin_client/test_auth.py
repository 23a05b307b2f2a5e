"""Tests for garmin_client.auth — mock-based, no real network calls."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from garmin_client.auth import create_session, has_saved_tokens, resume_session
from garmin_client.exceptions import GarminAuthError, GarminMFARequired


@pytest.fixture
def tmp_token_dir(tmp_path):
    """Provide a temporary directory for token storage."""
    return tmp_path / "tokens"


def _seed_tokens(token_dir: Path) -> None:
    """Create a fake oauth1_token.json so auth code detects existing tokens."""
    token_dir.mkdir(parents=True, exist_ok=True)
    (token_dir / "oauth1_token.json").write_text("{}")


class TestHasSavedTokens:
    def test_false_when_missing(self, tmp_token_dir):
        assert not has_saved_tokens(tmp_token_dir)

    def test_true_when_seeded(self, tmp_token_dir):
        _seed_tokens(tmp_token_dir)
        assert has_saved_tokens(tmp_token_dir)


# ---------------------------------------------------------------------------
# resume_session
# ---------------------------------------------------------------------------


class TestResumeSession:
    def test_raises_when_no_tokens(self, tmp_token_dir):
        with pytest.raises(GarminAuthError, match="No saved tokens"):
            resume_session(tmp_token_dir)

    @patch("garmin_client.auth.Garmin")
    def test_resumes_with_tokens(self, MockGarmin, tmp_token_dir):
        _seed_tokens(tmp_token_dir)
        mock_instance = MagicMock()
        MockGarmin.return_value = mock_instance

        assert resume_session(tmp_token_dir) is mock_instance
        mock_instance.login.assert_called_once_with(tokenstore=str(tmp_token_dir))

    @patch("garmin_client.auth.Garmin")
    def test_raises_on_load_failure(self, MockGarmin, tmp_token_dir):
        _seed_tokens(tmp_token_dir)
        MockGarmin.return_value.login.side_effect = Exception("corrupt")

        with pytest.raises(GarminAuthError, match="Token resume failed"):
            resume_session(tmp_token_dir)


# ---------------------------------------------------------------------------
# create_session
# ---------------------------------------------------------------------------


class TestCreateSession:
    @patch("garmin_client.auth.Garmin")
    def test_prefers_saved_tokens(self, MockGarmin, tmp_token_dir):
        _seed_tokens(tmp_token_dir)
        mock_instance = MagicMock()
        MockGarmin.return_value = mock_instance

        assert create_session("a@b.com", "pw", token_dir=tmp_token_dir) is mock_instance
        MockGarmin.assert_called_once_with()

    def test_no_tokens_no_credentials(self, tmp_token_dir):
        with pytest.raises(GarminAuthError, match="no credentials"):
            create_session("", "", token_dir=tmp_token_dir)

    @patch("garmin_client.auth.Garmin")
    def test_credential_login_saves_tokens(self, MockGarmin, tmp_token_dir):
        mock_instance = MagicMock()
        MockGarmin.return_value = mock_instance

        result = create_session("a@b.com", "pw", token_dir=tmp_token_dir)

        assert result is mock_instance
        MockGarmin.assert_called_once_with(email="a@b.com", password="pw", prompt_mfa=None)
        mock_instance.login.assert_called_once_with()
        mock_instance.garth.dump.assert_called_once_with(str(tmp_token_dir))
        assert tmp_token_dir.is_dir()

    @patch("garmin_client.auth.Garmin")
    def test_falls_back_when_tokens_rejected(self, MockGarmin, tmp_token_dir):
        _seed_tokens(tmp_token_dir)
        stale, fresh = MagicMock(), MagicMock()
        stale.login.side_effect = Exception("expired")
        MockGarmin.side_effect = [stale, fresh]

        assert create_session("a@b.com", "pw", token_dir=tmp_token_dir) is fresh

    @patch("garmin_client.auth.Garmin")
    def test_mfa_required(self, MockGarmin, tmp_token_dir):
        MockGarmin.return_value.login.side_effect = Exception("MFA code required")
        with pytest.raises(GarminMFARequired):
            create_session("a@b.com", "pw", token_dir=tmp_token_dir)

    @patch("garmin_client.auth.Garmin")
    def test_bad_credentials(self, MockGarmin, tmp_token_dir):
        MockGarmin.return_value.login.side_effect = Exception("401 Unauthorized")
        with pytest.raises(GarminAuthError, match="Login failed"):
            create_session("a@b.com", "pw", token_dir=tmp_token_dir)
