"""Garmin Connect session handling for plan uploads.

Sessions are resumed from saved garth tokens when possible; otherwise a
fresh SSO login is performed with the supplied credentials. Migration runs
are unattended, so MFA is only supported through a ``prompt_mfa`` callback.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from garminconnect import Garmin

from garmin_client.exceptions import GarminAuthError, GarminMFARequired

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_DIR = Path("~/.garminconnect").expanduser()
_TOKEN_FILE = "oauth1_token.json"

_MFA_MARKERS = ("mfa", "verification", "two-factor")


def has_saved_tokens(token_dir: Path | str = DEFAULT_TOKEN_DIR) -> bool:
    """Return True if garth tokens have been saved under *token_dir*."""
    return (Path(token_dir) / _TOKEN_FILE).exists()


def resume_session(token_dir: Path | str = DEFAULT_TOKEN_DIR) -> Garmin:
    """Resume a session from saved tokens, without credentials.

    Raises ``GarminAuthError`` if tokens are missing or rejected.
    """
    token_dir = Path(token_dir)
    if not has_saved_tokens(token_dir):
        raise GarminAuthError(f"No saved tokens at {token_dir}")

    try:
        garmin = Garmin()
        garmin.login(tokenstore=str(token_dir))
    except Exception as exc:
        raise GarminAuthError(f"Token resume failed: {exc}") from exc
    logger.debug("Resumed Garmin session from %s", token_dir)
    return garmin


def create_session(
    email: str,
    password: str,
    token_dir: Path | str = DEFAULT_TOKEN_DIR,
    prompt_mfa: Optional[Callable[[], str]] = None,
) -> Garmin:
    """Return an authenticated Garmin session.

    Saved tokens are tried first. If they are missing or rejected, a fresh
    login is made with *email* / *password* and the new tokens are saved.

    Args:
        email: Garmin Connect account email.
        password: Garmin Connect account password.
        token_dir: Directory where garth tokens are persisted.
        prompt_mfa: Called for the verification code when the account
            has MFA enabled. Without it, MFA accounts raise
            ``GarminMFARequired``.
    """
    token_dir = Path(token_dir)
    if has_saved_tokens(token_dir):
        try:
            return resume_session(token_dir)
        except GarminAuthError:
            logger.info("Saved tokens rejected, falling back to credential login")

    if not email or not password:
        raise GarminAuthError("No saved tokens and no credentials supplied")

    try:
        garmin = Garmin(email=email, password=password, prompt_mfa=prompt_mfa)
        garmin.login()
    except Exception as exc:
        message = str(exc).lower()
        if any(marker in message for marker in _MFA_MARKERS):
            raise GarminMFARequired(str(exc)) from exc
        raise GarminAuthError(f"Login failed: {exc}") from exc

    token_dir.mkdir(parents=True, exist_ok=True)
    garmin.garth.dump(str(token_dir))
    logger.info("Logged in to Garmin Connect, tokens saved to %s", token_dir)
    return garmin
