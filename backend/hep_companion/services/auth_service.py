"""
auth_service.py
- Purpose: Complete the Supabase OAuth / magic-link flow on the server.
- Owns: code -> session exchange, onboarding check.
"""

import logging
from dataclasses import dataclass

from hep_companion.core import AppError, ErrorCode, ErrorReason
from hep_companion.core.config import settings
from hep_companion.repos.profile.read import ProfileReadRepo

logger = logging.getLogger("hep_companion.auth_service")


@dataclass(frozen=True)
class SessionTokens:
    user_id: str
    access_token: str
    refresh_token: str | None
    expires_in: int | None


def _auth_client():
    from supabase import create_client  # type: ignore

    key = settings.SUPABASE_ANON_KEY or settings.SUPABASE_SERVICE_ROLE_KEY
    return create_client(settings.SUPABASE_URL, key)


class AuthService:
    def __init__(self, client, auth_client=None):
        self.profile_read = ProfileReadRepo(client)
        self._auth_client = auth_client

    def exchange_code(self, code: str) -> SessionTokens:
        auth_client = self._auth_client or _auth_client()
        try:
            res = auth_client.auth.exchange_code_for_session({"auth_code": code})
        except Exception as e:
            logger.warning("session_exchange_failed", extra={"error": str(e)})
            raise AppError(
                code=ErrorCode.UNAUTHORIZED,
                reason=ErrorReason.AUTH_INVALID,
                status_code=401,
                message="Failed to exchange code for session",
            ) from e

        session = getattr(res, "session", None)
        if session is None or not getattr(session, "access_token", None):
            raise AppError(
                code=ErrorCode.UNAUTHORIZED,
                reason=ErrorReason.AUTH_INVALID,
                status_code=401,
                message="No session returned for code",
            )

        return SessionTokens(
            user_id=str(session.user.id),
            access_token=session.access_token,
            refresh_token=getattr(session, "refresh_token", None),
            expires_in=getattr(session, "expires_in", None),
        )

    def needs_onboarding(self, user_id: str) -> bool:
        try:
            profile = self.profile_read.get_by_user_id(user_id)
        except AppError:
            # Unknown profile state: send the user through onboarding
            logger.exception("profile_lookup_failed", extra={"user_id": user_id})
            return True
        return not profile or profile.get("onboarding_completed") is not True
