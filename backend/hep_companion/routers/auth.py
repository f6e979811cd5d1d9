"""
auth.py
- Purpose: Supabase auth callback. Exchanges the one-time code for a session,
  stores it in cookies and sends the user on (or to onboarding).
"""

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from hep_companion.api.deps import get_supabase
from hep_companion.core import AppError
from hep_companion.core.config import settings
from hep_companion.services.auth_service import AuthService, SessionTokens

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(client=Depends(get_supabase)) -> AuthService:
    return AuthService(client)


def _safe_redirect_path(path: str | None) -> str:
    # Only same-site relative paths
    if not path or not path.startswith("/") or path.startswith("//"):
        return "/"
    return path


def _redirect(path: str) -> RedirectResponse:
    return RedirectResponse(url=f"{settings.SITE_URL.rstrip('/')}{path}", status_code=302)


def _set_session_cookies(resp: RedirectResponse, tokens: SessionTokens) -> None:
    secure = settings.env != "local"
    resp.set_cookie(
        settings.SESSION_COOKIE_NAME,
        tokens.access_token,
        max_age=tokens.expires_in,
        httponly=True,
        secure=secure,
        samesite="lax",
    )
    if tokens.refresh_token:
        resp.set_cookie(
            settings.SESSION_REFRESH_COOKIE_NAME,
            tokens.refresh_token,
            httponly=True,
            secure=secure,
            samesite="lax",
        )


@router.get("/callback")
def auth_callback(
    code: str | None = None,
    redirectUrl: str | None = None,
    svc: AuthService = Depends(get_auth_service),
):
    if not code:
        return _redirect("/auth/login?error=no_code_provided")

    try:
        tokens = svc.exchange_code(code)
    except AppError:
        return _redirect("/auth/login?error=session_exchange_failed")

    target = "/onboarding" if svc.needs_onboarding(tokens.user_id) else _safe_redirect_path(redirectUrl)
    resp = _redirect(target)
    _set_session_cookies(resp, tokens)
    return resp
