# hep_companion/auth/session.py
"""
Supabase session tokens.

Supabase auth issues HS256 access tokens signed with the project's JWT
secret. We verify them locally instead of calling back to the auth server
on every request.
"""

from dataclasses import dataclass

from fastapi import Request
from jose import JWTError, jwt

from hep_companion.core.config import settings
from hep_companion.core import ErrorReason
from hep_companion.core.errors import unauthorized


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str | None = None
    role: str | None = None


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    except JWTError:
        raise unauthorized("Invalid or expired token", reason=ErrorReason.AUTH_INVALID)


def user_from_token(token: str) -> AuthUser:
    payload = decode_access_token(token)
    sub = payload.get("sub")
    if not sub:
        raise unauthorized("Token has no subject", reason=ErrorReason.AUTH_INVALID)
    return AuthUser(id=str(sub), email=payload.get("email"), role=payload.get("role"))


def token_from_request(request: Request, bearer: str | None = None) -> str | None:
    """Bearer header wins; fall back to the session cookie."""
    if bearer:
        return bearer
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None
