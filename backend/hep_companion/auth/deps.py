# hep_companion/auth/deps.py
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from hep_companion.auth.session import AuthUser, token_from_request, user_from_token
from hep_companion.core.errors import unauthorized
from hep_companion.core.request_context import set_context

bearer = HTTPBearer(auto_error=False)

async def require_user(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> AuthUser:
    header_token = None
    if creds and creds.scheme.lower() == "bearer" and creds.credentials:
        header_token = creds.credentials

    token = token_from_request(request, header_token)
    if not token:
        raise unauthorized("Authentication required")

    user = user_from_token(token)
    set_context(user_id=user.id)
    return user
