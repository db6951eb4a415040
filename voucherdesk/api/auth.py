"""
voucherdesk/api/auth.py

Purpose: Login session endpoints

- check-session: returns the caller's identity (logs in via bearer token)
- logout: destroys the session and clears the cookie
"""

from fastapi import APIRouter, Request, Response

from voucherdesk.core.config import settings
from voucherdesk.core.logging import get_logger
from voucherdesk.schemas.auth import SessionResponse
from voucherdesk.schemas.response import MessageResponse
from voucherdesk.services import identity_service, session_service
from voucherdesk.services.identity_service import AuthContext
from voucherdesk.utils.constants import MSG_LOGGED_OUT, MSG_SESSION_ACTIVE

logger = get_logger(__name__)
router = APIRouter()


async def authenticate(request: Request) -> AuthContext:
    """
    Resolves the caller, recording a fresh login for the session cookie.

    Raises:
        AuthenticationError: If neither a session nor a valid bearer token is present
    """
    ctx = await identity_service.resolve_identity(
        request.cookies.get(settings.SESSION_COOKIE_NAME),
        request.headers.get("Authorization"),
    )

    if ctx.is_new_session:
        # cookie is attached by the session middleware, error responses included
        request.state.new_session_id = ctx.session_id

    return ctx


def set_session_cookie(response: Response, session_id: str):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        max_age=settings.SESSION_TIMEOUT_MINUTES * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="none" if settings.session_cookie_secure else "lax",
    )


@router.get("/check-session", response_model=SessionResponse)
async def check_session(request: Request):
    """
    Returns the signed-in user's profile.
    """
    ctx = await authenticate(request)
    return SessionResponse(
        email=ctx.identity.email,
        name=ctx.identity.name,
        picture=ctx.identity.picture,
        message=MSG_SESSION_ACTIVE,
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, response: Response):
    """
    Ends the current session.
    """
    await session_service.delete_session(request.cookies.get(settings.SESSION_COOKIE_NAME))
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return MessageResponse(message=MSG_LOGGED_OUT)
