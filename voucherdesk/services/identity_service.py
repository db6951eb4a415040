"""
voucherdesk/services/identity_service.py

Purpose: Caller identity resolution

- Fast path: identity cached in an unexpired session
- Otherwise exchanges a bearer token with the Google userinfo endpoint
- First successful exchange establishes a session (login)
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from voucherdesk.core.config import settings
from voucherdesk.core.exceptions import AuthenticationError
from voucherdesk.core.logging import get_logger
from voucherdesk.schemas.auth import UserIdentity
from voucherdesk.services import session_service
from voucherdesk.utils.validation_utils import parse_bearer_token

logger = get_logger(__name__)


@dataclass
class AuthContext:
    """Resolved caller: who they are and how to act on their behalf."""

    identity: UserIdentity
    access_token: Optional[str]
    session_id: str
    is_new_session: bool = False


# Shared HTTP client for userinfo lookups
_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(timeout=settings.GOOGLE_HTTP_TIMEOUT_SECONDS)
    return _http_client


async def close_http_client():
    """Close the userinfo HTTP client (application shutdown)."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


async def fetch_google_userinfo(access_token: str) -> UserIdentity:
    """
    Exchanges a bearer token for the user's profile.

    Args:
        access_token: Google OAuth access token

    Returns:
        Verified identity

    Raises:
        AuthenticationError: If the provider rejects the token or cannot be reached
    """
    client = get_http_client()

    try:
        response = await client.get(
            settings.GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
    except httpx.TimeoutException:
        logger.error("Userinfo endpoint timed out")
        raise AuthenticationError("Identity provider timed out")
    except httpx.RequestError as e:
        logger.error(f"Network error calling userinfo endpoint: {e}")
        raise AuthenticationError("Unable to reach identity provider")

    if response.status_code != 200:
        logger.warning(f"Userinfo rejected token: {response.status_code}")
        raise AuthenticationError("Invalid or expired access token")

    data = response.json()
    if not data.get("email"):
        logger.warning("Userinfo response carried no email")
        raise AuthenticationError("Access token lacks the email scope")

    return UserIdentity(
        email=data["email"],
        name=data.get("name"),
        picture=data.get("picture"),
    )


async def resolve_identity(session_id: Optional[str], authorization: Optional[str]) -> AuthContext:
    """
    Resolves the caller from a session cookie or a bearer header.

    Args:
        session_id: Session cookie value, if any
        authorization: Raw Authorization header, if any

    Returns:
        AuthContext; `is_new_session` is set when a login just happened

    Raises:
        AuthenticationError: If neither credential is usable
    """
    bearer = parse_bearer_token(authorization)

    session = await session_service.get_session(session_id)
    if session:
        identity = session_service.identity_from_session(session)
        access_token = session.get("access_token")
        if bearer and bearer != access_token:
            # a replacement token must belong to the session's user
            presented = await fetch_google_userinfo(bearer)
            if presented.email != identity.email:
                logger.warning(f"Bearer for {presented.email} rejected on session of {identity.email}")
                raise AuthenticationError("Access token does not match the signed-in user")
            await session_service.update_access_token(session["session_id"], bearer)
            access_token = bearer
        return AuthContext(
            identity=identity,
            access_token=access_token,
            session_id=session["session_id"],
        )

    if not bearer:
        raise AuthenticationError("No authorization token provided")

    identity = await fetch_google_userinfo(bearer)
    new_session_id = await session_service.create_session(identity, bearer)
    logger.info(f"User signed in: {identity.email}")

    return AuthContext(
        identity=identity,
        access_token=bearer,
        session_id=new_session_id,
        is_new_session=True,
    )
