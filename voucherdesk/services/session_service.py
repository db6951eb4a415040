"""
voucherdesk/services/session_service.py

Purpose: Login session storage

- Creates a session after a successful token exchange
- Looks up unexpired sessions by cookie token
- Destroys sessions on logout

Expired sessions are filtered on read and removed by the TTL index.
"""

import secrets
from datetime import datetime, timedelta
from typing import Optional, Dict, Any

from voucherdesk.db.mongo import get_sessions_collection
from voucherdesk.core.config import settings
from voucherdesk.core.logging import get_logger, LogContext
from voucherdesk.schemas.auth import UserIdentity

logger = get_logger(__name__)


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


async def create_session(identity: UserIdentity, access_token: Optional[str]) -> str:
    """
    Stores a verified identity under a fresh session token.

    Args:
        identity: Identity returned by the provider
        access_token: Bearer token that was exchanged, kept for Google API calls

    Returns:
        The session token to send back as a cookie
    """
    with LogContext(user_id=identity.email):
        sessions = get_sessions_collection()
        now = datetime.utcnow()
        session_id = new_session_id()

        await sessions.insert_one({
            "session_id": session_id,
            "email": identity.email,
            "name": identity.name,
            "picture": identity.picture,
            "access_token": access_token,
            "created_at": now,
            "expires_at": now + timedelta(minutes=settings.SESSION_TIMEOUT_MINUTES),
        })

        logger.info("Session created")
        return session_id


async def get_session(session_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Retrieves an unexpired session.

    Args:
        session_id: Cookie token (may be None)

    Returns:
        Session document or None
    """
    if not session_id:
        return None

    sessions = get_sessions_collection()
    return await sessions.find_one({
        "session_id": session_id,
        "expires_at": {"$gt": datetime.utcnow()},
    })


async def update_access_token(session_id: str, access_token: str) -> None:
    """Keeps the stored Google token current when the client sends a newer one."""
    sessions = get_sessions_collection()
    await sessions.update_one(
        {"session_id": session_id},
        {"$set": {"access_token": access_token}},
    )


async def delete_session(session_id: Optional[str]) -> bool:
    """
    Destroys a session (logout).

    Returns:
        True if a session was removed
    """
    if not session_id:
        return False

    sessions = get_sessions_collection()
    result = await sessions.delete_one({"session_id": session_id})

    success = result.deleted_count > 0
    if success:
        logger.info("Session destroyed")

    return success


def identity_from_session(session: Dict[str, Any]) -> UserIdentity:
    return UserIdentity(
        email=session["email"],
        name=session.get("name"),
        picture=session.get("picture"),
    )
