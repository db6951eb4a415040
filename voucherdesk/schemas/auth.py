from pydantic import BaseModel, Field
from typing import Optional


class UserIdentity(BaseModel):
    """Verified identity returned by the Google userinfo endpoint."""

    email: str = Field(..., description="Verified email, used as the voucher owner")
    name: Optional[str] = None
    picture: Optional[str] = None


class SessionResponse(UserIdentity):
    message: str
