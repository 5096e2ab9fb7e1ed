from typing import Optional
from pydantic import BaseModel


class GoogleAuthPayload(BaseModel):
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    expires_at: int  # Unix timestamp
    user_id: str
    onboarded: bool
    is_admin: bool
