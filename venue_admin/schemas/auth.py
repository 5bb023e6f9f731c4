"""
Authentication schemas
"""

from typing import Optional
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)
    firebase_token: Optional[str] = Field(None, alias="firebaseToken")

    model_config = {"populate_by_name": True}


class SessionUser(BaseModel):
    """Claims carried by a session token"""
    id: str
    email: str
    name: str
    role: str
    firebase_id: Optional[str] = None
    image: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: SessionUser
