"""
User Models
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import uuid


class User(BaseModel):
    """User record owned by the identity provider"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    email: str
    password_hash: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    last_login: datetime = Field(default_factory=datetime.utcnow)

    def public(self) -> dict:
        """Identity handle exposed to clients"""
        return {"id": self.id, "email": self.email}


class Session(BaseModel):
    """Provider-side login session, referenced by the token's sid claim"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


class SignupRequest(BaseModel):
    """Request for email/password signup"""
    email: str
    password: str
    confirm_password: Optional[str] = None


class LoginRequest(BaseModel):
    """Request for email/password login"""
    email: str
    password: str


class AuthResponse(BaseModel):
    """Response for authentication endpoints"""
    access_token: str
    token_type: str = "bearer"
    user: dict
