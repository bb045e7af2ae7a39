from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr


class SignupRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class UserAccount(BaseModel):
    """Stored account, including the credential hash. Never returned as-is."""
    id: int
    name: str
    email: str
    password_hash: str
    points: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None


class PublicUser(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_account(cls, account: UserAccount) -> "PublicUser":
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class AuthResponse(BaseModel):
    message: str
    user: PublicUser
    token: str


class MeResponse(BaseModel):
    user: PublicUser


class MessageResponse(BaseModel):
    message: str
