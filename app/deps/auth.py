# app/deps/auth.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt  # type: ignore
from fastapi import Header, HTTPException

from app.config import require_jwt_secret, settings
from app.core.errors import AuthError
from app.core.logging import logger

__all__ = ["User", "TokenAuthenticator", "get_authenticator", "get_current_user"]


class User:
    """Authenticated user, as seen by the ledger."""
    def __init__(self, user_id: int, email: Optional[str] = None):
        self.user_id = user_id
        self.email = email


class TokenAuthenticator:
    """
    Issues and verifies signed bearer tokens. ``sub`` carries the user id.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expiry_minutes: Optional[int] = None,
    ):
        self._secret = secret
        self._algorithm = algorithm or settings.JWT_ALGORITHM
        self._expiry = timedelta(minutes=expiry_minutes or settings.JWT_EXPIRY_MINUTES)

    @property
    def secret(self) -> str:
        return self._secret or require_jwt_secret()

    def issue(self, user_id: int, email: Optional[str] = None) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": now,
            "exp": now + self._expiry,
        }
        return jwt.encode(payload, self.secret, algorithm=self._algorithm)

    def verify(self, token: str) -> User:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError as exc:  # type: ignore[attr-defined]
            logger.debug("user_auth_token_expired")
            raise AuthError("Invalid or expired token") from exc
        except jwt.PyJWTError as exc:  # type: ignore[attr-defined]
            logger.debug("user_auth_token_invalid", error=str(exc))
            raise AuthError("Invalid or expired token") from exc

        sub = payload.get("sub") if isinstance(payload, dict) else None
        try:
            user_id = int(sub)
        except (TypeError, ValueError):
            logger.debug("user_auth_invalid_sub", sub=sub)
            raise AuthError("Invalid or expired token")

        return User(user_id=user_id, email=payload.get("email"))


_authenticator: Optional[TokenAuthenticator] = None


def get_authenticator() -> TokenAuthenticator:
    global _authenticator
    if _authenticator is None:
        _authenticator = TokenAuthenticator()
    return _authenticator


def extract_user_from_token(authorization: Optional[str]) -> Optional[User]:
    """
    Bearer header -> User, or None when missing/invalid.
    """
    if not authorization or not str(authorization).startswith("Bearer "):
        return None

    token_only = str(authorization).split(" ", 1)[1].strip()
    try:
        return get_authenticator().verify(token_only)
    except AuthError:
        return None


async def get_current_user(authorization: Optional[str] = Header(None)) -> User:
    """
    Required auth dependency - raises 401 if not authenticated.
    """
    if not authorization or not str(authorization).startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Authentication token missing")

    user = extract_user_from_token(authorization)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return user
