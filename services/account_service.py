# services/account_service.py
"""
Account signup, login and lookup.

Passwords are hashed with bcrypt; tokens come from the TokenAuthenticator
at the transport boundary. Nothing in the ledger or rewards code depends
on this module.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

import bcrypt

from app.core.errors import AuthError, Conflict, NotFound, ValidationError
from app.core.logging import get_logger
from app.deps.auth import TokenAuthenticator, get_authenticator
from app.models.auth import PublicUser, UserAccount
from services.ledger_repository import LedgerRepository, PostgresLedgerRepository

logger = get_logger()

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def missing_fields(values: dict, fields: List[str]) -> List[str]:
    return [field for field in fields if not values.get(field)]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


class AccountService:
    def __init__(self, repository: LedgerRepository, authenticator: Optional[TokenAuthenticator] = None):
        self._repository = repository
        self._authenticator = authenticator

    @property
    def authenticator(self) -> TokenAuthenticator:
        return self._authenticator or get_authenticator()

    async def signup(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> Tuple[PublicUser, str]:
        missing = missing_fields(
            {"name": name, "email": email, "password": password},
            ["name", "email", "password"],
        )
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        normalized_email = email.strip().lower()
        if await self._repository.fetch_user_by_email(normalized_email):
            raise Conflict("Email already in use")

        account = await self._repository.insert_user(name, normalized_email, hash_password(password))
        logger.info("user_signed_up", user_id=account.id)

        token = self.authenticator.issue(account.id, account.email)
        return PublicUser.from_account(account), token

    async def login(self, email: Optional[str], password: Optional[str]) -> Tuple[PublicUser, str]:
        missing = missing_fields({"email": email, "password": password}, ["email", "password"])
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        account = await self._repository.fetch_user_by_email(email.strip().lower())
        if account is None or not verify_password(password, account.password_hash):
            logger.info("user_login_failed")
            raise AuthError("Invalid credentials")

        logger.info("user_logged_in", user_id=account.id)
        token = self.authenticator.issue(account.id, account.email)
        return PublicUser.from_account(account), token

    async def get_account(self, user_id: int) -> UserAccount:
        account = await self._repository.fetch_user(user_id)
        if account is None:
            raise NotFound("User not found")
        return account


_account_service: Optional[AccountService] = None


def get_account_service() -> AccountService:
    global _account_service
    if _account_service is None:
        _account_service = AccountService(PostgresLedgerRepository())
    return _account_service
