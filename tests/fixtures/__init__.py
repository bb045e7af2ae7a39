# tests/fixtures/__init__.py
"""
Test fixtures for the ledger, rewards and account tests.

- InMemoryLedgerRepository: dict-backed LedgerRepository with transactional
  rollback, so services can be exercised without PostgreSQL.
- make_user() / make_badge(): factory helpers.
"""

from __future__ import annotations

import copy
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from app.core.errors import Conflict, DependencyFailure, NotFound
from app.models.activities import ActivityEntry
from app.models.auth import UserAccount
from app.models.rewards import Badge


class InMemoryLedgerRepository:
    def __init__(self, emission_factors: Optional[Dict[str, float]] = None):
        self.users: Dict[int, UserAccount] = {}
        self.activities: Dict[int, ActivityEntry] = {}
        self.badges: List[Badge] = []
        self.emission_factors: Dict[str, float] = dict(emission_factors or {})
        self.fail_add_points = False
        self.fail_all = False
        self._next_user_id = 1
        self._next_activity_id = 1
        self._next_badge_id = 1

    def _check_available(self) -> None:
        if self.fail_all:
            raise DependencyFailure("Storage unavailable")

    @asynccontextmanager
    async def transaction(self):
        self._check_available()
        snapshot = (
            copy.deepcopy(self.users),
            dict(self.activities),
            self._next_activity_id,
        )
        try:
            yield self
        except Exception:
            self.users, self.activities, self._next_activity_id = snapshot
            raise

    async def fetch_emission_factors(
        self, activity_types: Optional[Sequence[str]] = None, conn: Any = None
    ) -> Dict[str, float]:
        self._check_available()
        if activity_types is None:
            return dict(self.emission_factors)
        return {t: f for t, f in self.emission_factors.items() if t in activity_types}

    async def insert_activity(
        self,
        owner_id: int,
        activity_type: str,
        quantity: float,
        emission_amount: float,
        occurred_at: datetime,
        conn: Any = None,
    ) -> ActivityEntry:
        self._check_available()
        # activities.user_id references users.id
        if owner_id not in self.users:
            raise NotFound("User not found")
        entry = ActivityEntry(
            id=self._next_activity_id,
            owner_id=owner_id,
            type=activity_type,
            quantity=quantity,
            emission_amount=emission_amount,
            occurred_at=occurred_at,
        )
        self.activities[entry.id] = entry
        self._next_activity_id += 1
        return entry

    async def list_activities(self, owner_id: int) -> List[ActivityEntry]:
        self._check_available()
        owned = [e for e in self.activities.values() if e.owner_id == owner_id]
        return sorted(owned, key=lambda e: (e.occurred_at, e.id), reverse=True)

    async def fetch_activity(self, activity_id: int) -> Optional[ActivityEntry]:
        self._check_available()
        return self.activities.get(activity_id)

    async def delete_activity(self, activity_id: int, owner_id: int) -> bool:
        self._check_available()
        entry = self.activities.get(activity_id)
        if entry is None or entry.owner_id != owner_id:
            return False
        del self.activities[activity_id]
        return True

    async def add_points(self, owner_id: int, amount: int, conn: Any = None) -> Optional[int]:
        self._check_available()
        if self.fail_add_points:
            raise DependencyFailure("Storage unavailable during add_points")
        user = self.users.get(owner_id)
        if user is None:
            return None
        user.points += amount
        return user.points

    async def fetch_user(self, user_id: int) -> Optional[UserAccount]:
        self._check_available()
        return self.users.get(user_id)

    async def fetch_user_by_email(self, email: str) -> Optional[UserAccount]:
        self._check_available()
        for user in self.users.values():
            if user.email == email.lower():
                return user
        return None

    async def insert_user(self, name: str, email: str, password_hash: str) -> UserAccount:
        self._check_available()
        if await self.fetch_user_by_email(email):
            raise Conflict("Email already in use")
        now = datetime.now(timezone.utc)
        user = UserAccount(
            id=self._next_user_id,
            name=name,
            email=email.lower(),
            password_hash=password_hash,
            points=0,
            created_at=now,
            updated_at=now,
        )
        self.users[user.id] = user
        self._next_user_id += 1
        return user

    async def list_badges(self, owner_id: int) -> List[Badge]:
        self._check_available()
        return [b for b in self.badges if b.owner_id == owner_id]

    # -- test helpers --------------------------------------------------

    def add_user(self, name: str = "Test User", email: Optional[str] = None, points: int = 0) -> UserAccount:
        user_id = self._next_user_id
        user = make_user(user_id=user_id, name=name, email=email or f"user{user_id}@example.com", points=points)
        self.users[user.id] = user
        self._next_user_id += 1
        return user

    def add_badge(self, owner_id: int, name: str = "Eco Starter", icon: Optional[str] = "leaf") -> Badge:
        badge = make_badge(badge_id=self._next_badge_id, owner_id=owner_id, name=name, icon=icon)
        self.badges.append(badge)
        self._next_badge_id += 1
        return badge


def make_user(
    user_id: int = 1,
    name: str = "Test User",
    email: str = "test@example.com",
    password_hash: str = "not-a-real-hash",
    points: int = 0,
) -> UserAccount:
    """Factory function to create a test account."""
    now = datetime.now(timezone.utc)
    return UserAccount(
        id=user_id,
        name=name,
        email=email.lower(),
        password_hash=password_hash,
        points=points,
        created_at=now,
        updated_at=now,
    )


def make_badge(
    badge_id: int = 1,
    owner_id: int = 1,
    name: str = "Eco Starter",
    icon: Optional[str] = "leaf",
) -> Badge:
    """Factory function to create a test badge."""
    return Badge(id=badge_id, owner_id=owner_id, name=name, icon=icon)
