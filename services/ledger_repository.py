# services/ledger_repository.py
"""
Storage access for the emissions ledger.

``LedgerRepository`` is the contract the services depend on;
``PostgresLedgerRepository`` implements it with asyncpg on top of
services.db_service. Methods that take part in the record-activity write
accept an optional ``conn`` so the caller can run them in one transaction.
"""

from __future__ import annotations

from contextlib import asynccontextmanager, contextmanager
from datetime import datetime
from typing import Any, AsyncContextManager, Dict, Iterator, List, Optional, Protocol, Sequence

import asyncpg

from app.core.errors import Conflict, DependencyFailure, NotFound
from app.core.logging import get_logger
from app.models.activities import ActivityEntry
from app.models.auth import UserAccount
from app.models.rewards import Badge
from services.db_service import (
    fetch,
    fetch_with_conn,
    fetchrow,
    fetchrow_with_conn,
    run_in_transaction,
)

logger = get_logger()


class LedgerRepository(Protocol):
    def transaction(self) -> AsyncContextManager[Any]: ...

    async def fetch_emission_factors(
        self, activity_types: Optional[Sequence[str]] = None, conn: Any = None
    ) -> Dict[str, float]: ...

    async def insert_activity(
        self,
        owner_id: int,
        activity_type: str,
        quantity: float,
        emission_amount: float,
        occurred_at: datetime,
        conn: Any = None,
    ) -> ActivityEntry: ...

    async def list_activities(self, owner_id: int) -> List[ActivityEntry]: ...

    async def fetch_activity(self, activity_id: int) -> Optional[ActivityEntry]: ...

    async def delete_activity(self, activity_id: int, owner_id: int) -> bool: ...

    async def add_points(self, owner_id: int, amount: int, conn: Any = None) -> Optional[int]: ...

    async def fetch_user(self, user_id: int) -> Optional[UserAccount]: ...

    async def fetch_user_by_email(self, email: str) -> Optional[UserAccount]: ...

    async def insert_user(self, name: str, email: str, password_hash: str) -> UserAccount: ...

    async def list_badges(self, owner_id: int) -> List[Badge]: ...


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
        logger.error("ledger_storage_error", operation=operation, error=str(exc))
        raise DependencyFailure(f"Storage unavailable during {operation}") from exc


def _to_entry(row: Any) -> ActivityEntry:
    return ActivityEntry(
        id=int(row["id"]),
        owner_id=int(row["user_id"]),
        type=row["type"],
        quantity=float(row["quantity"]),
        emission_amount=float(row["emission_amount"]),
        occurred_at=row["occurred_at"],
    )


def _to_user(row: Any) -> UserAccount:
    return UserAccount(
        id=int(row["id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        points=int(row.get("points", 0) or 0),
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
    )


_ACTIVITY_COLUMNS = "id, user_id, type, quantity, emission_amount, occurred_at"
_USER_COLUMNS = "id, name, email, password_hash, points, created_at, updated_at"

# activities.id is BIGSERIAL; larger ids cannot exist and asyncpg refuses to encode them.
MAX_ACTIVITY_ID = 2**63 - 1


class PostgresLedgerRepository:
    """asyncpg-backed ledger storage."""

    @asynccontextmanager
    async def transaction(self):
        with _storage_errors("transaction"):
            async with run_in_transaction() as conn:
                yield conn

    async def fetch_emission_factors(
        self,
        activity_types: Optional[Sequence[str]] = None,
        conn: Optional[asyncpg.Connection] = None,
    ) -> Dict[str, float]:
        sql = """
            SELECT type, factor
            FROM emission_factors
            WHERE ($1::text[] IS NULL OR type = ANY($1::text[]))
        """
        types = list(activity_types) if activity_types is not None else None
        with _storage_errors("fetch_emission_factors"):
            if conn is not None:
                rows = await fetch_with_conn(conn, sql, types)
            else:
                rows = await fetch(sql, types)
        return {row["type"]: float(row["factor"]) for row in rows}

    async def insert_activity(
        self,
        owner_id: int,
        activity_type: str,
        quantity: float,
        emission_amount: float,
        occurred_at: datetime,
        conn: Optional[asyncpg.Connection] = None,
    ) -> ActivityEntry:
        sql = f"""
            INSERT INTO activities (user_id, type, quantity, emission_amount, occurred_at)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {_ACTIVITY_COLUMNS}
        """
        args = (owner_id, activity_type, quantity, emission_amount, occurred_at)
        with _storage_errors("insert_activity"):
            try:
                if conn is not None:
                    row = await fetchrow_with_conn(conn, sql, *args)
                else:
                    row = await fetchrow(sql, *args)
            except asyncpg.ForeignKeyViolationError as exc:
                raise NotFound("User not found") from exc
        if row is None:
            raise DependencyFailure("Activity insert returned no row")
        return _to_entry(row)

    async def list_activities(self, owner_id: int) -> List[ActivityEntry]:
        sql = f"""
            SELECT {_ACTIVITY_COLUMNS}
            FROM activities
            WHERE user_id = $1
            ORDER BY occurred_at DESC, id DESC
        """
        with _storage_errors("list_activities"):
            rows = await fetch(sql, owner_id)
        return [_to_entry(row) for row in rows]

    async def fetch_activity(self, activity_id: int) -> Optional[ActivityEntry]:
        if not 0 < activity_id <= MAX_ACTIVITY_ID:
            return None
        sql = f"""
            SELECT {_ACTIVITY_COLUMNS}
            FROM activities
            WHERE id = $1
        """
        with _storage_errors("fetch_activity"):
            row = await fetchrow(sql, activity_id)
        return _to_entry(row) if row else None

    async def delete_activity(self, activity_id: int, owner_id: int) -> bool:
        if not 0 < activity_id <= MAX_ACTIVITY_ID:
            return False
        sql = """
            DELETE FROM activities
            WHERE id = $1 AND user_id = $2
            RETURNING id
        """
        with _storage_errors("delete_activity"):
            row = await fetchrow(sql, activity_id, owner_id)
        return row is not None

    async def add_points(
        self,
        owner_id: int,
        amount: int,
        conn: Optional[asyncpg.Connection] = None,
    ) -> Optional[int]:
        # Single-statement increment; concurrent writers never lose updates.
        sql = """
            UPDATE users
            SET points = points + $1,
                updated_at = now()
            WHERE id = $2
            RETURNING points
        """
        with _storage_errors("add_points"):
            if conn is not None:
                row = await fetchrow_with_conn(conn, sql, amount, owner_id)
            else:
                row = await fetchrow(sql, amount, owner_id)
        return int(row["points"]) if row else None

    async def fetch_user(self, user_id: int) -> Optional[UserAccount]:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE id = $1"
        with _storage_errors("fetch_user"):
            row = await fetchrow(sql, user_id)
        return _to_user(row) if row else None

    async def fetch_user_by_email(self, email: str) -> Optional[UserAccount]:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE lower(email) = lower($1)"
        with _storage_errors("fetch_user_by_email"):
            row = await fetchrow(sql, email)
        return _to_user(row) if row else None

    async def insert_user(self, name: str, email: str, password_hash: str) -> UserAccount:
        sql = f"""
            INSERT INTO users (name, email, password_hash, points, created_at, updated_at)
            VALUES ($1, lower($2), $3, 0, now(), now())
            RETURNING {_USER_COLUMNS}
        """
        with _storage_errors("insert_user"):
            try:
                row = await fetchrow(sql, name, email, password_hash)
            except asyncpg.UniqueViolationError as exc:
                raise Conflict("Email already in use") from exc
        if row is None:
            raise DependencyFailure("User insert returned no row")
        return _to_user(row)

    async def list_badges(self, owner_id: int) -> List[Badge]:
        sql = """
            SELECT id, user_id, name, icon
            FROM badges
            WHERE user_id = $1
            ORDER BY id ASC
        """
        with _storage_errors("list_badges"):
            rows = await fetch(sql, owner_id)
        return [
            Badge(id=int(row["id"]), owner_id=int(row["user_id"]), name=row["name"], icon=row.get("icon"))
            for row in rows
        ]
