# services/activity_ledger_service.py
"""
Activity ledger: record, list and delete a user's emission entries.

Recording an activity resolves the emission factor at write time, stores
quantity * factor on the row and awards reward points. The insert and the
point increment share one storage transaction, so an entry never exists
without its points and vice versa.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, List, Optional

from app.core.errors import Forbidden, NotFound, ValidationError
from app.core.logging import get_logger
from app.models.activities import ActivityEntry, ActivitySummary, EmissionFactor
from services.emission_factor_service import FactorResolver, compute_emission, summarize_emissions
from services.ledger_repository import LedgerRepository, PostgresLedgerRepository
from services.reward_service import RewardsService

logger = get_logger()


def parse_quantity(value: Any) -> float:
    """
    Validate a reported quantity.

    Accepts ints, floats and numeric strings. Rejects missing values,
    booleans, NaN/infinity and negative amounts.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError("quantity is required and must be a number")

    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError("quantity is required and must be a number")

    try:
        quantity = float(value)
    except (TypeError, ValueError):
        raise ValidationError("quantity must be a number")

    if not math.isfinite(quantity):
        raise ValidationError("quantity must be a finite number")
    if quantity < 0:
        raise ValidationError("quantity must not be negative")
    return quantity


def parse_activity_type(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("type is required")
    return value


class ActivityLedgerService:
    def __init__(
        self,
        repository: LedgerRepository,
        rewards: RewardsService,
        resolver: Optional[FactorResolver] = None,
    ):
        self._repository = repository
        self._rewards = rewards
        self._resolver = resolver or FactorResolver()

    async def list_activities(self, owner_id: int) -> List[ActivityEntry]:
        """Owner's entries, newest first."""
        return await self._repository.list_activities(owner_id)

    async def record_activity(self, owner_id: int, activity_type: Any, quantity: Any) -> ActivityEntry:
        activity_type = parse_activity_type(activity_type)
        amount = parse_quantity(quantity)

        async with self._repository.transaction() as conn:
            configured = await self._repository.fetch_emission_factors([activity_type], conn=conn)
            factor = self._resolver.resolve(activity_type, configured)
            emission_amount = compute_emission(amount, factor)

            entry = await self._repository.insert_activity(
                owner_id,
                activity_type,
                amount,
                emission_amount,
                datetime.now(timezone.utc),
                conn=conn,
            )
            await self._rewards.on_activity_recorded(owner_id, conn=conn)

        logger.info(
            "activity_recorded",
            owner_id=owner_id,
            activity_id=entry.id,
            activity_type=activity_type,
            quantity=amount,
            factor=factor,
            emission_amount=emission_amount,
        )
        return entry

    async def delete_activity(self, owner_id: int, activity_id: int) -> None:
        """
        Permanently remove one of the owner's entries. Points already
        awarded for it are kept.
        """
        entry = await self._repository.fetch_activity(activity_id)
        if entry is None:
            raise NotFound("Activity not found")
        if entry.owner_id != owner_id:
            logger.info(
                "activity_delete_forbidden",
                owner_id=owner_id,
                activity_id=activity_id,
            )
            raise Forbidden("Unauthorized")

        deleted = await self._repository.delete_activity(activity_id, owner_id)
        if not deleted:
            # Removed by a concurrent request between the lookup and the delete
            raise NotFound("Activity not found")

        logger.info("activity_deleted", owner_id=owner_id, activity_id=activity_id)

    async def summarize_activities(self, owner_id: int) -> ActivitySummary:
        entries = await self._repository.list_activities(owner_id)
        return ActivitySummary(
            total_emissions=sum(entry.emission_amount for entry in entries),
            activity_count=len(entries),
            by_type=summarize_emissions(entries),
        )

    async def list_emission_factors(self) -> List[EmissionFactor]:
        configured = await self._repository.fetch_emission_factors()
        return self._resolver.effective_table(configured)


_ledger_service: Optional[ActivityLedgerService] = None


def get_activity_ledger_service() -> ActivityLedgerService:
    """Get the process-wide ledger service backed by PostgreSQL."""
    global _ledger_service
    if _ledger_service is None:
        repository = PostgresLedgerRepository()
        _ledger_service = ActivityLedgerService(repository, RewardsService(repository))
    return _ledger_service
