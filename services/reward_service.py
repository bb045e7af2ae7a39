# services/reward_service.py
"""
Reward points and badges.

Points accrue only through on_activity_recorded(); badges are granted
elsewhere and are only read here.
"""
from __future__ import annotations

from typing import Any, Optional

from app.core.errors import NotFound
from app.core.logging import get_logger
from app.core.rewards_config import POINTS_PER_ACTIVITY
from app.models.rewards import RewardsResponse
from services.ledger_repository import LedgerRepository, PostgresLedgerRepository

logger = get_logger()


class RewardsService:
    def __init__(self, repository: LedgerRepository, points_per_activity: int = POINTS_PER_ACTIVITY):
        self._repository = repository
        self._points_per_activity = points_per_activity

    async def on_activity_recorded(self, owner_id: int, conn: Any = None) -> int:
        """
        Award the flat per-activity amount to the owner.

        Args:
            owner_id: Account that recorded the activity
            conn: Open transaction of the ledger write, if any

        Returns:
            The owner's new point balance

        Raises:
            NotFound: The owner account does not exist
        """
        balance = await self._repository.add_points(owner_id, self._points_per_activity, conn=conn)
        if balance is None:
            logger.warning("points_award_user_missing", owner_id=owner_id)
            raise NotFound("User not found")

        logger.info(
            "points_awarded",
            owner_id=owner_id,
            amount=self._points_per_activity,
            balance=balance,
        )
        return balance

    async def get_rewards(self, owner_id: int) -> RewardsResponse:
        user = await self._repository.fetch_user(owner_id)
        if user is None:
            raise NotFound("User not found")

        badges = await self._repository.list_badges(owner_id)
        return RewardsResponse(points=user.points, badges=badges)


_rewards_service: Optional[RewardsService] = None


def get_rewards_service() -> RewardsService:
    """Get the process-wide RewardsService backed by PostgreSQL."""
    global _rewards_service
    if _rewards_service is None:
        _rewards_service = RewardsService(PostgresLedgerRepository())
    return _rewards_service
