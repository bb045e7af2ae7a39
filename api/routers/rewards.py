# api/routers/rewards.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from app.deps.auth import User, get_current_user
from app.models.rewards import RewardsResponse
from services.reward_service import RewardsService, get_rewards_service

router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.get("", response_model=RewardsResponse)
async def get_my_rewards(
    user: User = Depends(get_current_user),
    rewards: RewardsService = Depends(get_rewards_service),
):
    """
    Point balance and badges of the current user.

    Any level or progress display is derived from the raw points by the client.
    """
    return await rewards.get_rewards(user.user_id)
