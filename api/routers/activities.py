# api/routers/activities.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path

from app.deps.auth import User, get_current_user
from app.models.activities import (
    ActivityCreate,
    ActivityEntry,
    ActivitySummary,
    DeleteActivityResponse,
)
from services.activity_ledger_service import ActivityLedgerService, get_activity_ledger_service

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("", response_model=List[ActivityEntry])
async def list_activities(
    user: User = Depends(get_current_user),
    ledger: ActivityLedgerService = Depends(get_activity_ledger_service),
):
    """Current user's activities, newest first."""
    return await ledger.list_activities(user.user_id)


@router.post("", response_model=ActivityEntry, status_code=201)
async def record_activity(
    payload: ActivityCreate,
    user: User = Depends(get_current_user),
    ledger: ActivityLedgerService = Depends(get_activity_ledger_service),
):
    """
    Log an activity. The emission amount is computed from the current
    factor for its type and the user earns reward points.
    """
    return await ledger.record_activity(user.user_id, payload.type, payload.quantity)


@router.get("/summary", response_model=ActivitySummary)
async def get_activity_summary(
    user: User = Depends(get_current_user),
    ledger: ActivityLedgerService = Depends(get_activity_ledger_service),
):
    """Total emissions, count and per-type totals for the current user."""
    return await ledger.summarize_activities(user.user_id)


@router.delete("/{activity_id}", response_model=DeleteActivityResponse)
async def delete_activity(
    activity_id: int = Path(..., description="Activity ID"),
    user: User = Depends(get_current_user),
    ledger: ActivityLedgerService = Depends(get_activity_ledger_service),
):
    """Delete one of your own activities. Earned points are kept."""
    await ledger.delete_activity(user.user_id, activity_id)
    return DeleteActivityResponse()
