# api/routers/emission_factors.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from app.models.activities import EmissionFactor
from services.activity_ledger_service import ActivityLedgerService, get_activity_ledger_service

router = APIRouter(prefix="/emission-factors", tags=["activities"])


@router.get("", response_model=List[EmissionFactor])
async def list_emission_factors(
    ledger: ActivityLedgerService = Depends(get_activity_ledger_service),
):
    """Factor currently applied to each known activity type."""
    return await ledger.list_emission_factors()
