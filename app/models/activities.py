from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ActivityCreate(BaseModel):
    """Body of POST /activities. Quantity is validated by the ledger service."""
    type: str
    # Raw JSON value; booleans must reach the ledger service unconverted.
    quantity: Any = None


class ActivityEntry(BaseModel):
    """One immutable ledger row."""
    model_config = ConfigDict(frozen=True)

    id: int
    owner_id: int
    type: str
    quantity: float
    emission_amount: float
    occurred_at: datetime


class ActivitySummary(BaseModel):
    """Aggregate emissions over an owner's ledger."""
    total_emissions: float = 0.0
    activity_count: int = 0
    by_type: Dict[str, float] = Field(default_factory=dict)


class EmissionFactor(BaseModel):
    type: str
    factor: float
    source: str  # "configured" | "fallback"


class DeleteActivityResponse(BaseModel):
    message: str = "Activity deleted"
