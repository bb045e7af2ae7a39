from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class Badge(BaseModel):
    id: int
    owner_id: int
    name: str
    icon: Optional[str] = None


class RewardsResponse(BaseModel):
    points: int
    badges: List[Badge] = Field(default_factory=list)
