# services/emission_factor_service.py
"""
Emission factor resolution and emission calculation.

Both functions here are total: an unknown activity type is a valid,
zero-impact activity and never raises.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from app.core.emission_config import FALLBACK_EMISSION_FACTORS
from app.models.activities import EmissionFactor


class FactorResolver:
    """
    Maps an activity type to its conversion factor.

    The configured table (rows of ``emission_factors``) wins; a missing row
    or a configured value of exactly 0 falls through to the built-in table.
    An explicit zero override is therefore indistinguishable from "not
    configured".
    """

    def __init__(self, fallback: Mapping[str, float] = FALLBACK_EMISSION_FACTORS):
        self._fallback = fallback

    @property
    def fallback(self) -> Mapping[str, float]:
        return self._fallback

    def resolve(
        self,
        activity_type: str,
        configured: Optional[Mapping[str, float]] = None,
    ) -> float:
        factor = (configured or {}).get(activity_type)
        if factor:
            return float(factor)
        return float(self._fallback.get(activity_type, 0))

    def effective_table(self, configured: Optional[Mapping[str, float]] = None) -> List[EmissionFactor]:
        """
        Every known type with the factor resolve() would return, sorted by type.
        """
        configured = configured or {}
        types = set(self._fallback) | set(configured)
        table: List[EmissionFactor] = []
        for activity_type in sorted(types):
            source = "configured" if configured.get(activity_type) else "fallback"
            table.append(
                EmissionFactor(
                    type=activity_type,
                    factor=self.resolve(activity_type, configured),
                    source=source,
                )
            )
        return table


def compute_emission(quantity: float, factor: float) -> float:
    """quantity * factor, unrounded. Negative results are savings."""
    return quantity * factor


def summarize_emissions(entries) -> Dict[str, float]:
    """Total emission per activity type."""
    totals: Dict[str, float] = {}
    for entry in entries:
        totals[entry.type] = totals.get(entry.type, 0.0) + entry.emission_amount
    return totals
