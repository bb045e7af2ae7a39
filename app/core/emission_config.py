"""
Built-in emission factors per activity type.

Used whenever the emission_factors table has no (non-zero) row for a type.
Units differ per type: kg CO2 per km, kWh, hour or GB.
"""

from types import MappingProxyType
from typing import Mapping

FALLBACK_EMISSION_FACTORS: Mapping[str, float] = MappingProxyType({
    "Car Travel": 0.2,           # per km
    "Electricity": 0.5,          # per kWh
    "Flight": 0.15,              # per km
    "Public Transport": 0.05,    # per km
    "Walking": -0.1,             # saved per km, replaces a car trip
    "Cycling": -0.1,             # saved per km, replaces a car trip
    "Streaming (Video)": 0.036,  # per hour
    "Internet Data": 0.01,       # per GB
    "Gaming": 0.05,              # per hour
})
