"""
Data model (aggregate rows)
===========================

The pipeline works on pandas DataFrames. Once a summary table is final,
its rows can be turned into these small immutable records for printing
and for the DOCX report tables.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class HealthImpact:
    """Casualty totals for one event type."""
    event_type: str
    fatalities: int
    injuries: int

    @property
    def casualties(self) -> int:
        return self.fatalities + self.injuries


@dataclass(frozen=True)
class EconomicImpact:
    """Damage totals (US$) for one event type."""
    event_type: str
    property_cost: float
    crop_cost: float
    total_cost: float


@dataclass(frozen=True)
class EventFrequency:
    event_type: str
    event_count: int
    casualties: int
