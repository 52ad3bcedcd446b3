from typing import Optional

from conductor_sizing.core.models import CatalogEntry, DeratingResult, InsulationRating
from conductor_sizing.standards.registry import get_rules


def base_ampacity(entry: CatalogEntry, insulation: InsulationRating) -> float:
    """Tabulated ampacity of the entry in its standard's column for the insulation."""
    return entry.ampacity_at(get_rules(entry.standard).ampacity_column(insulation))


def resolve(entry: CatalogEntry, insulation: InsulationRating, derating: DeratingResult) -> float:
    return round(base_ampacity(entry, insulation) * derating.total_factor, 2)


def is_overloaded(current: float, derated_ampacity: float) -> bool:
    return current > derated_ampacity


def utilization(current: float, derated_ampacity: float) -> Optional[float]:
    # A zero rating has no meaningful utilization
    if derated_ampacity <= 0:
        return None
    return round(current / derated_ampacity * 100, 1)
