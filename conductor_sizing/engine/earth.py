import logging
import math
from dataclasses import replace
from typing import Optional

from conductor_sizing.core.models import (
    CatalogEntry, ConductorMaterial, EarthConductorResult, InsulationRating, Standard,
)
from conductor_sizing.engine.catalog import all_sizes
from conductor_sizing.standards.registry import get_rules

logger = logging.getLogger(__name__)

ADIABATIC_REFERENCE = "IEC 60364-5-54 543.1.2"

# k factors for protective conductors incorporated in a cable (Table A.54.3)
# Format: {Material: {Insulation_Temp: k}}
K_FACTORS = {
    ConductorMaterial.COPPER: {70: 115, 90: 143},
    ConductorMaterial.ALUMINUM: {70: 76, 90: 94},
}


def k_factor(material: ConductorMaterial, insulation: InsulationRating) -> int:
    return K_FACTORS[material][90 if insulation is InsulationRating.TEMP_90 else 70]


def adiabatic_minimum(fault_current_ka: float, clearing_time_s: float,
                      material: ConductorMaterial, insulation: InsulationRating) -> float:
    """Minimum cross-section (mm2) from S = I * sqrt(t) / k."""
    return fault_current_ka * 1000 * math.sqrt(clearing_time_s) / k_factor(material, insulation)


def resolve(phase_entry: CatalogEntry, current: float, material: ConductorMaterial, standard: Standard,
            fault_current_ka: Optional[float] = None, clearing_time_s: float = 0.4,
            insulation: InsulationRating = InsulationRating.TEMP_75, conductors_per_phase: int = 1,
            min_ampacity_entry: Optional[CatalogEntry] = None) -> EarthConductorResult:
    result = get_rules(standard).earth_conductor(
        phase_entry, current,
        conductors_per_phase=conductors_per_phase,
        min_ampacity_entry=min_ampacity_entry,
    )
    if fault_current_ka is None:
        return result

    minimum = adiabatic_minimum(fault_current_ka, clearing_time_s, material, insulation)
    if float(result.size_metric) >= minimum:
        return replace(result, rule=f"{result.rule}; adiabatic minimum {minimum:.1f} mm² satisfied")

    entries = all_sizes(standard, material)
    entry = next((e for e in entries if e.area_mm2 >= minimum), entries[-1])
    rule = (f"Adiabatic S = I·√t/k = {minimum:.1f} mm² (k = {k_factor(material, insulation)}) "
            f"governs over {result.rule}")
    if entry.area_mm2 < minimum:
        rule += "; fault level exceeds the largest catalog size, reduce clearing time"
    logger.debug("Earth conductor raised to %s by adiabatic check", entry.label)

    return EarthConductorResult(
        size_metric=entry.size_metric,
        size_imperial=entry.size_imperial,
        formatted_size=entry.label,
        rule=rule,
        standard_reference=f"{result.standard_reference}; {ADIABATIC_REFERENCE}",
    )
