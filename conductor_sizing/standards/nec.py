from typing import Optional, Tuple

from conductor_sizing.core.calculator import SizeSelector, StandardRules
from conductor_sizing.core.models import (
    CatalogEntry, ConductorMaterial, EarthConductorResult, InstallationMethod,
    InsulationRating, Standard, imperial_label,
)
from conductor_sizing.standards.nec_tables import (
    BREAKER_RATINGS, CONDUCTOR_AREA_MM2, NEC_ALUMINUM_CATALOG, NEC_COPPER_CATALOG,
    TABLE_250_122, get_grouping_factor, get_temp_correction,
)


class NECRules(StandardRules):
    standard = Standard.NEC
    default_system_voltage = 120.0
    length_unit = "ft"
    resistance_unit = "ohm/1000ft"

    ampacity_reference = "NEC 2020 Table 310.16"
    derating_reference = "NEC 310.15(B)(1), NEC 310.15(C)(1)"
    voltage_drop_reference = "NEC 2020 Chapter 9 Table 8"
    parallel_reference = "NEC 2020 310.10(G)"
    earth_reference = "NEC 2020 Table 250.122"

    # 70°C insulation is rated against the 75°C column
    COLUMNS = {
        InsulationRating.TEMP_60: 60,
        InsulationRating.TEMP_70: 75,
        InsulationRating.TEMP_75: 75,
        InsulationRating.TEMP_90: 90,
    }

    def catalog(self, material: ConductorMaterial) -> Tuple[CatalogEntry, ...]:
        if material is ConductorMaterial.ALUMINUM:
            return NEC_ALUMINUM_CATALOG
        return NEC_COPPER_CATALOG

    def matches(self, entry: CatalogEntry, selector: SizeSelector) -> bool:
        if isinstance(selector, float):
            if not selector.is_integer():
                return False
            selector = int(selector)
        text = str(selector).strip().lower()
        for suffix in ("kcmil", "mcm", "awg"):
            if text.endswith(suffix):
                text = text[:-len(suffix)].strip()
        return text == entry.size_imperial

    def ampacity_column(self, insulation: InsulationRating) -> int:
        return self.COLUMNS[insulation]

    def temperature_column(self, insulation: InsulationRating) -> int:
        return self.COLUMNS[insulation]

    def tabulated_temperature_factor(self, ambient_temp_c: float, column: int) -> float:
        return get_temp_correction(ambient_temp_c, column)

    def resistance(self, entry: CatalogEntry) -> float:
        return entry.resistance_ohm_per_kft

    def grouping_factor(self, conductor_count: int, method: InstallationMethod) -> float:
        return get_grouping_factor(conductor_count)

    def grouping_warning(self, conductor_count: int, factor: float) -> Optional[str]:
        if factor < 0.5:
            return (f"Large number of conductors ({conductor_count}) results in significant "
                    f"derating ({factor * 100:.0f}%)")
        return None

    def select_ocpd(self, current: float) -> int:
        """Next standard rating (240.6(A)) at or above 125 % of the load current."""
        required = current * 1.25
        for rating in BREAKER_RATINGS:
            if rating >= required:
                return rating
        return BREAKER_RATINGS[-1]

    def earth_conductor(
        self,
        phase_entry: CatalogEntry,
        current: float,
        conductors_per_phase: int = 1,
        min_ampacity_entry: Optional[CatalogEntry] = None,
    ) -> EarthConductorResult:
        material = phase_entry.material
        ocpd = self.select_ocpd(current)
        row = next((r for r in TABLE_250_122 if r >= ocpd), max(TABLE_250_122))
        size = TABLE_250_122[row][material]
        area = float(CONDUCTOR_AREA_MM2[size])
        rule = f"Table 250.122 for {ocpd} A OCPD"

        # 250.122(B): conductors upsized for voltage drop carry a proportionally larger EGC
        if min_ampacity_entry is not None and phase_entry.area_mm2 > min_ampacity_entry.area_mm2:
            ratio = phase_entry.area_mm2 / min_ampacity_entry.area_mm2
            required = area * ratio
            upsized = next((e for e in self.catalog(material) if e.area_mm2 >= required), phase_entry)
            if upsized.area_mm2 > area:
                size, area = upsized.size_imperial, upsized.area_mm2
                rule += f"; increased {ratio:.2f}x for upsized phase conductors per 250.122(B)"

        if area > phase_entry.area_mm2:
            size, area = phase_entry.size_imperial, phase_entry.area_mm2
            rule += "; limited to the phase conductor size"

        formatted = imperial_label(size)
        if conductors_per_phase > 1:
            formatted = f"{imperial_label(size)} in each of {conductors_per_phase} raceways"
            rule += "; full-size EGC in each parallel raceway per 250.122(F)"

        return EarthConductorResult(
            size_metric=CONDUCTOR_AREA_MM2[size],
            size_imperial=size,
            formatted_size=formatted,
            rule=rule,
            standard_reference=self.earth_reference,
        )
