import math
from typing import Optional, Tuple

from conductor_sizing.core.calculator import SizeSelector, StandardRules
from conductor_sizing.core.models import (
    CatalogEntry, ConductorMaterial, EarthConductorResult, InstallationMethod,
    InsulationRating, Standard, metric_label,
)
from conductor_sizing.standards.iec_tables import (
    IEC_ALUMINUM_CATALOG, IEC_COPPER_CATALOG, PVC, STANDARD_SIZES_MM2, XLPE,
    get_grouping_factor, get_temp_correction,
)


class IECRules(StandardRules):
    standard = Standard.IEC
    default_system_voltage = 230.0
    length_unit = "m"
    resistance_unit = "mV/A/m"

    ampacity_reference = "IEC 60364-5-52 Table B.52.4"
    derating_reference = "IEC 60364-5-52 Table B.52.14, Table B.52.17"
    voltage_drop_reference = "IEC 60364-5-52:2009"
    parallel_reference = "IEC 60364-5-52 Clause 523.7"
    earth_reference = "IEC 60364-5-54 Table 54.2"

    # Installation method -> reference method of Table B.52.17
    REFERENCE_METHODS = {
        InstallationMethod.CONDUIT: "A",
        InstallationMethod.CABLE_TRAY: "C",
        InstallationMethod.DIRECT_BURIAL: "C",
        InstallationMethod.FREE_AIR: "E",
    }

    def catalog(self, material: ConductorMaterial) -> Tuple[CatalogEntry, ...]:
        if material is ConductorMaterial.ALUMINUM:
            return IEC_ALUMINUM_CATALOG
        return IEC_COPPER_CATALOG

    def matches(self, entry: CatalogEntry, selector: SizeSelector) -> bool:
        text = str(selector).strip().lower()
        for suffix in ("mm²", "mm2", "mm"):
            if text.endswith(suffix):
                text = text[:-len(suffix)].strip()
                break
        try:
            return float(text) == entry.area_mm2
        except ValueError:
            return False

    def ampacity_column(self, insulation: InsulationRating) -> int:
        if insulation is InsulationRating.TEMP_60:
            return 60
        if insulation is InsulationRating.TEMP_90:
            return 90
        # 70 and 75 are PVC, carried in the 75 column of IEC data
        return 75

    def temperature_column(self, insulation: InsulationRating) -> int:
        return XLPE if insulation is InsulationRating.TEMP_90 else PVC

    def tabulated_temperature_factor(self, ambient_temp_c: float, column: int) -> float:
        return get_temp_correction(ambient_temp_c, column)

    def resistance(self, entry: CatalogEntry) -> float:
        return entry.resistance_mv_am

    def circuits(self, conductor_count: int) -> int:
        # Three loaded conductors make one circuit
        return math.ceil(conductor_count / 3)

    def grouping_factor(self, conductor_count: int, method: InstallationMethod) -> float:
        return get_grouping_factor(self.circuits(conductor_count), self.REFERENCE_METHODS[method])

    def grouping_warning(self, conductor_count: int, factor: float) -> Optional[str]:
        if factor < 0.5:
            return (f"Large number of circuits ({self.circuits(conductor_count)}) results in significant "
                    f"derating ({factor * 100:.0f}%)")
        return None

    def earth_conductor(
        self,
        phase_entry: CatalogEntry,
        current: float,
        conductors_per_phase: int = 1,
        min_ampacity_entry: Optional[CatalogEntry] = None,
    ) -> EarthConductorResult:
        # Parallel runs are treated as one line conductor of the combined section
        s = phase_entry.area_mm2 * conductors_per_phase
        if s <= 16:
            required, rule = s, "S ≤ 16 mm²: PE = S"
        elif s <= 35:
            required, rule = 16.0, "16 < S ≤ 35 mm²: PE = 16 mm²"
        else:
            required, rule = s / 2, "S > 35 mm²: PE = S/2"
        required = max(required, 2.5)

        runs = 1
        if required > STANDARD_SIZES_MM2[-1]:
            # Split across the parallel runs when no single standard size is large enough
            runs = conductors_per_phase
            required = required / runs
            rule += f"; shared across {runs} parallel runs"

        size = next((c for c in STANDARD_SIZES_MM2 if c >= required), STANDARD_SIZES_MM2[-1])
        size_metric = f"{size:g}"
        formatted = metric_label(size_metric) if runs == 1 else f"{runs}x {metric_label(size_metric)}"
        return EarthConductorResult(
            size_metric=size_metric,
            size_imperial=None,
            formatted_size=formatted,
            rule=rule,
            standard_reference=self.earth_reference,
        )
