import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional, Tuple


class Standard(Enum):
    """Regulatory system. IEC is the metric one, NEC the imperial one."""
    IEC = "IEC"
    NEC = "NEC"


class ConductorMaterial(Enum):
    COPPER = "Copper"
    ALUMINUM = "Aluminum"


class InsulationRating(Enum):
    TEMP_60 = 60
    TEMP_70 = 70
    TEMP_75 = 75
    TEMP_90 = 90


class PhaseConfig(Enum):
    SINGLE = "single"
    THREE = "three"

    @property
    def multiplier(self) -> float:
        # Out-and-return for single phase, line-to-line for three phase
        return 2.0 if self is PhaseConfig.SINGLE else math.sqrt(3)


class InstallationMethod(Enum):
    CONDUIT = "conduit"
    CABLE_TRAY = "cable-tray"
    DIRECT_BURIAL = "direct-burial"
    FREE_AIR = "free-air"


def metric_label(size) -> str:
    if isinstance(size, float):
        size = f"{size:g}"
    return f"{size} mm²"


def imperial_label(size: str) -> str:
    # 250 and up are circular-mil sizes
    if "/" not in size and int(size) >= 250:
        return f"{size} kcmil"
    return f"{size} AWG"


@dataclass(frozen=True)
class CatalogEntry:
    standard: Standard
    material: ConductorMaterial
    size_metric: str                  # mm2 (equivalent cross-section for NEC sizes)
    size_imperial: Optional[str]      # AWG / kcmil, NEC entries only
    ampacity_60: float
    ampacity_75: float
    ampacity_90: float
    resistance_mv_am: float           # mV/A/m
    resistance_ohm_per_kft: float     # Ohm per 1000 ft

    @property
    def area_mm2(self) -> float:
        return float(self.size_metric)

    @property
    def label(self) -> str:
        if self.standard is Standard.IEC or self.size_imperial is None:
            return metric_label(self.size_metric)
        return imperial_label(self.size_imperial)

    def ampacity_at(self, column: int) -> float:
        if column == 60:
            return self.ampacity_60
        if column == 75:
            return self.ampacity_75
        if column == 90:
            return self.ampacity_90
        raise ValueError(f"No ampacity column for {column} C")


@dataclass(frozen=True)
class DeratingContext:
    ambient_temp_c: float
    insulation: InsulationRating
    conductor_count: int
    installation_method: InstallationMethod
    standard: Standard


@dataclass(frozen=True)
class DeratingResult:
    temperature_factor: float
    grouping_factor: float
    total_factor: float
    standard_reference: str
    is_derated: bool
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class VoltageDropResult:
    voltage_drop: float
    voltage_drop_percent: float
    is_violation: bool
    is_dangerous: bool
    resistance: float
    resistance_unit: str
    phase_multiplier: float
    limit_percent: float
    standard_reference: str


@dataclass(frozen=True)
class SizingRequest:
    system_voltage: float
    current: float
    length: float                      # metres for IEC, feet for NEC
    material: ConductorMaterial = ConductorMaterial.COPPER
    installation_method: InstallationMethod = InstallationMethod.CONDUIT
    ambient_temp_c: float = 30.0
    phase: PhaseConfig = PhaseConfig.SINGLE
    conductor_count: int = 3
    insulation: InsulationRating = InsulationRating.TEMP_75
    standard: Standard = Standard.IEC
    max_voltage_drop_percent: float = 3.0
    fault_current_ka: Optional[float] = None
    fault_clearing_time_s: float = 0.4


@dataclass(frozen=True)
class RecommendedSize:
    size_metric: str
    size_imperial: Optional[str]
    formatted_size: str
    conductors_per_phase: int = 1


@dataclass(frozen=True)
class AmpacitySummary:
    base_ampacity: float
    derated_ampacity: float
    utilization_percent: Optional[float]   # None when the derated ampacity is zero


@dataclass(frozen=True)
class Compliance:
    is_voltage_drop_compliant: bool
    is_ampacity_compliant: bool

    @property
    def is_fully_compliant(self) -> bool:
        return self.is_voltage_drop_compliant and self.is_ampacity_compliant


@dataclass(frozen=True)
class ParallelRunOption:
    conductors_per_phase: int
    entry: CatalogEntry
    current_per_conductor: float
    derated_ampacity_per_conductor: float
    total_derated_ampacity: float
    voltage_drop: VoltageDropResult
    utilization_percent: Optional[float]
    is_compliant: bool
    cost_efficiency: int

    @property
    def formatted_size(self) -> str:
        return f"{self.conductors_per_phase}x {self.entry.label} per phase"


@dataclass(frozen=True)
class EarthConductorResult:
    size_metric: str
    size_imperial: Optional[str]
    formatted_size: str
    rule: str
    standard_reference: str


@dataclass(frozen=True)
class SizingResult:
    recommended_size: RecommendedSize
    voltage_drop: VoltageDropResult
    ampacity: AmpacitySummary
    derating: DeratingResult
    compliance: Compliance
    earth_conductor: EarthConductorResult
    warnings: Tuple[str, ...] = ()
    alternative_sizes: Tuple[CatalogEntry, ...] = ()
    standard_references: Tuple[str, ...] = ()
    parallel_run_options: Tuple[ParallelRunOption, ...] = field(default=())

    @property
    def requires_parallel_runs(self) -> bool:
        return self.recommended_size.conductors_per_phase > 1

    def to_dict(self) -> dict:
        """Plain, JSON-ready representation (enums by value, tuples as lists)."""
        data = _plain(self)
        data["compliance"]["is_fully_compliant"] = self.compliance.is_fully_compliant
        data["requires_parallel_runs"] = self.requires_parallel_runs
        return data


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if hasattr(value, "__dataclass_fields__"):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    return value
