from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union

from .models import (
    CatalogEntry, ConductorMaterial, EarthConductorResult, InstallationMethod,
    InsulationRating, Standard,
)

SizeSelector = Union[str, float, int]


class StandardRules(ABC):
    """Everything that differs between the metric and the imperial standard.

    One concrete subclass exists per Standard member; the engine never
    branches on the standard itself, it asks the rule set.
    """
    standard: Standard
    default_system_voltage: float
    length_unit: str
    resistance_unit: str

    ampacity_reference: str
    derating_reference: str
    voltage_drop_reference: str
    parallel_reference: str
    earth_reference: str

    @abstractmethod
    def catalog(self, material: ConductorMaterial) -> Tuple[CatalogEntry, ...]:
        """Ordered catalog (ascending size) for the material."""
        pass

    @abstractmethod
    def matches(self, entry: CatalogEntry, selector: SizeSelector) -> bool:
        """Whether a caller-supplied size selector names this entry."""
        pass

    @abstractmethod
    def ampacity_column(self, insulation: InsulationRating) -> int:
        """Catalog ampacity column (60/75/90) used for an insulation rating."""
        pass

    @abstractmethod
    def resistance(self, entry: CatalogEntry) -> float:
        """Per-length resistance in this standard's native unit."""
        pass

    @abstractmethod
    def temperature_column(self, insulation: InsulationRating) -> int:
        """Column of the ambient correction table used for an insulation rating."""
        pass

    @abstractmethod
    def tabulated_temperature_factor(self, ambient_temp_c: float, column: int) -> float:
        pass

    @abstractmethod
    def grouping_factor(self, conductor_count: int, method: InstallationMethod) -> float:
        pass

    @abstractmethod
    def grouping_warning(self, conductor_count: int, factor: float) -> Optional[str]:
        pass

    @abstractmethod
    def earth_conductor(
        self,
        phase_entry: CatalogEntry,
        current: float,
        conductors_per_phase: int = 1,
        min_ampacity_entry: Optional[CatalogEntry] = None,
    ) -> EarthConductorResult:
        """Protective conductor from the phase conductor actually selected."""
        pass

    def temperature_factor(self, ambient_temp_c: float, insulation: InsulationRating) -> float:
        # Cable may not be used at or above its insulation rating
        if ambient_temp_c >= insulation.value:
            return 0.0

        factor = self.tabulated_temperature_factor(ambient_temp_c, self.temperature_column(insulation))
        # Stepwise only, never boosted above the reference ambient
        return min(factor, 1.0)
