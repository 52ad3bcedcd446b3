import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from conductor_sizing.core.models import CatalogEntry, DeratingResult, SizingRequest, VoltageDropResult
from conductor_sizing.engine import ampacity, voltage_drop
from conductor_sizing.engine.catalog import all_sizes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    entry: CatalogEntry
    current: float
    base_ampacity: float
    derated_ampacity: float
    voltage_drop: VoltageDropResult

    @property
    def is_ampacity_ok(self) -> bool:
        return not ampacity.is_overloaded(self.current, self.derated_ampacity)

    @property
    def is_voltage_drop_ok(self) -> bool:
        return not self.voltage_drop.is_violation

    @property
    def satisfies(self) -> bool:
        return self.is_ampacity_ok and self.is_voltage_drop_ok


@dataclass(frozen=True)
class SearchOutcome:
    chosen: Optional[Candidate]
    alternatives: Tuple[Candidate, ...]
    evaluated: Tuple[Candidate, ...]


def evaluate_entry(request: SizingRequest, entry: CatalogEntry, derating: DeratingResult,
                   current: Optional[float] = None) -> Candidate:
    """Ampacity and voltage drop of one entry carrying `current` (defaults to the full load)."""
    current = request.current if current is None else current
    return Candidate(
        entry=entry,
        current=current,
        base_ampacity=ampacity.base_ampacity(entry, request.insulation),
        derated_ampacity=ampacity.resolve(entry, request.insulation, derating),
        voltage_drop=voltage_drop.evaluate(
            current, request.length, entry, request.phase, request.system_voltage,
            request.standard, request.max_voltage_drop_percent,
        ),
    )


def search(request: SizingRequest, derating: DeratingResult, alternative_count: int = 3) -> SearchOutcome:
    """Smallest single conductor satisfying both ampacity and voltage drop.

    The catalog is scanned in ascending order; the first satisfying entry is
    chosen and the next `alternative_count` satisfying entries are kept as
    alternatives.
    """
    evaluated = []
    suitable = []
    for entry in all_sizes(request.standard, request.material):
        candidate = evaluate_entry(request, entry, derating)
        evaluated.append(candidate)
        if candidate.satisfies:
            suitable.append(candidate)
            if len(suitable) > alternative_count:
                break

    if not suitable:
        logger.debug("No single %s conductor carries %s A within %s%% drop",
                     request.standard.value, request.current, request.max_voltage_drop_percent)
        return SearchOutcome(chosen=None, alternatives=(), evaluated=tuple(evaluated))

    logger.debug("Single conductor chosen: %s", suitable[0].entry.label)
    return SearchOutcome(
        chosen=suitable[0],
        alternatives=tuple(suitable[1:1 + alternative_count]),
        evaluated=tuple(evaluated),
    )
