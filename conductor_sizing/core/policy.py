from dataclasses import dataclass, field
from typing import Dict

from .models import Standard

# Voltage drop above this is flagged as dangerous regardless of the request limit
DANGER_VOLTAGE_DROP_PERCENT = 10.0
DEFAULT_VOLTAGE_DROP_LIMIT_PERCENT = 3.0


@dataclass(frozen=True)
class ParallelRunPolicy:
    """Search bounds for parallel conductor sets.

    These are installation-practice limits, not normative values; adjust them
    to local practice where it matters.
    """
    min_runs: int = 2
    max_runs: int = 6
    max_options: int = 6
    # Near-compliant options are kept when total ampacity is within this ratio
    # of the load and the drop stays under the percentage below.
    near_ampacity_ratio: float = 1.2
    near_voltage_drop_percent: float = 5.0
    min_sizes: Dict[Standard, str] = field(default_factory=lambda: {
        Standard.NEC: "1/0",   # NEC 310.10(G)
        Standard.IEC: "50",
    })


@dataclass(frozen=True)
class SizingPolicy:
    high_utilization_percent: float = 80.0
    alternative_count: int = 3
    parallel: ParallelRunPolicy = field(default_factory=ParallelRunPolicy)


DEFAULT_POLICY = SizingPolicy()
