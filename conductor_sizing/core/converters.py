import math
from typing import Optional, Tuple

from .errors import InvalidInput
from .models import PhaseConfig, Standard

METRES_PER_FOOT = 0.3048

# Multipliers to watts (real power) and volt-amperes (apparent power)
REAL_POWER_UNITS = {"W": 1.0, "KW": 1e3, "MW": 1e6, "HP": 746.0}
APPARENT_POWER_UNITS = {"VA": 1.0, "KVA": 1e3, "MVA": 1e6}

# Multipliers to metres
LENGTH_UNITS = {
    "m": 1.0, "metre": 1.0, "metres": 1.0, "meter": 1.0, "meters": 1.0,
    "ft": METRES_PER_FOOT, "foot": METRES_PER_FOOT, "feet": METRES_PER_FOOT,
    "yd": 0.9144, "yard": 0.9144, "yards": 0.9144,
    "km": 1000.0,
}


def _phase_factor(phase: PhaseConfig) -> float:
    return math.sqrt(3) if phase is PhaseConfig.THREE else 1.0


def load_current(power_w: float, voltage: float, phase: PhaseConfig, power_factor: float = 1.0) -> float:
    """Line current (A) drawn by a load of the given real power."""
    if voltage <= 0:
        raise InvalidInput("Voltage must be positive", field="system_voltage")
    if not 0 < power_factor <= 1:
        raise InvalidInput("Power factor must be in (0, 1]", field="power_factor")
    return power_w / (voltage * _phase_factor(phase) * power_factor)


def convert_power_unit(val: float, unit: str, voltage: float, phase: PhaseConfig,
                       pf: float) -> Tuple[float, Optional[float]]:
    """
    Normalise a load entry to (watts, current_override).

    The override is set only when the load was given in amperes, so the
    caller uses it as is instead of recomputing it from the power.
    """
    key = unit.strip().upper()
    if key in REAL_POWER_UNITS:
        return val * REAL_POWER_UNITS[key], None
    if key in APPARENT_POWER_UNITS:
        return val * APPARENT_POWER_UNITS[key] * pf, None
    if key == "A":
        return val * voltage * _phase_factor(phase) * pf, val
    raise InvalidInput(f"Unknown power unit '{unit}'", field="unit")


def convert_length_unit(val: float, unit: str, standard: Standard) -> float:
    """Returns length in the standard's native unit (m for IEC, ft for NEC)."""
    key = unit.strip().lower()
    if key not in LENGTH_UNITS:
        raise InvalidInput(f"Unknown length unit '{unit}'", field="length_unit")
    metres = val * LENGTH_UNITS[key]
    if standard is Standard.NEC:
        return metres / METRES_PER_FOOT
    return metres
