import math
from decimal import Decimal, ROUND_HALF_UP

from conductor_sizing.core.errors import InvalidInput
from conductor_sizing.core.models import CatalogEntry, PhaseConfig, Standard, VoltageDropResult
from conductor_sizing.core.policy import DANGER_VOLTAGE_DROP_PERCENT, DEFAULT_VOLTAGE_DROP_LIMIT_PERCENT
from conductor_sizing.standards.registry import get_rules

TWO_PLACES = Decimal("0.01")


def _decimal(name: str, value: float) -> Decimal:
    if value is None or not math.isfinite(value) or value <= 0:
        raise InvalidInput(f"{name} must be a positive finite number, got {value}", field=name)
    return Decimal(str(value))


def _multiplier(phase: PhaseConfig) -> Decimal:
    if phase is PhaseConfig.SINGLE:
        return Decimal("2")
    return Decimal("3").sqrt()


def evaluate(current: float, length: float, entry: CatalogEntry, phase: PhaseConfig,
             system_voltage: float, standard: Standard,
             limit_percent: float = DEFAULT_VOLTAGE_DROP_LIMIT_PERCENT) -> VoltageDropResult:
    """
    Voltage drop of one conductor run.

    drop = I x L x k x R / 1000, with k = 2 (single phase) or sqrt(3) (three
    phase) and R in the standard's native unit: mV/A/m over metres for IEC,
    ohm/1000 ft over feet for NEC. Both results are rounded half-up to two
    places and the violation flag is decided on the rounded percentage.
    """
    if entry.standard is not standard:
        raise InvalidInput(
            f"{entry.label} is a {entry.standard.value} size and cannot be evaluated under {standard.value}",
            field="size",
        )
    rules = get_rules(standard)

    i = _decimal("current", current)
    run = _decimal("length", length)
    v = _decimal("system_voltage", system_voltage)
    limit = _decimal("max_voltage_drop_percent", limit_percent)
    resistance = rules.resistance(entry)
    k = _multiplier(phase)

    drop = i * run * k * Decimal(str(resistance)) / Decimal("1000")
    percent = drop / v * Decimal("100")

    drop = drop.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    percent = percent.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

    return VoltageDropResult(
        voltage_drop=float(drop),
        voltage_drop_percent=float(percent),
        is_violation=percent > limit,
        is_dangerous=percent > Decimal(str(DANGER_VOLTAGE_DROP_PERCENT)),
        resistance=resistance,
        resistance_unit=rules.resistance_unit,
        phase_multiplier=phase.multiplier,
        limit_percent=float(limit),
        standard_reference=rules.voltage_drop_reference,
    )
