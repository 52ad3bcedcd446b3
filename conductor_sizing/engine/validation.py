import math
from typing import List

from conductor_sizing.core.errors import InvalidInput
from conductor_sizing.core.models import ConductorMaterial, InstallationMethod, SizingRequest, Standard
from conductor_sizing.core.policy import DANGER_VOLTAGE_DROP_PERCENT
from conductor_sizing.engine.derating import VERY_HIGH_CONDUCTOR_COUNT, conductor_count_warning

MIN_AMBIENT_C = -40
MAX_AMBIENT_C = 90
MAX_CONDUCTORS = 100


def _require_positive(value, field: str):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
        raise InvalidInput(f"{field} must be a positive number, got {value!r}", field=field)


def validate_request(request: SizingRequest) -> None:
    """Raise InvalidInput for anything outside the physically meaningful range."""
    _require_positive(request.system_voltage, "system_voltage")
    _require_positive(request.current, "current")
    _require_positive(request.length, "length")

    ambient = request.ambient_temp_c
    if not isinstance(ambient, (int, float)) or not math.isfinite(ambient) \
            or not MIN_AMBIENT_C <= ambient <= MAX_AMBIENT_C:
        raise InvalidInput(
            f"Ambient temperature must be between {MIN_AMBIENT_C} and {MAX_AMBIENT_C}°C, got {ambient!r}",
            field="ambient_temp_c",
        )

    count = request.conductor_count
    if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= MAX_CONDUCTORS:
        raise InvalidInput(
            f"Conductor count must be an integer between 1 and {MAX_CONDUCTORS}, got {count!r}",
            field="conductor_count",
        )

    limit = request.max_voltage_drop_percent
    _require_positive(limit, "max_voltage_drop_percent")
    if limit > DANGER_VOLTAGE_DROP_PERCENT:
        raise InvalidInput(
            f"Voltage drop limit must not exceed {DANGER_VOLTAGE_DROP_PERCENT}%, got {limit}",
            field="max_voltage_drop_percent",
        )

    if request.fault_current_ka is not None:
        _require_positive(request.fault_current_ka, "fault_current_ka")
        _require_positive(request.fault_clearing_time_s, "fault_clearing_time_s")


def advisory_warnings(request: SizingRequest) -> List[str]:
    """Non-fatal observations about the request itself."""
    warnings = []
    if request.ambient_temp_c > 50:
        warnings.append(
            f"High ambient temperature ({request.ambient_temp_c}°C) will significantly reduce cable ampacity"
        )
    if request.ambient_temp_c > 70:
        warnings.append(
            f"Extreme ambient temperature ({request.ambient_temp_c}°C) - verify insulation rating is adequate"
        )
    if request.conductor_count > VERY_HIGH_CONDUCTOR_COUNT:
        warnings.append(conductor_count_warning(request.conductor_count))
    if request.standard is Standard.IEC and request.length > 200:
        warnings.append("Long cable run - verify voltage drop is acceptable")
    if request.length > 500:
        warnings.append("Very long cable run - consider intermediate substations or voltage step-up")
    if request.current > 500:
        warnings.append("High current load - consider parallel conductors")
    if request.system_voltage <= 48:
        warnings.append("Low voltage system - voltage drop tolerance may be critical")
    if request.system_voltage >= 2400:
        warnings.append("Medium voltage system - ensure proper insulation and terminations")
    if request.material is ConductorMaterial.ALUMINUM and request.current < 15:
        warnings.append("Aluminum conductors not typically used for small currents - consider copper")
    if request.installation_method is InstallationMethod.DIRECT_BURIAL:
        warnings.append("Direct burial - ensure proper depth and protection per local codes")
    return warnings
