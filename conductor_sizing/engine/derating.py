import logging

from conductor_sizing.core.models import (
    DeratingContext, DeratingResult, InstallationMethod, InsulationRating, Standard,
)
from conductor_sizing.standards.registry import get_rules

logger = logging.getLogger(__name__)

VERY_HIGH_CONDUCTOR_COUNT = 20


def conductor_count_warning(conductor_count: int) -> str:
    return f"Very high conductor count ({conductor_count}). Derating at this level is unusual."


def temperature_factor(ambient_temp_c: float, insulation: InsulationRating, standard: Standard) -> float:
    """Ambient correction factor in [0, 1]; exactly 0 at or above the insulation rating."""
    return round(get_rules(standard).temperature_factor(ambient_temp_c, insulation), 3)


def grouping_factor(conductor_count: int, standard: Standard,
                    installation_method: InstallationMethod = InstallationMethod.CONDUIT) -> float:
    return round(get_rules(standard).grouping_factor(conductor_count, installation_method), 3)


def combined(context: DeratingContext) -> DeratingResult:
    rules = get_rules(context.standard)
    temp = temperature_factor(context.ambient_temp_c, context.insulation, context.standard)
    group = grouping_factor(context.conductor_count, context.standard, context.installation_method)
    total = round(max(temp * group, 0.0), 3)

    warnings = []
    if temp == 0 and context.ambient_temp_c < context.insulation.value:
        # Table steps reach zero just below the rating
        warnings.append(
            f"Ambient temperature {context.ambient_temp_c}°C exceeds maximum for "
            f"{context.insulation.value}°C insulation"
        )
    elif temp == 0:
        warnings.append(
            f"Ambient temperature {context.ambient_temp_c}°C exceeds insulation rating "
            f"({context.insulation.value}°C); the conductor cannot carry current"
        )
    elif temp < 0.5:
        warnings.append(
            f"High ambient temperature {context.ambient_temp_c}°C results in significant "
            f"derating ({temp * 100:.0f}%)"
        )

    group_warning = rules.grouping_warning(context.conductor_count, group)
    if group_warning:
        warnings.append(group_warning)

    if total < 0.4:
        warnings.append(
            f"Combined derating factor {total * 100:.0f}% is very low. Consider alternative installation method."
        )
    if context.conductor_count > VERY_HIGH_CONDUCTOR_COUNT:
        warnings.append(conductor_count_warning(context.conductor_count))

    logger.debug("Derating %s: temperature=%s grouping=%s total=%s",
                 context.standard.value, temp, group, total)

    return DeratingResult(
        temperature_factor=temp,
        grouping_factor=group,
        total_factor=total,
        standard_reference=rules.derating_reference,
        is_derated=total < 1.0,
        warnings=tuple(warnings),
    )
