import logging
from typing import Optional, Tuple

from conductor_sizing.core.models import DeratingResult, ParallelRunOption, SizingRequest
from conductor_sizing.core.policy import ParallelRunPolicy
from conductor_sizing.engine import ampacity
from conductor_sizing.engine.catalog import practical_sizes
from conductor_sizing.engine.search import evaluate_entry

logger = logging.getLogger(__name__)


def cost_efficiency(runs: int, utilization_percent: Optional[float]) -> int:
    """1-5 score; fewer runs and a moderate loading score higher."""
    score = 5
    if runs > 4:
        score -= 1
    if runs > 5:
        score -= 1
    if utilization_percent is not None:
        if utilization_percent < 50:
            score -= 1
        if utilization_percent > 90:
            score -= 1
    return max(1, min(5, score))


def rank_key(option: ParallelRunOption):
    return (
        not option.is_compliant,
        -option.cost_efficiency,
        option.conductors_per_phase,
        option.entry.area_mm2,
    )


def optimize(request: SizingRequest, derating: DeratingResult,
             policy: ParallelRunPolicy = ParallelRunPolicy()) -> Tuple[ParallelRunOption, ...]:
    """
    Enumerate parallel sets of identical conductors for a load no single size can carry.

    Every practical size is tried with min_runs..max_runs conductors per phase.
    Each conductor carries I/n, so the voltage drop is evaluated at that current
    over the full length, while ampacity adds up over the n conductors. Options
    that pass both checks are kept, as are near misses within the policy's
    ampacity ratio and drop allowance; the list is returned ranked.
    """
    entries = practical_sizes(request.standard, request.material, policy.min_sizes[request.standard])
    options = []
    for entry in entries:
        for runs in range(policy.min_runs, policy.max_runs + 1):
            candidate = evaluate_entry(request, entry, derating, current=request.current / runs)
            total = round(candidate.derated_ampacity * runs, 2)
            vd = candidate.voltage_drop

            is_compliant = total >= request.current and not vd.is_violation
            is_near = (total * policy.near_ampacity_ratio >= request.current
                       and vd.voltage_drop_percent < policy.near_voltage_drop_percent)
            if not (is_compliant or is_near):
                continue

            util = ampacity.utilization(request.current, total)
            options.append(ParallelRunOption(
                conductors_per_phase=runs,
                entry=entry,
                current_per_conductor=round(request.current / runs, 2),
                derated_ampacity_per_conductor=candidate.derated_ampacity,
                total_derated_ampacity=total,
                voltage_drop=vd,
                utilization_percent=util,
                is_compliant=is_compliant,
                cost_efficiency=cost_efficiency(runs, util),
            ))

    options.sort(key=rank_key)
    logger.debug("Parallel options retained: %d of %d sizes x %d run counts",
                 len(options), len(entries), policy.max_runs - policy.min_runs + 1)
    return tuple(options[:policy.max_options])


def recommend(options: Tuple[ParallelRunOption, ...]) -> Optional[ParallelRunOption]:
    """First compliant option, else the top-ranked near miss."""
    for option in options:
        if option.is_compliant:
            return option
    return options[0] if options else None
