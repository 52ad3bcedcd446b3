import logging
from typing import Iterable, List, Optional

from conductor_sizing.core.errors import SizingError, SizingOutcome
from conductor_sizing.core.models import (
    AmpacitySummary, CatalogEntry, Compliance, DeratingContext, DeratingResult,
    EarthConductorResult, ParallelRunOption, RecommendedSize, SizingRequest, SizingResult,
    VoltageDropResult,
)
from conductor_sizing.core.policy import DEFAULT_POLICY, SizingPolicy
from conductor_sizing.engine import ampacity, derating, earth, parallel
from conductor_sizing.engine.search import Candidate, search
from conductor_sizing.engine.validation import advisory_warnings, validate_request
from conductor_sizing.standards.registry import get_rules

logger = logging.getLogger(__name__)

NO_SIZE_WARNING = "No standard cable size meets all requirements."
CONSIDER_PARALLEL_WARNING = "Consider parallel conductors or alternative installation method."
DANGEROUS_DROP_WARNING = "Voltage drop >10% is physically dangerous and may cause equipment malfunction"


def size_conductor(request: SizingRequest, policy: Optional[SizingPolicy] = None) -> SizingOutcome:
    """
    Size the conductor (or parallel set) for one circuit.

    Never raises for invalid input: the error is returned in the outcome.
    A request that no configuration satisfies still yields a result, flagged
    not fully compliant and carrying the reasons in its warnings.
    """
    policy = policy or DEFAULT_POLICY
    try:
        return SizingOutcome(result=_size(request, policy))
    except SizingError as exc:
        logger.debug("Request rejected: %s", exc.message)
        return SizingOutcome(error=exc)


def size_many(requests: Iterable[SizingRequest], policy: Optional[SizingPolicy] = None) -> List[SizingOutcome]:
    return [size_conductor(request, policy) for request in requests]


def _size(request: SizingRequest, policy: SizingPolicy) -> SizingResult:
    validate_request(request)
    rules = get_rules(request.standard)

    derating_result = derating.combined(DeratingContext(
        ambient_temp_c=request.ambient_temp_c,
        insulation=request.insulation,
        conductor_count=request.conductor_count,
        installation_method=request.installation_method,
        standard=request.standard,
    ))
    warnings = advisory_warnings(request) + list(derating_result.warnings)
    references = [rules.voltage_drop_reference, rules.ampacity_reference, rules.derating_reference]

    outcome = search(request, derating_result, policy.alternative_count)
    if outcome.chosen is not None:
        return _single_result(request, policy, derating_result, outcome.chosen, outcome, warnings, references)

    options = parallel.optimize(request, derating_result, policy.parallel)
    best = parallel.recommend(options)
    if best is not None:
        return _parallel_result(request, derating_result, best, options, warnings, references)

    logger.warning("No compliant configuration for %s A over %s %s at %s V",
                   request.current, request.length, rules.length_unit, request.system_voltage)
    return _failed_result(request, derating_result, outcome.evaluated[-1], warnings, references)


def _single_result(request, policy, derating_result, chosen: Candidate, outcome, warnings, references):
    util = ampacity.utilization(request.current, chosen.derated_ampacity)
    if util is not None and util > policy.high_utilization_percent:
        warnings.append(f"High cable utilization ({util:.0f}%). Consider next size up for safety margin.")
    _check_dangerous(chosen.voltage_drop, warnings)

    # Smallest size that carries the load on ampacity alone, for proportional EGC sizing
    min_ampacity = next((c.entry for c in outcome.evaluated if c.is_ampacity_ok), chosen.entry)
    earth_result = _earth(request, chosen.entry, 1, min_ampacity)

    return _assemble(
        recommended=RecommendedSize(
            size_metric=chosen.entry.size_metric,
            size_imperial=chosen.entry.size_imperial,
            formatted_size=chosen.entry.label,
        ),
        voltage_drop=chosen.voltage_drop,
        summary=AmpacitySummary(chosen.base_ampacity, chosen.derated_ampacity, util),
        derating_result=derating_result,
        compliance=Compliance(is_voltage_drop_compliant=True, is_ampacity_compliant=True),
        earth_result=earth_result,
        warnings=warnings,
        alternatives=tuple(c.entry for c in outcome.alternatives),
        references=references,
    )


def _parallel_result(request, derating_result, best: ParallelRunOption, options, warnings, references):
    rules = get_rules(request.standard)
    runs = best.conductors_per_phase
    references.append(rules.parallel_reference)

    warnings.append(
        f"No single conductor meets all requirements; {best.formatted_size} recommended "
        f"per {rules.parallel_reference}."
    )
    warnings.append(
        "Parallel sets sharing a raceway add to the grouped conductor count; "
        "confirm derating for the final arrangement."
    )
    vd_ok = not best.voltage_drop.is_violation
    amp_ok = not ampacity.is_overloaded(request.current, best.total_derated_ampacity)
    if not (vd_ok and amp_ok):
        warnings.append(NO_SIZE_WARNING)
        _failing_constraints(request, best.voltage_drop, best.total_derated_ampacity, warnings,
                             "with the best parallel arrangement")
    _check_dangerous(best.voltage_drop, warnings)

    earth_result = _earth(request, best.entry, runs, None)
    base = ampacity.base_ampacity(best.entry, request.insulation) * runs

    return _assemble(
        recommended=RecommendedSize(
            size_metric=best.entry.size_metric,
            size_imperial=best.entry.size_imperial,
            formatted_size=best.formatted_size,
            conductors_per_phase=runs,
        ),
        voltage_drop=best.voltage_drop,
        summary=AmpacitySummary(base, best.total_derated_ampacity, best.utilization_percent),
        derating_result=derating_result,
        compliance=Compliance(is_voltage_drop_compliant=vd_ok, is_ampacity_compliant=amp_ok),
        earth_result=earth_result,
        warnings=warnings,
        alternatives=(),
        references=references,
        options=options,
    )


def _failed_result(request, derating_result, largest: Candidate, warnings, references):
    warnings = [NO_SIZE_WARNING, CONSIDER_PARALLEL_WARNING] + warnings
    _failing_constraints(request, largest.voltage_drop, largest.derated_ampacity, warnings,
                         "even with largest cable")
    _check_dangerous(largest.voltage_drop, warnings)

    earth_result = _earth(request, largest.entry, 1, None)
    return _assemble(
        recommended=RecommendedSize(
            size_metric=largest.entry.size_metric,
            size_imperial=largest.entry.size_imperial,
            formatted_size=f"{largest.entry.label} (INSUFFICIENT)",
        ),
        voltage_drop=largest.voltage_drop,
        summary=AmpacitySummary(
            largest.base_ampacity,
            largest.derated_ampacity,
            ampacity.utilization(request.current, largest.derated_ampacity),
        ),
        derating_result=derating_result,
        compliance=Compliance(
            is_voltage_drop_compliant=largest.is_voltage_drop_ok,
            is_ampacity_compliant=largest.is_ampacity_ok,
        ),
        earth_result=earth_result,
        warnings=warnings,
        alternatives=(),
        references=references,
    )


def _failing_constraints(request, vd: VoltageDropResult, derated: float, warnings, qualifier: str):
    if vd.is_violation:
        warnings.append(
            f"Voltage drop {vd.voltage_drop_percent:.1f}% exceeds {request.max_voltage_drop_percent}% "
            f"limit {qualifier}."
        )
    if ampacity.is_overloaded(request.current, derated):
        warnings.append(
            f"Derated ampacity {derated}A is less than required {request.current}A {qualifier}."
        )


def _check_dangerous(vd: VoltageDropResult, warnings):
    if vd.is_dangerous:
        warnings.append(DANGEROUS_DROP_WARNING)


def _earth(request: SizingRequest, entry: CatalogEntry, runs: int,
           min_ampacity: Optional[CatalogEntry]) -> EarthConductorResult:
    return earth.resolve(
        entry, request.current, request.material, request.standard,
        fault_current_ka=request.fault_current_ka,
        clearing_time_s=request.fault_clearing_time_s,
        insulation=request.insulation,
        conductors_per_phase=runs,
        min_ampacity_entry=min_ampacity,
    )


def _assemble(recommended: RecommendedSize, voltage_drop: VoltageDropResult, summary: AmpacitySummary,
              derating_result: DeratingResult, compliance: Compliance, earth_result: EarthConductorResult,
              warnings, alternatives, references, options=()) -> SizingResult:
    references = references + [earth_result.standard_reference]
    return SizingResult(
        recommended_size=recommended,
        voltage_drop=voltage_drop,
        ampacity=summary,
        derating=derating_result,
        compliance=compliance,
        earth_conductor=earth_result,
        # Order-preserving de-duplication
        warnings=tuple(dict.fromkeys(warnings)),
        alternative_sizes=tuple(alternatives),
        standard_references=tuple(dict.fromkeys(references)),
        parallel_run_options=tuple(options),
    )
