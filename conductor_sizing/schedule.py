import logging
from typing import List, Optional, Tuple, Union

import pandas as pd
from openpyxl.styles import Font, PatternFill

from conductor_sizing.core.converters import convert_length_unit, convert_power_unit, load_current
from conductor_sizing.core.errors import InvalidInput, SizingError
from conductor_sizing.core.models import (
    ConductorMaterial, InstallationMethod, InsulationRating, PhaseConfig, SizingRequest, Standard,
)
from conductor_sizing.core.policy import SizingPolicy
from conductor_sizing.engine.catalog import all_sizes
from conductor_sizing.engine.sizing import size_conductor
from conductor_sizing.standards.registry import get_rules

logger = logging.getLogger(__name__)

INPUT_COLUMNS = [
    "Name", "Standard", "Voltage", "Current", "Power", "Unit", "PF",
    "Length", "LengthUnit", "Phase", "Material", "Method", "Ambient",
    "Conductors", "Insulation", "MaxVD", "FaultKA",
]

RESULT_COLUMNS = [
    "Name", "Standard", "I (A)", "Size", "Runs", "Base (A)", "Derated (A)",
    "Utilization (%)", "VD (V)", "VD (%)", "Compliant", "Earth", "Notes",
]

PHASE_ALIASES = {"1": PhaseConfig.SINGLE, "single": PhaseConfig.SINGLE,
                 "3": PhaseConfig.THREE, "three": PhaseConfig.THREE}
MATERIAL_ALIASES = {"cu": ConductorMaterial.COPPER, "copper": ConductorMaterial.COPPER,
                    "al": ConductorMaterial.ALUMINUM, "aluminum": ConductorMaterial.ALUMINUM,
                    "aluminium": ConductorMaterial.ALUMINUM}

HEADER_FILL = PatternFill(start_color="DDDDDD", end_color="DDDDDD", fill_type="solid")
HEADER_FONT = Font(bold=True)

RowRequest = Tuple[str, Union[SizingRequest, SizingError]]


def _value(row, column, default=None):
    value = row.get(column, default)
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return default
    if isinstance(value, str) and not value.strip():
        return default
    return value


def _number(row, column, default=None) -> Optional[float]:
    value = _value(row, column, default)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{column} must be a number, got {value!r}", field=column)


def _integer(row, column, default) -> int:
    value = _number(row, column, default)
    if not float(value).is_integer():
        raise InvalidInput(f"{column} must be a whole number, got {value!r}", field=column)
    return int(value)


def _choice(row, column, aliases, default):
    value = _value(row, column)
    if value is None:
        return default
    key = str(value).strip().lower()
    if isinstance(value, float) and value.is_integer():
        key = str(int(value))
    if key not in aliases:
        raise InvalidInput(f"Unknown {column} '{value}'", field=column)
    return aliases[key]


def request_from_row(row) -> SizingRequest:
    """Build a SizingRequest from one schedule row (a mapping or a pandas Series)."""
    standard = _choice(row, "Standard", {s.value.lower(): s for s in Standard}, Standard.IEC)
    rules = get_rules(standard)
    phase = _choice(row, "Phase", PHASE_ALIASES, PhaseConfig.SINGLE)
    voltage = _number(row, "Voltage", rules.default_system_voltage)
    pf = _number(row, "PF", 1.0)

    current = _number(row, "Current")
    if current is None:
        power = _number(row, "Power")
        if power is None:
            raise InvalidInput("Either Current or Power is required", field="Current")
        watts, override_amps = convert_power_unit(power, str(_value(row, "Unit", "kW")), voltage, phase, pf)
        current = override_amps if override_amps is not None else load_current(watts, voltage, phase, pf)

    length = _number(row, "Length")
    if length is None:
        raise InvalidInput("Length is required", field="Length")
    length = convert_length_unit(length, str(_value(row, "LengthUnit", rules.length_unit)), standard)

    insulation = _integer(row, "Insulation", 75)
    try:
        insulation = InsulationRating(insulation)
    except ValueError:
        raise InvalidInput(f"Invalid insulation rating {insulation}. Use 60, 70, 75, or 90°C.", field="Insulation")

    return SizingRequest(
        system_voltage=voltage,
        current=current,
        length=length,
        material=_choice(row, "Material", MATERIAL_ALIASES, ConductorMaterial.COPPER),
        installation_method=_choice(row, "Method", {m.value: m for m in InstallationMethod},
                                    InstallationMethod.CONDUIT),
        ambient_temp_c=_number(row, "Ambient", 30.0),
        phase=phase,
        conductor_count=_integer(row, "Conductors", 3),
        insulation=insulation,
        standard=standard,
        max_voltage_drop_percent=_number(row, "MaxVD", 3.0),
        fault_current_ka=_number(row, "FaultKA"),
    )


def requests_from_frame(df: pd.DataFrame) -> List[RowRequest]:
    """One (name, request-or-error) pair per row; a bad row never stops the batch."""
    rows = []
    for position, (_, row) in enumerate(df.iterrows(), start=1):
        name = str(_value(row, "Name", f"Circuit {position}"))
        try:
            rows.append((name, request_from_row(row)))
        except SizingError as exc:
            logger.info("Row %s rejected: %s", name, exc.message)
            rows.append((name, exc))
    return rows


def size_schedule(df: pd.DataFrame, policy: Optional[SizingPolicy] = None) -> pd.DataFrame:
    records = []
    for name, request in requests_from_frame(df):
        if isinstance(request, SizingError):
            records.append({"Name": name, "Notes": f"Error: {request.message}"})
            continue

        outcome = size_conductor(request, policy)
        if not outcome.ok:
            records.append({"Name": name, "Standard": request.standard.value,
                            "Notes": f"Error: {outcome.error.message}"})
            continue

        res = outcome.result
        records.append({
            "Name": name,
            "Standard": request.standard.value,
            "I (A)": round(request.current, 1),
            "Size": res.recommended_size.formatted_size,
            "Runs": res.recommended_size.conductors_per_phase,
            "Base (A)": res.ampacity.base_ampacity,
            "Derated (A)": res.ampacity.derated_ampacity,
            "Utilization (%)": res.ampacity.utilization_percent,
            "VD (V)": res.voltage_drop.voltage_drop,
            "VD (%)": res.voltage_drop.voltage_drop_percent,
            "Compliant": res.compliance.is_fully_compliant,
            "Earth": res.earth_conductor.formatted_size,
            "Notes": "; ".join(res.warnings),
        })
    return pd.DataFrame(records, columns=RESULT_COLUMNS)


def catalog_frame(standard: Standard, material: ConductorMaterial) -> pd.DataFrame:
    rules = get_rules(standard)
    return pd.DataFrame([{
        "Size": e.label,
        "mm²": e.size_metric,
        "60C (A)": e.ampacity_60,
        "75C (A)" if standard is Standard.NEC else "70C (A)": e.ampacity_75,
        "90C (A)": e.ampacity_90,
        f"R ({rules.resistance_unit})": rules.resistance(e),
    } for e in all_sizes(standard, material)])


def _style_header(ws):
    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
    for col in ws.columns:
        ws.column_dimensions[col[0].column_letter].width = 15


def export_schedule(results: pd.DataFrame, path, standards=None):
    """Write results plus the catalog tables of the standards involved to an .xlsx workbook."""
    if standards is None:
        used = results["Standard"].dropna().unique() if "Standard" in results else []
        standards = [Standard(s) for s in used] or [Standard.IEC]

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        results.to_excel(writer, sheet_name="Circuits", index=False)
        _style_header(writer.sheets["Circuits"])

        for standard in standards:
            for material in ConductorMaterial:
                sheet = f"{standard.value} {material.value}"
                catalog_frame(standard, material).to_excel(writer, sheet_name=sheet, index=False)
                _style_header(writer.sheets[sheet])

    logger.info("Schedule written to %s", path)


def read_schedule(path) -> pd.DataFrame:
    if str(path).lower().endswith(".csv"):
        return pd.read_csv(path)
    return pd.read_excel(path)


def template_frame() -> pd.DataFrame:
    data = [
        {"Name": "Lighting", "Standard": "IEC", "Voltage": 230, "Power": 3.5, "Unit": "kW", "PF": 0.95,
         "Length": 40, "LengthUnit": "m", "Phase": "single", "Material": "copper", "Method": "conduit",
         "Ambient": 30, "Conductors": 3, "Insulation": 70, "MaxVD": 3},
        {"Name": "Pump", "Standard": "NEC", "Voltage": 480, "Current": 65, "Length": 250, "LengthUnit": "ft",
         "Phase": "three", "Material": "copper", "Method": "conduit", "Ambient": 40, "Conductors": 3,
         "Insulation": 75, "MaxVD": 3},
    ]
    return pd.DataFrame(data, columns=INPUT_COLUMNS)
