from typing import Dict, Tuple

from conductor_sizing.core.models import CatalogEntry, ConductorMaterial, Standard

PVC = 70
XLPE = 90

# IEC 60364-5-52 Table B.52.14 - Correction factors for ambient air temperatures other than 30°C
# Format: {Temp_Range_Tuple: {Insulation_Temp: Factor}}
TEMP_CORRECTION_FACTORS = {
    (-40, 30): {PVC: 1.00, XLPE: 1.00},
    (31, 35): {PVC: 0.94, XLPE: 0.96},
    (36, 40): {PVC: 0.87, XLPE: 0.91},
    (41, 45): {PVC: 0.79, XLPE: 0.87},
    (46, 50): {PVC: 0.71, XLPE: 0.82},
    (51, 55): {PVC: 0.61, XLPE: 0.76},
    (56, 60): {PVC: 0.50, XLPE: 0.71},
    (61, 65): {PVC: 0.35, XLPE: 0.65},
    (66, 70): {PVC: 0.00, XLPE: 0.58},
    (71, 75): {PVC: 0.00, XLPE: 0.50},
    (76, 80): {PVC: 0.00, XLPE: 0.41},
}

# IEC 60364-5-52 Table B.52.17 - Reduction factors for groups of more than one circuit
# Format: {Circuits: {Reference_Method: Factor}}
GROUPING_FACTORS = {
    1: {"A": 1.00, "B": 1.00, "C": 1.00, "E": 1.00},
    2: {"A": 0.80, "B": 0.85, "C": 0.85, "E": 0.88},
    3: {"A": 0.70, "B": 0.79, "C": 0.79, "E": 0.82},
    4: {"A": 0.65, "B": 0.75, "C": 0.75, "E": 0.77},
    5: {"A": 0.60, "B": 0.73, "C": 0.73, "E": 0.75},
    6: {"A": 0.57, "B": 0.72, "C": 0.72, "E": 0.73},
    7: {"A": 0.54, "B": 0.70, "C": 0.70, "E": 0.73},
    8: {"A": 0.52, "B": 0.70, "C": 0.70, "E": 0.72},
    9: {"A": 0.50, "B": 0.70, "C": 0.70, "E": 0.72},
    12: {"A": 0.45, "B": 0.65, "C": 0.65, "E": 0.70},
    16: {"A": 0.41, "B": 0.60, "C": 0.60, "E": 0.68},
    20: {"A": 0.38, "B": 0.57, "C": 0.57, "E": 0.66},
}

# IEC 60364-5-52 Table B.52.4 - Current-carrying capacities, copper conductors in conduit
# Format: {Size_mm2: ((60C, 70C, 90C) Amps, mV/A/m, Ohm/1000ft)}
IEC_B52_4_COPPER = {
    "1.5": ((14, 17.5, 22), 12.1, 4.59),
    "2.5": ((19, 23, 30), 7.41, 2.81),
    "4": ((25, 31, 40), 4.61, 1.75),
    "6": ((32, 40, 51), 3.08, 1.17),
    "10": ((44, 54, 70), 1.83, 0.695),
    "16": ((59, 68, 94), 1.15, 0.437),
    "25": ((77, 89, 119), 0.727, 0.276),
    "35": ((96, 110, 148), 0.524, 0.199),
    "50": ((117, 133, 180), 0.387, 0.147),
    "70": ((149, 168, 232), 0.268, 0.102),
    "95": ((180, 201, 282), 0.193, 0.0733),
    "120": ((208, 232, 328), 0.153, 0.0581),
    "150": ((236, 258, 374), 0.124, 0.0471),
    "185": ((268, 289, 424), 0.0991, 0.0376),
    "240": ((315, 341, 500), 0.0754, 0.0286),
    "300": ((360, 384, 561), 0.0601, 0.0228),
    "400": ((410, 430, 656), 0.0470, 0.0178),
    "500": ((470, 490, 749), 0.0366, 0.0139),
    "630": ((540, 560, 855), 0.0283, 0.0107),
}

IEC_B52_4_ALUMINUM = {
    "2.5": ((14.5, 18, 23), 12.1, 4.59),
    "4": ((19.5, 24, 31), 7.54, 2.86),
    "6": ((25, 31, 40), 5.03, 1.91),
    "10": ((34, 42, 54), 3.00, 1.14),
    "16": ((46, 53, 73), 1.88, 0.714),
    "25": ((60, 69, 92), 1.19, 0.452),
    "35": ((75, 86, 115), 0.858, 0.326),
    "50": ((92, 104, 140), 0.633, 0.240),
    "70": ((116, 131, 180), 0.439, 0.167),
    "95": ((140, 157, 219), 0.316, 0.120),
    "120": ((162, 181, 254), 0.250, 0.0950),
    "150": ((184, 201, 290), 0.203, 0.0771),
    "185": ((209, 225, 329), 0.162, 0.0615),
    "240": ((246, 266, 388), 0.123, 0.0467),
    "300": ((281, 300, 435), 0.0986, 0.0374),
    "400": ((322, 335, 510), 0.0770, 0.0292),
    "500": ((368, 382, 582), 0.0600, 0.0228),
}

# Standard cross-sections used when rounding protective conductors up (mm2)
STANDARD_SIZES_MM2 = [1.5, 2.5, 4, 6, 10, 16, 25, 35, 50, 70, 95, 120, 150, 185, 240, 300, 400, 500, 630]


def _build(rows: Dict[str, Tuple[Tuple[float, float, float], float, float]],
           material: ConductorMaterial) -> Tuple[CatalogEntry, ...]:
    entries = []
    for size, ((amps_60, amps_70, amps_90), mv_am, ohm_kft) in rows.items():
        entries.append(CatalogEntry(
            standard=Standard.IEC,
            material=material,
            size_metric=size,
            size_imperial=None,
            # The 75 column carries the PVC (70°C) ratings for IEC data
            ampacity_60=amps_60,
            ampacity_75=amps_70,
            ampacity_90=amps_90,
            resistance_mv_am=mv_am,
            resistance_ohm_per_kft=ohm_kft,
        ))
    return tuple(entries)


IEC_COPPER_CATALOG = _build(IEC_B52_4_COPPER, ConductorMaterial.COPPER)
IEC_ALUMINUM_CATALOG = _build(IEC_B52_4_ALUMINUM, ConductorMaterial.ALUMINUM)


def get_temp_correction(temp_c: float, insulation_temp: int) -> float:
    factor = 1.0
    for (_, max_t), factors in TEMP_CORRECTION_FACTORS.items():
        factor = factors[insulation_temp]
        if temp_c <= max_t:
            break
    return factor


def get_grouping_factor(circuits: int, method: str) -> float:
    factor = GROUPING_FACTORS[1][method]
    for limit in sorted(GROUPING_FACTORS.keys()):
        factor = GROUPING_FACTORS[limit][method]
        if circuits <= limit:
            break
    # Beyond 20 circuits the lowest tabulated value holds
    return factor
