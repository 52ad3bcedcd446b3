from typing import Dict, Tuple

from conductor_sizing.core.models import CatalogEntry, ConductorMaterial, Standard

# NEC Table 310.15(B)(1) - Ambient Temperature Correction Factors
# Based on 30°C base ambient
# Format: {Temp_Range_Tuple: {Insulation_Rating: Factor}}
TEMP_CORRECTION_FACTORS = {
    (-40, 10): {60: 1.29, 75: 1.20, 90: 1.15},
    (11, 15): {60: 1.22, 75: 1.15, 90: 1.12},
    (16, 20): {60: 1.15, 75: 1.11, 90: 1.08},
    (21, 25): {60: 1.08, 75: 1.05, 90: 1.04},
    (26, 30): {60: 1.00, 75: 1.00, 90: 1.00},
    (31, 35): {60: 0.91, 75: 0.94, 90: 0.96},
    (36, 40): {60: 0.82, 75: 0.88, 90: 0.91},
    (41, 45): {60: 0.71, 75: 0.82, 90: 0.87},
    (46, 50): {60: 0.58, 75: 0.75, 90: 0.82},
    (51, 55): {60: 0.41, 75: 0.67, 90: 0.76},
    (56, 60): {60: 0.00, 75: 0.58, 90: 0.71},
    (61, 65): {60: 0.00, 75: 0.47, 90: 0.65},
    (66, 70): {60: 0.00, 75: 0.33, 90: 0.58},
    (71, 75): {60: 0.00, 75: 0.00, 90: 0.50},
    (76, 80): {60: 0.00, 75: 0.00, 90: 0.41},
    (81, 85): {60: 0.00, 75: 0.00, 90: 0.29},
}

# NEC Table 310.15(C)(1) - Adjustment Factors for More Than Three Current-Carrying Conductors
# Format: {Max_Conductors: Factor}
GROUPING_FACTORS = {
    3: 1.0,
    6: 0.80,   # 4-6 conductors
    9: 0.70,   # 7-9
    20: 0.50,  # 10-20
    30: 0.45,  # 21-30
    40: 0.40,  # 31-40
}
GROUPING_FACTOR_41_PLUS = 0.35

# NEC Table 310.16 - Allowable Ampacities of Insulated Conductors
# Not more than 3 current-carrying conductors, 30°C ambient
# Format: {SizeAWG: {TempRating: Amps}}
NEC_310_16_COPPER = {
    "14": {60: 15, 75: 20, 90: 25},
    "12": {60: 20, 75: 25, 90: 30},
    "10": {60: 30, 75: 35, 90: 40},
    "8":  {60: 40, 75: 50, 90: 55},
    "6":  {60: 55, 75: 65, 90: 75},
    "4":  {60: 70, 75: 85, 90: 95},
    "3":  {60: 85, 75: 100, 90: 115},
    "2":  {60: 95, 75: 115, 90: 130},
    "1":  {60: 110, 75: 130, 90: 145},
    "1/0": {60: 125, 75: 150, 90: 170},
    "2/0": {60: 145, 75: 175, 90: 195},
    "3/0": {60: 165, 75: 200, 90: 225},
    "4/0": {60: 195, 75: 230, 90: 260},
    "250": {60: 215, 75: 255, 90: 290},
    "300": {60: 240, 75: 285, 90: 320},
    "350": {60: 260, 75: 310, 90: 350},
    "400": {60: 280, 75: 335, 90: 380},
    "500": {60: 320, 75: 380, 90: 430},
    "600": {60: 350, 75: 420, 90: 475},
    "750": {60: 400, 75: 475, 90: 535},
    "1000": {60: 455, 75: 545, 90: 615},
}

NEC_310_16_ALUMINUM = {
    "12": {60: 15, 75: 20, 90: 25},
    "10": {60: 25, 75: 30, 90: 35},
    "8":  {60: 35, 75: 40, 90: 45},
    "6":  {60: 40, 75: 50, 90: 55},
    "4":  {60: 55, 75: 65, 90: 75},
    "3":  {60: 65, 75: 75, 90: 85},
    "2":  {60: 75, 75: 90, 90: 100},
    "1":  {60: 85, 75: 100, 90: 115},
    "1/0": {60: 100, 75: 120, 90: 135},
    "2/0": {60: 115, 75: 135, 90: 150},
    "3/0": {60: 130, 75: 155, 90: 175},
    "4/0": {60: 150, 75: 180, 90: 205},
    "250": {60: 170, 75: 205, 90: 230},
    "300": {60: 190, 75: 230, 90: 255},
    "350": {60: 210, 75: 250, 90: 280},
    "400": {60: 225, 75: 270, 90: 305},
    "500": {60: 260, 75: 310, 90: 350},
    "600": {60: 285, 75: 340, 90: 385},
    "750": {60: 315, 75: 385, 90: 435},
    "1000": {60: 375, 75: 445, 90: 500},
}

# Chapter 9 Table 8 - Conductor Properties
# Equivalent cross-section in mm2
CONDUCTOR_AREA_MM2 = {
    "14": "2.08", "12": "3.31", "10": "5.26", "8": "8.37", "6": "13.3",
    "4": "21.2", "3": "26.7", "2": "33.6", "1": "42.4", "1/0": "53.5",
    "2/0": "67.4", "3/0": "85.0", "4/0": "107", "250": "127", "300": "152",
    "350": "177", "400": "203", "500": "253", "600": "304", "700": "355",
    "750": "380", "800": "405", "1000": "507", "1200": "608",
}

# DC resistance at 75°C
# Format: {SizeAWG: (Ohm/1000ft, mV/A/m)}
TABLE_8_RESISTANCE_COPPER = {
    "14": (3.14, 8.29), "12": (1.98, 5.21), "10": (1.24, 3.28),
    "8": (0.778, 2.06), "6": (0.491, 1.30), "4": (0.308, 0.815),
    "3": (0.245, 0.646), "2": (0.194, 0.513), "1": (0.154, 0.407),
    "1/0": (0.122, 0.323), "2/0": (0.0967, 0.256), "3/0": (0.0766, 0.203),
    "4/0": (0.0608, 0.161), "250": (0.0515, 0.136), "300": (0.0429, 0.113),
    "350": (0.0367, 0.0975), "400": (0.0321, 0.0850), "500": (0.0258, 0.0680),
    "600": (0.0214, 0.0567), "750": (0.0171, 0.0454), "1000": (0.0129, 0.0340),
}

TABLE_8_RESISTANCE_ALUMINUM = {
    "12": (3.25, 8.57), "10": (2.04, 5.39), "8": (1.28, 3.39),
    "6": (0.808, 2.13), "4": (0.508, 1.34), "3": (0.403, 1.06),
    "2": (0.319, 0.843), "1": (0.253, 0.668), "1/0": (0.201, 0.530),
    "2/0": (0.159, 0.420), "3/0": (0.126, 0.333), "4/0": (0.100, 0.264),
    "250": (0.0847, 0.223), "300": (0.0707, 0.186), "350": (0.0605, 0.160),
    "400": (0.0529, 0.140), "500": (0.0424, 0.112), "600": (0.0353, 0.0933),
    "750": (0.0282, 0.0746), "1000": (0.0212, 0.0560),
}

# Standard OCPD ratings (Amps) - NEC 240.6(A)
BREAKER_RATINGS = [15, 20, 25, 30, 35, 40, 45, 50, 60, 70, 80, 90, 100, 110, 125, 150, 175, 200, 225, 250,
                   300, 350, 400, 450, 500, 600, 700, 800, 1000, 1200, 1600, 2000, 2500, 3000, 4000, 5000, 6000]

# NEC Table 250.122 - Minimum Size Equipment Grounding Conductors
# Format: {OCPD_Rating: {Material: SizeAWG}}
TABLE_250_122 = {
    15: {ConductorMaterial.COPPER: "14", ConductorMaterial.ALUMINUM: "12"},
    20: {ConductorMaterial.COPPER: "12", ConductorMaterial.ALUMINUM: "10"},
    60: {ConductorMaterial.COPPER: "10", ConductorMaterial.ALUMINUM: "8"},
    100: {ConductorMaterial.COPPER: "8", ConductorMaterial.ALUMINUM: "6"},
    200: {ConductorMaterial.COPPER: "6", ConductorMaterial.ALUMINUM: "4"},
    300: {ConductorMaterial.COPPER: "4", ConductorMaterial.ALUMINUM: "2"},
    400: {ConductorMaterial.COPPER: "3", ConductorMaterial.ALUMINUM: "1"},
    500: {ConductorMaterial.COPPER: "2", ConductorMaterial.ALUMINUM: "1/0"},
    600: {ConductorMaterial.COPPER: "1", ConductorMaterial.ALUMINUM: "2/0"},
    800: {ConductorMaterial.COPPER: "1/0", ConductorMaterial.ALUMINUM: "3/0"},
    1000: {ConductorMaterial.COPPER: "2/0", ConductorMaterial.ALUMINUM: "4/0"},
    1200: {ConductorMaterial.COPPER: "3/0", ConductorMaterial.ALUMINUM: "250"},
    1600: {ConductorMaterial.COPPER: "4/0", ConductorMaterial.ALUMINUM: "350"},
    2000: {ConductorMaterial.COPPER: "250", ConductorMaterial.ALUMINUM: "400"},
    2500: {ConductorMaterial.COPPER: "350", ConductorMaterial.ALUMINUM: "600"},
    3000: {ConductorMaterial.COPPER: "400", ConductorMaterial.ALUMINUM: "600"},
    4000: {ConductorMaterial.COPPER: "500", ConductorMaterial.ALUMINUM: "750"},
    5000: {ConductorMaterial.COPPER: "700", ConductorMaterial.ALUMINUM: "1200"},
    6000: {ConductorMaterial.COPPER: "800", ConductorMaterial.ALUMINUM: "1200"},
}


def _build(ampacities: Dict[str, Dict[int, int]],
           resistances: Dict[str, Tuple[float, float]],
           material: ConductorMaterial) -> Tuple[CatalogEntry, ...]:
    entries = []
    for size, amps in ampacities.items():
        ohm_kft, mv_am = resistances[size]
        entries.append(CatalogEntry(
            standard=Standard.NEC,
            material=material,
            size_metric=CONDUCTOR_AREA_MM2[size],
            size_imperial=size,
            ampacity_60=amps[60],
            ampacity_75=amps[75],
            ampacity_90=amps[90],
            resistance_mv_am=mv_am,
            resistance_ohm_per_kft=ohm_kft,
        ))
    return tuple(entries)


NEC_COPPER_CATALOG = _build(NEC_310_16_COPPER, TABLE_8_RESISTANCE_COPPER, ConductorMaterial.COPPER)
NEC_ALUMINUM_CATALOG = _build(NEC_310_16_ALUMINUM, TABLE_8_RESISTANCE_ALUMINUM, ConductorMaterial.ALUMINUM)


def get_temp_correction(temp_c: float, insulation_rating: int) -> float:
    # First step whose upper bound covers the ambient; beyond the table the last step holds
    factor = 1.0
    for (_, max_t), distinct_ratings in TEMP_CORRECTION_FACTORS.items():
        factor = distinct_ratings[insulation_rating]
        if temp_c <= max_t:
            break
    return factor


def get_grouping_factor(count: int) -> float:
    for limit in sorted(GROUPING_FACTORS.keys()):
        if count <= limit:
            return GROUPING_FACTORS[limit]
    return GROUPING_FACTOR_41_PLUS
