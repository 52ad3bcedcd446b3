import json
import math
import unittest
from concurrent.futures import ThreadPoolExecutor

from conductor_sizing.core.converters import load_current
from conductor_sizing.core.errors import InvalidInput
from conductor_sizing.core.models import (
    ConductorMaterial, InstallationMethod, InsulationRating, PhaseConfig, SizingRequest, Standard,
)
from conductor_sizing.core.policy import SizingPolicy
from conductor_sizing.engine.sizing import size_conductor, size_many
from conductor_sizing.engine.validation import advisory_warnings, validate_request


def serialise(result):
    return json.dumps(result.to_dict(), sort_keys=True, allow_nan=False, ensure_ascii=False)


class TestSizingScenarios(unittest.TestCase):

    def test_nec_single_phase(self):
        print("\n--- TEST: NEC 10 kW / 240 V / 100 ft ---")
        current = load_current(10000, 240, PhaseConfig.SINGLE, 0.9)
        self.assertAlmostEqual(current, 46.3, places=1)
        request = SizingRequest(system_voltage=240, current=current, length=100,
                                phase=PhaseConfig.SINGLE, standard=Standard.NEC)
        result = size_conductor(request).unwrap()
        print(f"Size: {result.recommended_size.formatted_size} | VD: {result.voltage_drop.voltage_drop_percent}%")

        self.assertEqual(result.recommended_size.formatted_size, "8 AWG")
        self.assertEqual(result.recommended_size.size_metric, "8.37")
        self.assertGreaterEqual(result.ampacity.derated_ampacity, current)
        self.assertLessEqual(result.voltage_drop.voltage_drop_percent, 3.0)
        self.assertTrue(result.compliance.is_fully_compliant)
        self.assertFalse(result.requires_parallel_runs)
        self.assertEqual(result.parallel_run_options, ())
        self.assertEqual(result.earth_conductor.formatted_size, "10 AWG")
        self.assertEqual(len(result.alternative_sizes), 3)
        self.assertTrue(any(w.startswith("High cable utilization (93%)") for w in result.warnings))
        self.assertEqual(result.standard_references, (
            "NEC 2020 Chapter 9 Table 8",
            "NEC 2020 Table 310.16",
            "NEC 310.15(B)(1), NEC 310.15(C)(1)",
            "NEC 2020 Table 250.122",
        ))

    def test_forced_parallel_iec(self):
        print("\n--- TEST: Forced parallel run, 1000 A / 300 m ---")
        request = SizingRequest(system_voltage=400, current=1000, length=300,
                                phase=PhaseConfig.THREE, standard=Standard.IEC)
        result = size_conductor(request).unwrap()
        print(f"Recommended: {result.recommended_size.formatted_size}")
        self.assertTrue(result.requires_parallel_runs)
        self.assertTrue(result.parallel_run_options)
        self.assertTrue(any(o.is_compliant for o in result.parallel_run_options))
        self.assertTrue(result.compliance.is_fully_compliant)
        self.assertGreaterEqual(result.recommended_size.conductors_per_phase, 2)
        self.assertEqual(result.alternative_sizes, ())
        self.assertIn("IEC 60364-5-52 Clause 523.7", result.standard_references)
        self.assertFalse(any("INSUFFICIENT" in w for w in result.warnings))

    def test_forced_parallel_nec(self):
        request = SizingRequest(system_voltage=480, current=1000, length=300,
                                phase=PhaseConfig.THREE, standard=Standard.NEC)
        result = size_conductor(request).unwrap()
        self.assertEqual(result.recommended_size.formatted_size, "3x 500 kcmil per phase")
        self.assertEqual(result.recommended_size.size_imperial, "500")
        self.assertEqual(result.ampacity.derated_ampacity, 1140)
        self.assertEqual(result.ampacity.base_ampacity, 1140)
        self.assertEqual(result.earth_conductor.size_imperial, "4/0")
        self.assertIn("NEC 2020 310.10(G)", result.standard_references)

    def test_extreme_ambient(self):
        print("\n--- TEST: Ambient equal to insulation rating ---")
        for standard, insulation in [(Standard.IEC, InsulationRating.TEMP_75),
                                     (Standard.NEC, InsulationRating.TEMP_90)]:
            request = SizingRequest(system_voltage=400, current=50, length=20,
                                    ambient_temp_c=insulation.value, insulation=insulation,
                                    phase=PhaseConfig.THREE, standard=standard)
            result = size_conductor(request).unwrap()
            self.assertEqual(result.derating.temperature_factor, 0.0)
            self.assertEqual(result.ampacity.derated_ampacity, 0.0)
            self.assertIsNone(result.ampacity.utilization_percent)
            self.assertFalse(result.compliance.is_fully_compliant)
            self.assertFalse(result.compliance.is_ampacity_compliant)
            self.assertTrue(result.recommended_size.formatted_size.endswith("(INSUFFICIENT)"))
            self.assertTrue(any("exceeds insulation rating" in w for w in result.warnings))
            self.assertEqual(result.warnings[0], "No standard cable size meets all requirements.")
            # Serialises without NaN or infinity
            serialise(result)

    def test_grouping_threshold(self):
        base = dict(system_voltage=230, current=20, length=10, standard=Standard.IEC)
        three = size_conductor(SizingRequest(conductor_count=3, **base)).unwrap()
        four = size_conductor(SizingRequest(conductor_count=4, **base)).unwrap()
        self.assertEqual(three.derating.grouping_factor, 1.0)
        self.assertLess(four.derating.grouping_factor, 1.0)
        # Conduit is reference method A: 2 circuits -> 0.80
        self.assertEqual(four.derating.grouping_factor, 0.8)

    def test_iec_60c_insulation_uses_60c_ratings(self):
        base = dict(system_voltage=230, current=20, length=10, standard=Standard.IEC)
        pvc = size_conductor(SizingRequest(insulation=InsulationRating.TEMP_70, **base)).unwrap()
        t60 = size_conductor(SizingRequest(insulation=InsulationRating.TEMP_60, **base)).unwrap()
        self.assertEqual(pvc.recommended_size.formatted_size, "2.5 mm²")
        self.assertEqual(pvc.ampacity.base_ampacity, 23)
        # 2.5 mm2 carries only 19 A in the 60 C column
        self.assertEqual(t60.recommended_size.formatted_size, "4 mm²")
        self.assertEqual(t60.ampacity.base_ampacity, 25)

    def test_aluminum_direct_burial(self):
        request = SizingRequest(system_voltage=400, current=120, length=80,
                                material=ConductorMaterial.ALUMINUM,
                                installation_method=InstallationMethod.DIRECT_BURIAL,
                                phase=PhaseConfig.THREE, standard=Standard.IEC)
        result = size_conductor(request).unwrap()
        self.assertTrue(result.compliance.is_fully_compliant)
        self.assertIn("Direct burial - ensure proper depth and protection per local codes", result.warnings)


class TestSizingContract(unittest.TestCase):

    def setUp(self):
        self.request = SizingRequest(system_voltage=400, current=63, length=120,
                                     phase=PhaseConfig.THREE, ambient_temp_c=40,
                                     conductor_count=6, standard=Standard.IEC)

    def test_idempotent(self):
        first = size_conductor(self.request).unwrap()
        second = size_conductor(self.request).unwrap()
        self.assertEqual(serialise(first), serialise(second))

    def test_concurrent_matches_sequential(self):
        print("\n--- TEST: Thread pool results equal sequential results ---")
        requests = [
            SizingRequest(system_voltage=v, current=i, length=l, phase=p, standard=s)
            for s, v in [(Standard.IEC, 400), (Standard.NEC, 480)]
            for i in (10, 95, 400, 1200)
            for l in (15, 150)
            for p in PhaseConfig
        ]
        sequential = [serialise(o.unwrap()) for o in size_many(requests)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            concurrent = [serialise(o.unwrap()) for o in pool.map(size_conductor, requests)]
        self.assertEqual(sequential, concurrent)

    def test_to_dict(self):
        data = size_conductor(self.request).unwrap().to_dict()
        self.assertIn("is_fully_compliant", data["compliance"])
        self.assertIn("requires_parallel_runs", data)
        self.assertEqual(data["derating"]["standard_reference"],
                         "IEC 60364-5-52 Table B.52.14, Table B.52.17")
        for entry in data["alternative_sizes"]:
            self.assertEqual(entry["standard"], "IEC")
            self.assertEqual(entry["material"], "Copper")

    def test_policy_is_honoured(self):
        result = size_conductor(self.request, SizingPolicy(alternative_count=1)).unwrap()
        self.assertLessEqual(len(result.alternative_sizes), 1)
        quiet = size_conductor(self.request, SizingPolicy(high_utilization_percent=100)).unwrap()
        self.assertFalse(any(w.startswith("High cable utilization") for w in quiet.warnings))

    def test_invalid_input_is_returned(self):
        print("\n--- TEST: Invalid input yields an error outcome ---")
        cases = {
            "current": dict(current=0),
            "length": dict(length=float("nan")),
            "system_voltage": dict(system_voltage=-230),
            "ambient_temp_c": dict(ambient_temp_c=95),
            "conductor_count": dict(conductor_count=0),
            "max_voltage_drop_percent": dict(max_voltage_drop_percent=12),
            "fault_current_ka": dict(fault_current_ka=0),
        }
        for field, overrides in cases.items():
            params = dict(system_voltage=230, current=10, length=10)
            params.update(overrides)
            outcome = size_conductor(SizingRequest(**params))
            self.assertFalse(outcome.ok, field)
            self.assertIsNone(outcome.result)
            self.assertEqual(outcome.error.code, "invalid_input")
            self.assertEqual(outcome.error.field, field)
            with self.assertRaises(InvalidInput):
                outcome.unwrap()

    def test_conductor_count_must_be_integer(self):
        outcome = size_conductor(SizingRequest(system_voltage=230, current=10, length=10, conductor_count=3.5))
        self.assertEqual(outcome.error.field, "conductor_count")

    def test_no_nan_anywhere(self):
        result = size_conductor(self.request).unwrap()
        for value in (result.voltage_drop.voltage_drop, result.voltage_drop.voltage_drop_percent,
                      result.ampacity.derated_ampacity):
            self.assertFalse(math.isnan(value))


class TestAdvisoryWarnings(unittest.TestCase):

    def test_request_observations(self):
        print("\n--- TEST: Advisory warnings ---")
        request = SizingRequest(system_voltage=24, current=10, length=250,
                                material=ConductorMaterial.ALUMINUM, ambient_temp_c=55,
                                conductor_count=24, standard=Standard.IEC)
        warnings = advisory_warnings(request)
        for w in warnings:
            print(f"  - {w}")
        self.assertIn("High ambient temperature (55°C) will significantly reduce cable ampacity", warnings)
        self.assertIn("Very high conductor count (24). Derating at this level is unusual.", warnings)
        self.assertIn("Long cable run - verify voltage drop is acceptable", warnings)
        self.assertIn("Low voltage system - voltage drop tolerance may be critical", warnings)
        self.assertIn("Aluminum conductors not typically used for small currents - consider copper", warnings)
        self.assertFalse(any(w.startswith("Extreme ambient") for w in warnings))

    def test_long_run_is_metric_only(self):
        request = SizingRequest(system_voltage=480, current=600, length=600,
                                phase=PhaseConfig.THREE, standard=Standard.NEC)
        warnings = advisory_warnings(request)
        self.assertNotIn("Long cable run - verify voltage drop is acceptable", warnings)
        self.assertIn("Very long cable run - consider intermediate substations or voltage step-up", warnings)
        self.assertIn("High current load - consider parallel conductors", warnings)

    def test_quiet_request(self):
        self.assertEqual(advisory_warnings(SizingRequest(system_voltage=230, current=16, length=20)), [])

    def test_validate_accepts_boundaries(self):
        validate_request(SizingRequest(system_voltage=230, current=16, length=20, ambient_temp_c=-40,
                                       conductor_count=100, max_voltage_drop_percent=10))


if __name__ == '__main__':
    unittest.main()
