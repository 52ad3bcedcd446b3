import unittest

from conductor_sizing.core.errors import SizeNotFound
from conductor_sizing.core.models import ConductorMaterial, InsulationRating, Standard
from conductor_sizing.engine.ampacity import base_ampacity
from conductor_sizing.engine.catalog import all_sizes, largest, lookup, practical_sizes
from conductor_sizing.standards.registry import RULES


class TestCatalog(unittest.TestCase):

    def test_nec_selectors(self):
        for selector in ["4/0", "4/0 AWG", "4/0 awg"]:
            entry = lookup(Standard.NEC, ConductorMaterial.COPPER, selector)
            self.assertEqual(entry.size_imperial, "4/0")
            self.assertEqual(entry.ampacity_75, 230)

        for selector in ["250", "250 kcmil", "250 MCM", 250, 250.0]:
            entry = lookup(Standard.NEC, ConductorMaterial.COPPER, selector)
            self.assertEqual(entry.size_imperial, "250")
        self.assertEqual(entry.label, "250 kcmil")

    def test_iec_selectors(self):
        for selector in ["16", "16 mm²", "16mm2", 16, 16.0]:
            entry = lookup(Standard.IEC, ConductorMaterial.COPPER, selector)
            self.assertEqual(entry.size_metric, "16")
            self.assertIsNone(entry.size_imperial)
        self.assertEqual(lookup(Standard.IEC, ConductorMaterial.ALUMINUM, 2.5).label, "2.5 mm²")

    def test_selectors_do_not_cross_standards(self):
        print("\n--- TEST: Metric and imperial selectors stay in their own tables ---")
        with self.assertRaises(SizeNotFound):
            lookup(Standard.IEC, ConductorMaterial.COPPER, "4/0")
        with self.assertRaises(SizeNotFound):
            lookup(Standard.NEC, ConductorMaterial.COPPER, "16 mm²")
        with self.assertRaises(SizeNotFound):
            lookup(Standard.NEC, ConductorMaterial.COPPER, "16")
        with self.assertRaises(SizeNotFound) as ctx:
            lookup(Standard.IEC, ConductorMaterial.COPPER, "17")
        self.assertEqual(ctx.exception.code, "size_not_found")

    def test_table_ordering(self):
        print("\n--- TEST: Catalog tables ascend in size and ampacity ---")
        for standard in Standard:
            rules = RULES[standard]
            for material in ConductorMaterial:
                entries = all_sizes(standard, material)
                self.assertGreater(len(entries), 10)
                for smaller, bigger in zip(entries, entries[1:]):
                    self.assertLess(smaller.area_mm2, bigger.area_mm2)
                    self.assertLessEqual(smaller.ampacity_60, bigger.ampacity_60)
                    self.assertLessEqual(smaller.ampacity_75, bigger.ampacity_75)
                    self.assertLessEqual(smaller.ampacity_90, bigger.ampacity_90)
                    self.assertGreater(rules.resistance(smaller), rules.resistance(bigger))
                    self.assertIs(smaller.standard, standard)
                    self.assertIs(smaller.material, material)

    def test_table_extent(self):
        nec_cu = all_sizes(Standard.NEC, ConductorMaterial.COPPER)
        self.assertEqual((nec_cu[0].size_imperial, nec_cu[-1].size_imperial), ("14", "1000"))
        nec_al = all_sizes(Standard.NEC, ConductorMaterial.ALUMINUM)
        self.assertEqual((nec_al[0].size_imperial, nec_al[-1].size_imperial), ("12", "1000"))
        iec_cu = all_sizes(Standard.IEC, ConductorMaterial.COPPER)
        self.assertEqual((iec_cu[0].size_metric, iec_cu[-1].size_metric), ("1.5", "630"))
        self.assertEqual(largest(Standard.IEC, ConductorMaterial.ALUMINUM).size_metric, "500")

    def test_all_sizes_is_restartable(self):
        first = all_sizes(Standard.IEC, ConductorMaterial.COPPER)
        second = all_sizes(Standard.IEC, ConductorMaterial.COPPER)
        self.assertIsInstance(first, tuple)
        self.assertEqual(list(first), list(second))

    def test_practical_sizes(self):
        band = practical_sizes(Standard.NEC, ConductorMaterial.COPPER, "1/0")
        self.assertEqual(band[0].size_imperial, "1/0")
        self.assertEqual(band[-1].size_imperial, "1000")
        band = practical_sizes(Standard.IEC, ConductorMaterial.ALUMINUM, "50")
        self.assertEqual(band[0].size_metric, "50")

    def test_labels(self):
        self.assertEqual(lookup(Standard.NEC, ConductorMaterial.COPPER, "8").label, "8 AWG")
        self.assertEqual(lookup(Standard.NEC, ConductorMaterial.COPPER, "1/0").label, "1/0 AWG")
        self.assertEqual(lookup(Standard.NEC, ConductorMaterial.COPPER, "500").label, "500 kcmil")
        self.assertEqual(lookup(Standard.IEC, ConductorMaterial.COPPER, "240").label, "240 mm²")

    def test_ampacity_column_lookup(self):
        entry = lookup(Standard.NEC, ConductorMaterial.COPPER, "8")
        self.assertEqual(entry.ampacity_at(60), 40)
        self.assertEqual(entry.ampacity_at(90), 55)
        with self.assertRaises(ValueError):
            entry.ampacity_at(70)

    def test_base_ampacity_by_insulation(self):
        print("\n--- TEST: Insulation rating selects the ampacity column ---")
        iec = lookup(Standard.IEC, ConductorMaterial.COPPER, "1.5")
        self.assertEqual(base_ampacity(iec, InsulationRating.TEMP_60), 14)
        self.assertEqual(base_ampacity(iec, InsulationRating.TEMP_70), 17.5)
        self.assertEqual(base_ampacity(iec, InsulationRating.TEMP_75), 17.5)
        self.assertEqual(base_ampacity(iec, InsulationRating.TEMP_90), 22)
        al = lookup(Standard.IEC, ConductorMaterial.ALUMINUM, "2.5")
        self.assertEqual(base_ampacity(al, InsulationRating.TEMP_60), 14.5)

        nec = lookup(Standard.NEC, ConductorMaterial.COPPER, "8")
        self.assertEqual(base_ampacity(nec, InsulationRating.TEMP_60), 40)
        self.assertEqual(base_ampacity(nec, InsulationRating.TEMP_70), 50)
        self.assertEqual(base_ampacity(nec, InsulationRating.TEMP_90), 55)

    def test_registry_covers_every_standard(self):
        self.assertEqual(set(RULES), set(Standard))
        for standard, rules in RULES.items():
            self.assertIs(rules.standard, standard)


if __name__ == '__main__':
    unittest.main()
