import contextlib
import io
import json
import os
import tempfile
import unittest

from openpyxl import load_workbook

from conductor_sizing.main import EXIT_INVALID_INPUT, main

NEC_CIRCUIT = ["size", "--standard", "NEC", "--voltage", "240", "--current", "46.3",
               "--length", "100", "--length-unit", "ft"]


def run(argv):
    out, err = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


class TestCommandLine(unittest.TestCase):

    def test_size_table(self):
        print("\n--- TEST: conductor-size size ---")
        code, out, _ = run(NEC_CIRCUIT)
        print(out)
        self.assertEqual(code, 0)
        self.assertIn("8 AWG", out)
        self.assertIn("Alternatives: 6 AWG, 4 AWG, 3 AWG", out)
        self.assertIn("NEC 2020 Table 310.16", out)

    def test_size_json(self):
        code, out, _ = run(NEC_CIRCUIT + ["--json"])
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["recommended_size"]["formatted_size"], "8 AWG")
        self.assertTrue(data["compliance"]["is_fully_compliant"])

    def test_size_from_power(self):
        code, out, _ = run(["size", "--power", "10", "--unit", "kW", "--pf", "0.9", "--voltage", "400",
                            "--phase", "three", "--length", "60", "--json"])
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["voltage_drop"]["standard_reference"], "IEC 60364-5-52:2009")

    def test_invalid_input(self):
        code, out, err = run(["size", "--current", "0", "--length", "10"])
        self.assertEqual(code, EXIT_INVALID_INPUT)
        self.assertIn("[ERROR]", err)
        self.assertEqual(out, "")

        code, _, err = run(["size", "--current", "10", "--length", "10", "--length-unit", "cubit"])
        self.assertEqual(code, EXIT_INVALID_INPUT)
        self.assertIn("length unit", err)

    def test_template_and_schedule(self):
        with tempfile.TemporaryDirectory() as tmp:
            template = os.path.join(tmp, "template.xlsx")
            output = os.path.join(tmp, "results.xlsx")
            self.assertEqual(run(["template", template])[0], 0)
            code, out, _ = run(["schedule", template, "-o", output])
            self.assertEqual(code, 0)
            self.assertIn("Pump", out)
            self.assertIn("4 AWG", out)
            wb = load_workbook(output)
            self.assertIn("Circuits", wb.sheetnames)
            wb.close()

    def test_export_single_circuit(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "circuit.xlsx")
            code, out, _ = run(NEC_CIRCUIT + ["--export", path])
            self.assertEqual(code, 0)
            self.assertTrue(os.path.exists(path))
            self.assertIn("Excel generated", out)


if __name__ == '__main__':
    unittest.main()
