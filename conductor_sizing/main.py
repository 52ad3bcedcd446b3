import argparse
import json
import logging
import sys

import pandas as pd

from conductor_sizing.core.errors import SizingError
from conductor_sizing.core.models import InstallationMethod, SizingResult
from conductor_sizing.engine.sizing import size_conductor
from conductor_sizing.schedule import (
    export_schedule, read_schedule, request_from_row, size_schedule, template_frame,
)

EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="conductor-size",
        description="Conductor sizing by ampacity and voltage drop (IEC 60364-5-52 / NEC 2020)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log search decisions")
    sub = parser.add_subparsers(dest="command", required=True)

    size = sub.add_parser("size", help="Size a single circuit")
    size.add_argument("--standard", choices=["IEC", "NEC"], default="IEC")
    size.add_argument("--voltage", type=float, help="System voltage (default 230 V IEC, 120 V NEC)")
    load = size.add_mutually_exclusive_group(required=True)
    load.add_argument("--current", type=float, help="Load current (A)")
    load.add_argument("--power", type=float, help="Load power, see --unit")
    size.add_argument("--unit", default="kW", help="Power unit: W, kW, MW, HP, VA, kVA, MVA")
    size.add_argument("--pf", type=float, default=1.0, help="Power factor")
    size.add_argument("--length", type=float, required=True, help="One-way run length")
    size.add_argument("--length-unit", help="m, ft, yd or km (default m for IEC, ft for NEC)")
    size.add_argument("--phase", choices=["single", "three"], default="single")
    size.add_argument("--material", choices=["copper", "aluminum"], default="copper")
    size.add_argument("--method", choices=[m.value for m in InstallationMethod], default="conduit")
    size.add_argument("--ambient", type=float, default=30.0, help="Ambient temperature (°C)")
    size.add_argument("--conductors", type=int, default=3, help="Current-carrying conductors grouped together")
    size.add_argument("--insulation", type=int, choices=[60, 70, 75, 90], default=75)
    size.add_argument("--max-vd", type=float, default=3.0, help="Voltage drop limit (%%)")
    size.add_argument("--fault-ka", type=float, help="Prospective earth fault current (kA)")
    size.add_argument("--clearing-time", type=float, default=0.4, help="Fault clearing time (s)")
    size.add_argument("--json", action="store_true", help="Print the full result as JSON")
    size.add_argument("--export", help="Write the result to an .xlsx workbook")

    schedule = sub.add_parser("schedule", help="Size every circuit of a schedule (.xlsx or .csv)")
    schedule.add_argument("input")
    schedule.add_argument("-o", "--output", help="Write results to an .xlsx workbook")

    template = sub.add_parser("template", help="Write an example schedule workbook")
    template.add_argument("output")
    return parser


def _row_from_args(args) -> dict:
    return {
        "Name": "Circuit",
        "Standard": args.standard,
        "Voltage": args.voltage,
        "Current": args.current,
        "Power": args.power,
        "Unit": args.unit,
        "PF": args.pf,
        "Length": args.length,
        "LengthUnit": args.length_unit,
        "Phase": args.phase,
        "Material": args.material,
        "Method": args.method,
        "Ambient": args.ambient,
        "Conductors": args.conductors,
        "Insulation": args.insulation,
        "MaxVD": args.max_vd,
        "FaultKA": args.fault_ka,
    }


def print_result(result: SizingResult):
    rec = result.recommended_size
    vd = result.voltage_drop
    amp = result.ampacity
    der = result.derating
    util = f"{amp.utilization_percent:.1f} %" if amp.utilization_percent is not None else "n/a"

    print("-" * 70)
    print(f"{'Recommended size':<24} | {rec.formatted_size}")
    print(f"{'Base ampacity':<24} | {amp.base_ampacity} A")
    print(f"{'Derated ampacity':<24} | {amp.derated_ampacity} A")
    print(f"{'Utilization':<24} | {util}")
    print(f"{'Derating (temp x group)':<24} | {der.temperature_factor} x {der.grouping_factor} = {der.total_factor}")
    warn = " (!)" if vd.is_violation else ""
    print(f"{'Voltage drop':<24} | {vd.voltage_drop:.2f} V ({vd.voltage_drop_percent:.2f} %){warn}")
    print(f"{'Earth conductor':<24} | {result.earth_conductor.formatted_size}")
    print(f"{'Fully compliant':<24} | {'yes' if result.compliance.is_fully_compliant else 'NO'}")
    print("-" * 70)

    if result.alternative_sizes:
        print("Alternatives: " + ", ".join(e.label for e in result.alternative_sizes))
    if result.parallel_run_options:
        print("\nParallel options:")
        print(f"{'Configuration':<30} | {'Total (A)':<10} | {'% VD':<6} | {'Score':<5} | OK")
        for opt in result.parallel_run_options:
            print(f"{opt.formatted_size:<30} | {opt.total_derated_ampacity:<10} | "
                  f"{opt.voltage_drop.voltage_drop_percent:<6.2f} | {opt.cost_efficiency:<5} | "
                  f"{'yes' if opt.is_compliant else 'no'}")
    if result.warnings:
        print("\nWarnings:")
        for w in result.warnings:
            print(f"  - {w}")
    print("\nReferences: " + "; ".join(result.standard_references))


def run_size(args) -> int:
    row = _row_from_args(args)
    try:
        request = request_from_row(row)
    except SizingError as exc:
        print(f"[ERROR] {exc.message}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    outcome = size_conductor(request)
    if not outcome.ok:
        print(f"[ERROR] {outcome.error.message}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    if args.json:
        print(json.dumps(outcome.result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_result(outcome.result)

    if args.export:
        export_schedule(size_schedule(pd.DataFrame([row])), args.export)
        print(f"\n[INFO] Excel generated: {args.export}")
    return 0


def run_schedule(args) -> int:
    results = size_schedule(read_schedule(args.input))
    with pd.option_context("display.max_columns", None, "display.width", 200,
                           "display.max_colwidth", 40):
        print(results.drop(columns=["Notes"]).to_string(index=False))
    if args.output:
        export_schedule(results, args.output)
        print(f"\n[INFO] Excel generated: {args.output}")
    return 0


def run_template(args) -> int:
    frame = template_frame()
    if str(args.output).lower().endswith(".csv"):
        frame.to_csv(args.output, index=False)
    else:
        frame.to_excel(args.output, index=False, engine="openpyxl")
    print(f"[INFO] Template written: {args.output}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    commands = {"size": run_size, "schedule": run_schedule, "template": run_template}
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
