# src/narcviz/app.py
"""
narcdetect command line: collect inputs (flags first, prompts for the rest),
print the detection report and concentration chart, optionally the spectrum.

Exit status: 0 success, 1 unknown substance or route, 2 invalid input.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Optional, Sequence

import numpy as np

from narcengine.dosing import make_inputs
from narcengine.errors import SelectionNotFound
from narcengine.reference import resolve_route, resolve_substance, substance_profile
from narcengine.settings import load_settings
from narcengine.simulate import calculate
from narcengine.spectrum import synthesize, synthesize_curve
from narcviz.ui.controls import ControlsPanel, SessionRequest
from narcviz.ui.plots import ConcentrationChart, SpectrumChart
from narcviz.ui.report import format_report, matrix_summary

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_INVALID = 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="narcdetect",
                                     description="Drug detection time calculator for oral fluid and urine")
    parser.add_argument("--substance", type=str, help="Substance name or synonym (e.g. HEROIN)")
    parser.add_argument("--route", type=str, help="Route name or abbreviation (e.g. IV, PO)")
    parser.add_argument("--dose", type=int, help="Dose per administration (mg)")
    parser.add_argument("--weight", type=int, help="Body weight (kg)")
    parser.add_argument("--age", type=int, help="Age (years)")
    parser.add_argument("--metabolism", type=int, choices=[1, 2, 3], help="1=slow, 2=normal, 3=fast")
    parser.add_argument("--duration", type=float, help="Duration of use (h)")
    spectrum = parser.add_mutually_exclusive_group()
    spectrum.add_argument("--spectrum", dest="spectrum", action="store_true", default=None,
                          help="Also render the identification spectrum")
    spectrum.add_argument("--no-spectrum", dest="spectrum", action="store_false",
                          help="Skip the spectrum")
    parser.add_argument("--seed", type=int, help="Seed for the spectrum peak-width jitter")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS,
                        help="Log level (default from NARC_LOG_LEVEL)")
    parser.add_argument("--no-banner", action="store_true", help="Do not print the title banner")
    return parser


def _request_from_args(args: argparse.Namespace) -> SessionRequest:
    return SessionRequest(
        substance=args.substance,
        route=args.route,
        dose_mg=args.dose,
        weight_kg=args.weight,
        age_years=args.age,
        metabolism=args.metabolism,
        duration_h=args.duration,
        spectrum=args.spectrum,
    )


def main(argv: Optional[Sequence[str]] = None, *, read: Callable[[str], str] = input,
         write: Callable[[str], None] = print) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings()
    level = args.log_level or settings.log_level
    if level not in LOG_LEVELS:
        parser.error(f"NARC_LOG_LEVEL: invalid choice: {level!r} (choose from {', '.join(LOG_LEVELS)})")
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    controls = ControlsPanel(read=read, write=write)
    req = _request_from_args(args)
    if not args.no_banner:
        controls.show_banner()

    try:
        substance = resolve_substance(req.substance if req.substance is not None else controls.ask_substance())
    except SelectionNotFound:
        write("Invalid drug selection. Exiting.")
        return EXIT_NOT_FOUND
    try:
        route = resolve_route(req.route if req.route is not None else controls.ask_route())
    except SelectionNotFound:
        write("Invalid route selection. Exiting.")
        return EXIT_NOT_FOUND

    try:
        req = controls.complete(req)
        inputs = make_inputs(req.dose_mg, req.weight_kg, req.age_years, req.metabolism, req.duration_h)
        calc = calculate(substance, route, inputs, nominal_dose_mg=settings.fentanyl_nominal_mg)
    except ValueError as exc:
        write(f"Error: {exc}")
        return EXIT_INVALID

    report = calc.report
    logger.info(matrix_summary(report))
    res = report.results[calc.matrix]
    chart = ConcentrationChart(calc.t, calc.C, cutoff=res.cutoff_ng_ml, duration_h=inputs.duration_h,
                               num_doses=res.num_doses, absorption_h=report.adjusted.absorption_h,
                               halflife_h=res.halflife_h)
    write(format_report(report))
    write(chart.render())

    want_spectrum = req.spectrum
    if want_spectrum is None:
        want_spectrum = controls.ask_yes_no("Generate NMR spectrum simulation? (Y/N): ")
    if want_spectrum:
        seed = args.seed if args.seed is not None else settings.spectrum_seed
        peaks = synthesize(substance, rng=np.random.default_rng(seed))
        # the entered dose stands in for the sample concentration
        curve = synthesize_curve(peaks, inputs.dose_mg)
        name = substance_profile(substance).name
        write(SpectrumChart(substance, name, inputs.dose_mg, peaks, curve).render())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
