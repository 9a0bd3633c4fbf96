# src/narcviz/ui/report.py
from narcengine.helpers import split_hours
from narcengine.types import DetectionReport, DetectionResult, Matrix

RULE = "=" * 68

DISCLAIMERS = (
    "Estimates based on population averages",
    "Individual variation can be significant",
    "Chronic use calculations are simplified",
    "Assumes regular dosing intervals",
    "Route-specific parameters are estimates",
    "For research/educational use only",
)


def _matrix_block(res: DetectionResult, with_schedule: bool) -> list[str]:
    lines = [
        f"PHARMACOKINETIC DATA ({res.matrix.label}):",
        f"  Half-life: {res.halflife_h:.1f} hours",
        f"  Cutoff: {res.cutoff_ng_ml:.1f} ng/mL",
    ]
    if with_schedule:
        lines += [
            f"  Dosing interval: {res.dosing_interval_h:.1f} hours",
            f"  Number of doses: {res.num_doses}",
        ]
    lines += [
        f"  Single dose conc: {res.single_conc:.2f} ng/mL",
        f"  Total accum conc: {res.total_conc:.2f} ng/mL",
        f"  Elim rate: {res.elim_rate:.4f} /hour",
        f"  Accumulation factor: {res.accumulation:.3f}",
        f"  Steady-state conc: {res.steady_conc:.2f} ng/mL",
        f"  Buildup to SS: {res.buildup_pct:.1f}%",
    ]
    return lines


def format_detection_time(res: DetectionResult) -> list[str]:
    span = split_hours(res.detection_time_h)
    return [
        f"DETECTION TIME ({res.matrix.label}): {res.detection_time_h * 3600.0:.0f} seconds",
        f"EQUIVALENT TO: {span.whole_hours} hours, {span.minutes} minutes, {span.seconds} seconds",
        f"FULL FORMAT: {span.days} days, {span.hours} hours, {span.minutes} minutes, {span.seconds} seconds",
    ]


def format_report(report: DetectionReport) -> str:
    """Plain-text detection report: inputs, one PK block per matrix, detection times."""
    inp = report.inputs
    adj = report.adjusted
    out = [
        RULE,
        f"DETECTION TIME CALCULATION FOR {report.substance.name}",
        RULE,
        "",
        "INPUT PARAMETERS:",
        f"  Dosage: {inp.dose_mg:g} mg",
        f"  Weight: {inp.weight_kg:g} kg",
        f"  Age: {inp.age_years:g} years",
        f"  Metabolism: {inp.metabolism.name}",
        f"  Duration of use: {inp.duration_h:.1f} hours ({inp.duration_h / 24.0:.2f} days)",
        f"  Route: {report.route.name} (Bioavail {adj.bioavailability * 100.0:.1f}%, "
        f"Abs rate {adj.absorption_h:.2f} hr)",
    ]
    if report.dose_overridden:
        out.append(f"  {report.substance.name.capitalize()} dose: {report.effective_dose_mg:.0f} mg (constant)")

    for i, res in enumerate(report.results.values()):
        out.append("")
        out.extend(_matrix_block(res, with_schedule=(i == 0)))

    for res in report.results.values():
        out.append("")
        out.extend(format_detection_time(res))

    out += ["", f"METABOLITE INFO: {report.substance.metabolite_info}", "", "** IMPORTANT DISCLAIMERS **"]
    out.extend(f"- {d}" for d in DISCLAIMERS)
    return "\n".join(out) + "\n"


def matrix_summary(report: DetectionReport, matrix: Matrix = Matrix.SALIVA) -> str:
    """One-line summary, used in log output."""
    res = report.results[matrix]
    return (f"{report.substance.name}/{report.route.name} {matrix.label}: "
            f"total {res.total_conc:.3f} ng/mL, detectable {res.detection_time_h:.2f} h")
