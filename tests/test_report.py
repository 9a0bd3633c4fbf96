from narcengine.dosing import make_inputs
from narcengine.helpers import normalize_name, split_hours
from narcengine.simulate import calculate, run_calculation
from narcengine.types import Matrix, Route, Substance
from narcviz.ui.report import format_detection_time, format_report, matrix_summary


def test_split_hours():
    span = split_hours(25.5)
    assert span.total_seconds == 91800
    assert (span.days, span.hours, span.minutes, span.seconds) == (1, 1, 30, 0)
    assert span.whole_hours == 25
    assert split_hours(0.0) == (0, 0, 0, 0, 0)


def test_normalize_name():
    assert normalize_name("  under \t tongue ") == "UNDER TONGUE"


def test_report_lists_both_matrices():
    calc = run_calculation("heroin", "iv", make_inputs(100, 70, 30, 2, 24.0))
    text = format_report(calc.report)
    assert "DETECTION TIME CALCULATION FOR DIAMORPHINE" in text
    assert "PHARMACOKINETIC DATA (SALIVA):" in text
    assert "PHARMACOKINETIC DATA (URINE):" in text
    # the schedule is only printed once
    assert text.count("Dosing interval:") == 1
    assert "DETECTION TIME (SALIVA):" in text
    assert "DETECTION TIME (URINE):" in text
    assert "METABOLITE INFO: 6-MAM" in text
    assert "(constant)" not in text


def test_fentanyl_report_shows_constant_dose():
    calc = calculate(Substance.FENTANYL, Route.TRANSDERMAL, make_inputs(2, 70, 30, 2, 72.0))
    text = format_report(calc.report)
    assert "Fentanyl dose: 1000 mg (constant)" in text
    assert "Route: TRANSDERMAL (Bioavail 92.0%, Abs rate 12.00 hr)" in text


def test_undetectable_time_formats_as_zero():
    calc = calculate(Substance.AMPHETAMINE, Route.ORAL, make_inputs(10, 70, 30, 2, 24.0))
    lines = format_detection_time(calc.report.results[Matrix.SALIVA])
    assert lines[0] == "DETECTION TIME (SALIVA): 0 seconds"
    assert lines[2] == "FULL FORMAT: 0 days, 0 hours, 0 minutes, 0 seconds"
    assert matrix_summary(calc.report).startswith("AMPHETAMINE/ORAL SALIVA:")
