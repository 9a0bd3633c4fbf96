import numpy as np
import pytest

from narcengine.dosing import make_inputs
from narcengine.metrics import auc_trapz, last_time_above, resolved_maxima
from narcengine.models.one_compartment import MIN_KA_PER_H, absorption_rate_constant, single_dose_curve
from narcengine.simulate import calculate
from narcengine.solvers import N_SAMPLES, plot_window_h
from narcengine.types import Matrix, Route, Substance
from narcviz.ui.plots import PLOT_WIDTH, ConcentrationChart


def test_iv_curve_starts_at_single_dose_concentration():
    """
    Intravenous absorption is instantaneous, so the first sample already
    holds the full single-dose concentration.
    """
    calc = calculate(Substance.MORPHINE, Route.INTRAVENOUS, make_inputs(100, 70, 40, 2, 24.0))
    res = calc.report.results[Matrix.SALIVA]

    assert calc.matrix is Matrix.SALIVA
    assert len(calc.t) == len(calc.C) == N_SAMPLES
    assert np.isclose(calc.C[0], res.single_conc)
    assert calc.t[-1] == pytest.approx(plot_window_h(24.0, res.halflife_h))
    assert np.all(calc.C >= 0.0)


def test_oral_curve_rises_from_zero():
    calc = calculate(Substance.OXYCODONE, Route.ORAL, make_inputs(100, 70, 40, 2, 24.0))
    assert calc.C[0] == 0.0
    assert calc.C.max() > 0.0


def test_plot_window_has_a_floor():
    assert plot_window_h(0.0, 0.5) == 24.0
    assert plot_window_h(24.0, 4.0) == 56.0


def test_repeated_dosing_builds_above_one_dose():
    single = calculate(Substance.MORPHINE, Route.INTRAVENOUS, make_inputs(100, 70, 40, 2, 0.0))
    repeated = calculate(Substance.MORPHINE, Route.INTRAVENOUS, make_inputs(100, 70, 40, 2, 24.0))
    assert repeated.C.max() > single.C.max()
    assert auc_trapz(repeated.t, repeated.C) > auc_trapz(single.t, single.C)


def test_single_dose_curve_ignores_future_doses():
    t = np.array([-2.0, -0.1, 0.0, 1.0])
    C = single_dose_curve(t, 10.0, 0.1, 0.1)
    assert np.all(C[:2] == 0.0)
    assert C[2] == 10.0
    assert np.isclose(C[3], 10.0 * np.exp(-0.1))


def test_absorption_rate_constant_floor():
    assert absorption_rate_constant(1.0) == pytest.approx(np.log(2.0))
    assert absorption_rate_constant(100.0) == MIN_KA_PER_H


def test_last_time_above():
    t = np.array([0.0, 1.0, 2.0, 3.0])
    assert last_time_above(t, np.array([5.0, 20.0, 15.0, 5.0]), 10.0) == 2.0
    assert last_time_above(t, np.array([5.0, 20.0, 15.0, 11.0]), 10.0) == 3.0
    assert last_time_above(t, np.zeros(4), 10.0) is None


def test_resolved_maxima_counts_separate_humps():
    x = np.linspace(0.0, 10.0, 101)
    two = np.exp(-((x - 2.0) ** 2)) + np.exp(-((x - 8.0) ** 2))
    assert resolved_maxima(two) == 2
    assert resolved_maxima(np.zeros(10)) == 0


def _flat_chart():
    t = np.linspace(0.0, 60.0, 61)
    return ConcentrationChart(t, np.zeros_like(t), cutoff=10.0, duration_h=24.0, num_doses=5,
                              absorption_h=1.5, halflife_h=4.0)


def test_chart_layout():
    chart = _flat_chart()
    rows = chart.rows()
    assert len(rows) == 61
    assert all(len(r) == PLOT_WIDTH for r in rows)

    # grid on every 6th row, starting at column 9
    assert rows[0][9] == "+" and rows[0][19] == "+"
    assert rows[1][9] == " "
    # full scale is 2x cutoff, so the cutoff sits mid-chart
    assert chart.full_scale == 20.0
    assert rows[0][58] == "-" and rows[33][58] == "-"
    # end of dosing marker only on the row at t = 24 h
    assert rows[24][11] == "|"
    assert rows[23][11] == " " and rows[25][11] == " "


def test_chart_curve_overrides_cutoff():
    t = np.linspace(0.0, 10.0, 11)
    C = np.full_like(t, 10.0)
    chart = ConcentrationChart(t, C, cutoff=10.0, duration_h=0.0, num_doses=1, absorption_h=0.1, halflife_h=1.0)
    col = chart.column(10.0)
    assert all(r[col] == "*" for r in chart.rows())


def test_below_cutoff_scenario():
    """10 mg of amphetamine never reaches the 50 ng/mL oral fluid cutoff."""
    calc = calculate(Substance.AMPHETAMINE, Route.ORAL, make_inputs(10, 70, 30, 2, 24.0))
    res = calc.report.results[Matrix.SALIVA]
    assert res.detection_time_h == 0.0

    chart = ConcentrationChart(calc.t, calc.C, cutoff=res.cutoff_ng_ml, duration_h=24.0,
                               num_doses=res.num_doses, absorption_h=1.5, halflife_h=res.halflife_h)
    text = chart.render()
    assert "No detection expected with these parameters" in text
    assert "Cutoff level: 50.00 ng/mL" in text


def test_detectable_scenario_reports_sampled_time():
    calc = calculate(Substance.DIAMORPHINE, Route.INTRAVENOUS, make_inputs(5000, 70, 30, 2, 24.0))
    res = calc.report.results[Matrix.SALIVA]
    assert res.detection_time_h > 0.0

    chart = ConcentrationChart(calc.t, calc.C, cutoff=res.cutoff_ng_ml, duration_h=24.0,
                               num_doses=res.num_doses, absorption_h=0.1, halflife_h=res.halflife_h)
    text = chart.render()
    assert "Time to non-detection" in text
    assert "[sampled]" in text
    assert "(7 doses)" in text


def _superposed(calc, absorption_h):
    """Hand-built multi-dose curve: one term per dose taken, washout after the last one."""
    res = calc.report.results[Matrix.SALIVA]
    duration = calc.report.inputs.duration_h
    k = res.elim_rate
    ka = max(0.1, np.log(2.0) / absorption_h)
    expected = np.zeros_like(calc.t)
    for i, ti in enumerate(calc.t):
        total = 0.0
        for n in range(res.num_doses):
            since = ti - n * res.dosing_interval_h
            if since < 0:
                continue
            rise = 1.0 if absorption_h < 0.5 else 1.0 - np.exp(-ka * since)
            total += res.single_conc * rise * np.exp(-k * since)
        if ti > duration:
            total *= np.exp(-k * (ti - duration))
        expected[i] = total
    return expected


@pytest.mark.parametrize("substance, route, absorption_h", [
    (Substance.MORPHINE, Route.INTRAVENOUS, 0.1),
    (Substance.OXYCODONE, Route.ORAL, 1.5),
    (Substance.BENZODIAZEPINES, Route.TOPICAL, 8.0),
])
def test_curve_matches_dose_superposition(substance, route, absorption_h):
    calc = calculate(substance, route, make_inputs(100, 70, 40, 2, 24.0))
    assert calc.report.adjusted.absorption_h == absorption_h
    # the window runs well past the end of dosing, so washout samples are included
    assert np.count_nonzero(calc.t > 24.0) > 10
    assert np.allclose(calc.C, _superposed(calc, absorption_h), rtol=1e-9, atol=0.0)
