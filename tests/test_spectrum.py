import numpy as np
import pytest

from narcengine.spectrum import (
    GENERIC_LINES, SPECTRUM_POINTS, WIDTH_BASE, peak_label, shift_axis, synthesize, synthesize_curve,
)
from narcengine.types import Peak, Substance
from narcviz.ui.plots import SPECTRUM_HEIGHT, SpectrumChart


class FixedRng:
    """Stands in for numpy's Generator; always draws the same jitter steps."""

    def __init__(self, steps):
        self.steps = steps

    def integers(self, low, high, size):
        return np.array(self.steps[:size])


def test_lorentzian_height_scales_with_concentration():
    curve = synthesize_curve([Peak(7.0, 100.0, 0.09)], 50.0, axis=np.array([7.0]))
    assert curve[0] == pytest.approx(50.0)
    # one line width away the line is at half height
    half = synthesize_curve([Peak(7.0, 100.0, 0.1)], 100.0, axis=np.array([7.1]))
    assert half[0] == pytest.approx(50.0)


def test_narrow_widths_are_floored():
    narrow = synthesize_curve([Peak(5.0, 100.0, 0.001)], 100.0, axis=np.array([5.05]))
    assert narrow[0] == pytest.approx(50.0)


def test_peaks_outside_the_window_are_skipped():
    assert np.all(synthesize_curve([Peak(13.5, 100.0, 0.09)], 100.0) == 0.0)


def test_axis_runs_high_to_low_field():
    axis = shift_axis()
    assert axis.size == SPECTRUM_POINTS
    assert axis[0] == 12.0 and axis[-1] == 0.0


def test_seeded_widths_are_reproducible_and_in_range():
    a = synthesize(Substance.LSD, rng=np.random.default_rng(11))
    b = synthesize(Substance.LSD, rng=np.random.default_rng(11))
    assert [p.width for p in a] == [p.width for p in b]
    assert all(WIDTH_BASE <= p.width <= 0.099 + 1e-12 for p in a)
    assert [p.shift_ppm for p in a] == [8.1, 7.4, 7.0, 6.8, 4.0, 1.3]


def test_widths_follow_the_drawn_steps():
    peaks = synthesize(Substance.KETAMINE, rng=FixedRng([0, 5, 19]))
    assert [p.width for p in peaks] == pytest.approx([0.080, 0.085, 0.099])


def test_unknown_substances_fall_back_to_generic_lines():
    peaks = synthesize(Substance.MESCALINE, rng=FixedRng([0, 0, 0]))
    assert [(p.shift_ppm, p.intensity) for p in peaks] == list(GENERIC_LINES)
    assert len(synthesize(Substance.METHAMPHETAMINE, rng=FixedRng([0] * 4))) == 4
    assert len(synthesize(Substance.AMPHETAMINE, rng=FixedRng([0] * 4))) == 3


@pytest.mark.parametrize("substance, position, shift, expected", [
    (Substance.FENTANYL, 2, 3.8, "FENTANYL N-CH3"),
    (Substance.METHAMPHETAMINE, 4, 1.1, "CH3 (IF METH)"),
    (Substance.AMPHETAMINE, 1, 7.3, "PHENYL H"),
    (Substance.LSD, 1, 8.1, "AROMATIC/VINYL H"),
    (Substance.MORPHINE, 4, 3.0, "CH2, CH3 ALPHA"),
    (Substance.KETAMINE, 2, 4.1, "O-CH, N-CH"),
    (Substance.LSD, 6, 1.3, "CH2, CH3 BETA"),
    (Substance.GHB, 1, 0.5, "CH3 ALIPHATIC"),
    (Substance.DMT, 1, 11.0, "AROMATIC H"),
])
def test_peak_labels(substance, position, shift, expected):
    assert peak_label(substance, position, shift) == expected


def test_spectrum_chart_render():
    peaks = synthesize(Substance.KETAMINE, rng=FixedRng([0, 0, 0]))
    curve = synthesize_curve(peaks, 50.0)
    chart = SpectrumChart(Substance.KETAMINE, "KETAMINE", 50.0, peaks, curve)

    rows = chart.rows()
    assert len(rows) == SPECTRUM_HEIGHT
    assert all(len(r) == SPECTRUM_POINTS for r in rows)
    # the tallest line reaches the top row
    assert "*" in rows[0]
    # every 10th row is ruled, grid columns drawn over it
    assert rows[0][0] == "|" and rows[0][1] == "-"

    labels, ticks = chart.axis_lines()
    assert labels.startswith("12.0")
    assert ticks[0] == "|" and ticks[20] == "|"

    text = chart.render()
    assert "1H NMR SPECTRUM SIMULATION FOR KETAMINE" in text
    assert "PEAK ASSIGNMENTS:" in text
    assert "NUMBER OF PEAKS DETECTED: 3" in text
    assert "RESOLVED MAXIMA:          3" in text
