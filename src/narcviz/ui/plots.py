# src/narcviz/ui/plots.py
"""Fixed-width text charts: concentration vs time, and the synthetic spectrum."""
from __future__ import annotations

from typing import Sequence

import numpy as np

from narcengine.metrics import auc_trapz, cmax, last_time_above, resolved_maxima, tmax
from narcengine.spectrum import SHIFT_MAX_PPM, SHIFT_MIN_PPM, peak_label
from narcengine.types import Peak, Substance

RULE = "=" * 68

PLOT_WIDTH = 119
SPECTRUM_WIDTH = 121
SPECTRUM_HEIGHT = 50


class ConcentrationChart:
    """
    One text row per time sample, concentration running left to right.

    Layers, last one wins where they overlap:
      + time grid every 10 columns on every 6th row
      | end of the dosing period (fixed column, on the row nearest that time)
      * the concentration
      - the cutoff, unless the curve sits on it
    """

    GRID_EVERY_ROWS = 6
    GRID_FIRST_COL = 9
    GRID_STEP_COLS = 10
    MIN_PLOTTED_CONC = 0.001

    def __init__(self, t: np.ndarray, C: np.ndarray, cutoff: float, duration_h: float, num_doses: int,
                 absorption_h: float, halflife_h: float, width: int = PLOT_WIDTH):
        self.t = np.asarray(t, dtype=float)
        self.C = np.asarray(C, dtype=float)
        self.cutoff = cutoff
        self.duration_h = duration_h
        self.num_doses = num_doses
        self.absorption_h = absorption_h
        self.halflife_h = halflife_h
        self.width = width

    @property
    def peak(self) -> float:
        return cmax(self.C)

    @property
    def full_scale(self) -> float:
        """Concentration at the right edge; never below 2x cutoff or 1 ng/mL."""
        return max(self.peak, 2.0 * self.cutoff, 1.0)

    @property
    def step_h(self) -> float:
        return float(self.t[1] - self.t[0]) if self.t.size > 1 else 0.0

    def column(self, conc: float) -> int:
        return int(conc * (self.width - 2) / self.full_scale)

    def rows(self) -> list[str]:
        scale_cutoff_col = self.column(self.cutoff)
        end_col = int(self.width * 0.1)
        step = self.step_h
        lines = []
        for i, (ti, ci) in enumerate(zip(self.t, self.C)):
            row = [" "] * self.width
            if i % self.GRID_EVERY_ROWS == 0:
                for j in range(self.GRID_FIRST_COL, self.width, self.GRID_STEP_COLS):
                    row[j] = "+"
            if self.duration_h > 0 and abs(ti - self.duration_h) < step and row[end_col] == " ":
                row[end_col] = "|"
            if ci > self.MIN_PLOTTED_CONC:
                pos = self.column(ci)
                if 0 <= pos < self.width:
                    row[pos] = "*"
            if 0 <= scale_cutoff_col < self.width and row[scale_cutoff_col] != "*":
                row[scale_cutoff_col] = "-"
            lines.append("".join(row))
        return lines

    def analysis(self) -> list[str]:
        if self.peak <= self.cutoff:
            return [
                f"ANALYSIS: Peak concentration ({self.peak:.2f} ng/mL) below cutoff",
                "          No detection expected with these parameters",
            ]
        last = last_time_above(self.t, self.C, self.cutoff)
        return [
            f"ANALYSIS: Time to non-detection = {last:.1f} hours ({last / 24.0:.1f} days) [sampled]",
            f"          Peak concentration = {self.peak:.2f} ng/mL at {tmax(self.t, self.C):.1f} hours",
            f"          Sampled AUC = {auc_trapz(self.t, self.C):.1f} ng*h/mL",
            f"          Dosing duration = {self.duration_h:.1f} hours ({self.duration_h / 24.0:.1f} days)",
            f"          Absorption rate = {self.absorption_h:.2f} hours",
            f"          Elimination half-life = {self.halflife_h:.1f} hours",
        ]

    def render(self) -> str:
        t_end = float(self.t[-1])
        out = [
            RULE,
            "  SALIVA CONCENTRATION vs TIME WITH ACCUMULATION",
            "       (INCLUDES CHRONIC USE BUILD-UP EFFECTS)",
            "       (ADJUSTED FOR ROUTE OF ADMINISTRATION)",
            RULE,
            "",
            f"Time range: 0 to {t_end:.1f} hours",
            f"Maximum concentration: {self.full_scale:.2f} ng/mL (full scale)",
            f"Cutoff level: {self.cutoff:.2f} ng/mL",
            f"Dosing period: {self.duration_h:.1f} hours ({self.num_doses} doses)",
            "",
        ]
        out.extend(self.rows())
        out += [
            "",
            "LEGEND: * = CONCENTRATION CURVE",
            "        - = DETECTION CUTOFF THRESHOLD",
            f"        + = TIME GRID MARKERS (every {t_end / 10.0:.1f} hrs)",
            "        | = END OF DOSING PERIOD",
            "",
        ]
        out.extend(self.analysis())
        return "\n".join(out) + "\n"


class SpectrumChart:
    """
    Intensity rows top-down over a 12 -> 0 ppm axis.

    A column is starred on every row whose threshold (max * row / height) it
    reaches. '-' / '.' mark every 10th / 5th row, '|' / '+' every 2 / 1 ppm;
    stars are never overwritten.
    """

    def __init__(self, substance: Substance, name: str, concentration: float,
                 peaks: Sequence[Peak], curve: np.ndarray, height: int = SPECTRUM_HEIGHT):
        self.substance = substance
        self.name = name
        self.concentration = concentration
        self.peaks = list(peaks)
        self.curve = np.asarray(curve, dtype=float)
        self.height = height

    @property
    def width(self) -> int:
        return int(self.curve.size)

    @property
    def spec_max(self) -> float:
        top = float(np.max(self.curve)) if self.curve.size else 0.0
        return top if top > 0 else 1.0

    def ppm_per_column(self) -> float:
        return (SHIFT_MAX_PPM - SHIFT_MIN_PPM) / (self.width - 1)

    def axis_lines(self) -> list[str]:
        major = max(1, int(round(2.0 / self.ppm_per_column())))
        labels = [" "] * self.width
        ticks = [" "] * self.width
        for col in range(0, self.width, major):
            text = f"{SHIFT_MAX_PPM - col * self.ppm_per_column():.1f}"
            start = min(col, self.width - len(text))
            labels[start:start + len(text)] = text
            ticks[col] = "|"
        return ["".join(labels).rstrip(), "".join(ticks).rstrip()]

    def rows(self) -> list[str]:
        major = max(1, int(round(2.0 / self.ppm_per_column())))
        minor = max(1, major // 2)
        lines = []
        for line in range(self.height, 0, -1):
            thresh = self.spec_max * line / self.height
            if line % 10 == 0:
                row = ["-"] * self.width
            elif line % 5 == 0:
                row = ["."] * self.width
            else:
                row = [" "] * self.width
            hits = self.curve >= thresh
            for i in np.flatnonzero(hits):
                row[i] = "*"
            for i in range(0, self.width, major):
                if row[i] != "*":
                    row[i] = "|"
            for i in range(minor, self.width, minor):
                if i % major != 0 and row[i] not in ("*", "|"):
                    row[i] = "+"
            lines.append("".join(row))
        return lines

    def peak_table(self) -> list[str]:
        if not self.peaks:
            return []
        out = [
            "PEAK ASSIGNMENTS:",
            "SHIFT(PPM)  INTENSITY  WIDTH   ASSIGNMENT",
            "----------  ---------  -----   ----------",
        ]
        for position, p in enumerate(self.peaks, start=1):
            if not (SHIFT_MIN_PPM <= p.shift_ppm <= SHIFT_MAX_PPM):
                continue
            label = peak_label(self.substance, position, p.shift_ppm)
            out.append(f"{p.shift_ppm:8.2f}    {p.intensity:7.1f}    {p.width:5.2f}   {label}")
        return out

    def render(self) -> str:
        out = [
            RULE,
            f"          1H NMR SPECTRUM SIMULATION FOR {self.name}",
            f"       CONCENTRATION: {self.concentration:.2f} NG/ML IN SAMPLE",
            f"       CHEMICAL SHIFT RANGE: {SHIFT_MIN_PPM:.1f} - {SHIFT_MAX_PPM:.1f} PPM",
            "       SYNTHETIC SPECTRUM FOR IDENTIFICATION",
            RULE,
            "",
            f"Maximum intensity = {self.spec_max:.2f} (relative)",
            f"Chemical shift scale: {SHIFT_MAX_PPM:.1f} to {SHIFT_MIN_PPM:.1f} PPM",
            "",
        ]
        out.extend(self.axis_lines())
        out.extend(self.rows())
        out.append("")
        out.extend(self.peak_table())
        out += [
            "",
            "SPECTRUM ANALYSIS:",
            f"NUMBER OF PEAKS DETECTED: {len(self.peaks)}",
            f"RESOLVED MAXIMA:          {resolved_maxima(self.curve)}",
            f"MAXIMUM PEAK INTENSITY:   {self.spec_max:.2f}",
            f"SAMPLE CONCENTRATION:     {self.concentration:.2f} NG/ML",
            "INTEGRATION COMPLETE",
            "",
            "* = SPECTRAL PEAK    | = MAJOR PPM GRID (2 PPM)    + = MINOR PPM GRID (1 PPM)",
        ]
        return "\n".join(out) + "\n"
