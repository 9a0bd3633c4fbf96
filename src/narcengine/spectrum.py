# src/narcengine/spectrum.py
"""
Stylized 1H NMR-like identification spectra.

A fixed list of (shift, intensity) lines per substance is turned into a
continuous curve by summing Lorentzian line shapes. Nothing here is
calibrated chemistry; it is a recognisable fingerprint for display.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Sequence

import numpy as np

from .types import Peak, Substance, SubstanceClass
from .reference import substance_profile

SHIFT_MAX_PPM = 12.0
SHIFT_MIN_PPM = 0.0
SPECTRUM_POINTS = 121          # 0.1 ppm per point
MIN_WIDTH_PPM = 0.05

# width = WIDTH_BASE + U / 1000 with U uniform in [0, WIDTH_JITTER_STEPS)
WIDTH_BASE = 0.08
WIDTH_JITTER_STEPS = 20

Lines = tuple[tuple[float, float], ...]   # (shift ppm, intensity)

_PHENETHYLAMINE: Lines = ((7.3, 100.0), (2.8, 80.0), (3.1, 60.0))
_MORPHINAN: Lines = ((6.8, 50.0), (6.5, 50.0), (4.2, 60.0), (3.0, 90.0), (2.1, 100.0))

PEAK_TABLES: Mapping[Substance, Lines] = MappingProxyType({
    Substance.FENTANYL: ((7.2, 100.0), (3.8, 150.0), (2.4, 200.0), (1.2, 120.0)),
    Substance.AMPHETAMINE: _PHENETHYLAMINE,
    Substance.DEXTROAMPHETAMINE: _PHENETHYLAMINE,
    Substance.METHAMPHETAMINE: _PHENETHYLAMINE + ((1.1, 90.0),),
    Substance.MORPHINE: _MORPHINAN,
    Substance.HYDROMORPHONE: _MORPHINAN,
    Substance.OXYCODONE: _MORPHINAN,
    Substance.HYDROCODONE: _MORPHINAN,
    Substance.CODEINE: _MORPHINAN,
    Substance.DIAMORPHINE: _MORPHINAN,
    Substance.KETAMINE: ((7.5, 80.0), (4.1, 60.0), (2.5, 100.0)),
    Substance.LSD: ((8.1, 30.0), (7.4, 50.0), (7.0, 50.0), (6.8, 50.0), (4.0, 60.0), (1.3, 90.0)),
})

GENERIC_LINES: Lines = ((7.0, 100.0), (3.5, 80.0), (1.5, 120.0))

# (lower bound ppm, label), checked top-down
SHIFT_REGION_LABELS = (
    (10.0, "AROMATIC H"),
    (7.0, "AROMATIC/VINYL H"),
    (4.0, "O-CH, N-CH"),
    (2.0, "CH2, CH3 ALPHA"),
    (1.0, "CH2, CH3 BETA"),
)
DEFAULT_REGION_LABEL = "CH3 ALIPHATIC"

FENTANYL_LABELS = ("PHENYL H", "FENTANYL N-CH3", "PIPERIDINE H", "ETHYL H")
STIMULANT_LABELS = ("PHENYL H", "CH2-PHENYL", "CH-NH2", "CH3 (IF METH)")


def _default_rng() -> np.random.Generator:
    return np.random.default_rng()


def synthesize(substance: Substance, rng: np.random.Generator | None = None) -> list[Peak]:
    """
    Peak list for a substance (generic three-line fallback when none is on file).
    Widths get a fresh 0.080-0.099 ppm jitter from rng; pass a seeded
    generator to make them reproducible.
    """
    rng = rng if rng is not None else _default_rng()
    lines = PEAK_TABLES.get(substance, GENERIC_LINES)
    jitter = rng.integers(0, WIDTH_JITTER_STEPS, size=len(lines))
    return [Peak(shift_ppm=s, intensity=i, width=WIDTH_BASE + int(u) / 1000.0)
            for (s, i), u in zip(lines, jitter)]


def shift_axis(points: int = SPECTRUM_POINTS) -> np.ndarray:
    """Chemical shift of each spectrum column, high field on the right (12.0 -> 0.0 ppm)."""
    return np.linspace(SHIFT_MAX_PPM, SHIFT_MIN_PPM, points)


def synthesize_curve(peaks: Sequence[Peak], concentration: float, axis: np.ndarray | None = None) -> np.ndarray:
    """
    Sum of Lorentzian lines, each scaled by concentration / 100:

        intensity * conc/100 / (1 + ((x - shift) / width)^2)

    Peaks outside the 0-12 ppm window are ignored.
    """
    x = shift_axis() if axis is None else np.asarray(axis, dtype=float)
    curve = np.zeros_like(x)
    for p in peaks:
        if not (SHIFT_MIN_PPM <= p.shift_ppm <= SHIFT_MAX_PPM):
            continue
        width = max(MIN_WIDTH_PPM, p.width)
        height = p.intensity * concentration / 100.0
        curve += height / (1.0 + ((x - p.shift_ppm) / width) ** 2)
    return curve


def peak_label(substance: Substance, position: int, shift_ppm: float) -> str:
    """
    Assignment text for the peak at 1-based position. Fentanyl and the
    stimulants have per-position names; everything else is labelled by region.
    """
    label = DEFAULT_REGION_LABEL
    for lower, text in SHIFT_REGION_LABELS:
        if shift_ppm >= lower:
            label = text
            break

    if substance is Substance.FENTANYL:
        table = FENTANYL_LABELS
    elif substance_profile(substance).drug_class is SubstanceClass.STIMULANT:
        table = STIMULANT_LABELS
    else:
        return label
    if 1 <= position <= len(table):
        return table[position - 1]
    return label
