# src/narcengine/metrics.py
import numpy as np
from scipy.signal import find_peaks


def cmax(C: np.ndarray) -> float:
    """Global maximum concentration (ng/mL)."""
    return float(np.max(C))

def tmax(t: np.ndarray, C: np.ndarray) -> float:
    """Time of maximum concentration (h)."""
    return float(t[int(np.argmax(C))])

def auc_trapz(t: np.ndarray, C: np.ndarray) -> float:
    """Area Under the Curve (AUC) via trapezoidal rule (ng*h/mL)."""
    return float(np.trapezoid(C, t))

def last_time_above(t: np.ndarray, C: np.ndarray, cutoff: float) -> float | None:
    """
    Latest sample time whose concentration is still above cutoff, scanning from
    the end of the series. None when no sample exceeds the cutoff.

    This is the discretized counterpart of the closed-form detection time and
    is only as fine as the sampling grid.
    """
    above = np.flatnonzero(C > cutoff)
    if above.size == 0:
        return None
    return float(t[above[-1]])

def resolved_maxima(curve: np.ndarray, prominence_frac: float = 0.01) -> int:
    """
    Number of separate maxima in a sampled spectrum. Peaks closer than the
    sampling resolution merge into one.
    """
    top = float(np.max(curve)) if curve.size else 0.0
    if top <= 0:
        return 0
    # pad so a maximum sitting on either edge is still found
    padded = np.concatenate(([0.0], curve, [0.0]))
    idx, _ = find_peaks(padded, prominence=prominence_frac * top)
    return int(idx.size)
