# src/narcengine/solvers.py
import numpy as np

from .types import AdjustedRoute, DetectionResult, DosingInputs
from .dosing import dose_times
from .models.one_compartment import single_dose_curve

N_SAMPLES = 61
# plotted window: end of dosing + this many terminal half-lives, at least MIN_WINDOW_H
WINDOW_HALFLIVES = 8.0
MIN_WINDOW_H = 24.0


def plot_window_h(duration_h: float, halflife_h: float) -> float:
    return max(duration_h + WINDOW_HALFLIVES * halflife_h, MIN_WINDOW_H)


def concentration_profile(result: DetectionResult, inputs: DosingInputs, adjusted: AdjustedRoute,
                          n_samples: int = N_SAMPLES):
    """
    Sample the multi-dose concentration curve of one matrix.

    Every dose taken by the sample time adds its own absorption-then-elimination
    curve. Once the dosing period is over, the summed curve is additionally
    multiplied by exp(-k * (t - duration)) for the continued washout.

    Returns:
      t : array of n_samples evenly spaced times from 0 to the plot window (hours)
      C : array of concentrations (ng/mL)
    """
    t_end = plot_window_h(inputs.duration_h, result.halflife_h)
    t = np.linspace(0.0, t_end, n_samples)

    doses = dose_times(inputs.duration_h, result.dosing_interval_h)
    # rows: doses, columns: sample times
    since = t[np.newaxis, :] - doses[:, np.newaxis]
    C = single_dose_curve(since, result.single_conc, result.elim_rate, adjusted.absorption_h).sum(axis=0)

    after = t > inputs.duration_h
    C[after] *= np.exp(-result.elim_rate * (t[after] - inputs.duration_h))
    return t, C
