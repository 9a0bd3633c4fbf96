# src/narcengine/models/one_compartment.py
import numpy as np

# absorption constants below this (hours) count as instantaneous (IV, smoked, snorted)
FAST_ABSORPTION_H = 0.5
# floor on the absorption rate constant so very slow routes still rise
MIN_KA_PER_H = 0.1


def absorption_rate_constant(absorption_h):
    """ka (1/h) from an absorption half-life-like time constant, floored at MIN_KA_PER_H."""
    return max(MIN_KA_PER_H, np.log(2.0) / absorption_h)


def single_dose_curve(t_since_dose, single_conc, k_elim, absorption_h):
    """
    Oral-fluid concentration from one dose, t_since_dose hours after it was taken.

    Parameters:
      t_since_dose : array of elapsed times (h); negative entries (dose not yet taken) give 0
      single_conc  : concentration one fully absorbed dose contributes (ng/mL)
      k_elim       : elimination rate constant (1/h)
      absorption_h : absorption time constant (h)

    Fast routes deliver the full dose at once; slower routes rise as
    1 - exp(-ka t). Either way the absorbed amount decays as exp(-k t).
    """
    t = np.asarray(t_since_dose, dtype=float)
    taken = t >= 0.0
    dt = np.where(taken, t, 0.0)

    if absorption_h < FAST_ABSORPTION_H:
        absorbed = np.full_like(dt, single_conc)
    else:
        ka = absorption_rate_constant(absorption_h)
        absorbed = single_conc * (1.0 - np.exp(-ka * dt))

    return np.where(taken, absorbed * np.exp(-k_elim * dt), 0.0)
