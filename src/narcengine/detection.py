# src/narcengine/detection.py
"""
Closed-form detection-time model for repeated dosing.

For each matrix the engine works out the concentration one dose contributes,
the age/metabolism adjusted elimination rate, how much of that builds up over
the dosing period (finite geometric series) and how long the accumulated
level takes to fall to the cutoff.
"""
from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Iterable

from .dosing import validate_positive, number_of_doses
from .errors import InvalidPrecondition
from .settings import DEFAULT_FENTANYL_NOMINAL_MG
from .types import (
    AdjustedRoute, DetectionReport, DetectionResult, DosingInputs, Matrix,
    RouteProfile, Substance, SubstanceProfile,
)

logger = logging.getLogger(__name__)

LN2 = math.log(2.0)

# |r - 1| below this is treated as r == 1 (accumulation = number of doses)
DEGENERATE_RETENTION_TOL = 1e-3

# first-pass / distribution volume proxy for ethanol
ALCOHOL_DOSE_FACTOR = 0.5

# (upper bound of age band, factor); bands are left-closed
AGE_BANDS = ((35.0, 1.15), (50.0, 1.00), (65.0, 0.85))
ELDERLY_AGE_FACTOR = 0.70


def age_factor(age_years: float) -> float:
    for upper, factor in AGE_BANDS:
        if age_years < upper:
            return factor
    return ELDERLY_AGE_FACTOR


def single_dose_concentration(substance: Substance, adjusted: AdjustedRoute, inputs: DosingInputs,
                              nominal_dose_mg: float = DEFAULT_FENTANYL_NOMINAL_MG) -> tuple[float, float]:
    """
    Concentration (ng/mL) one administration contributes, and the dose that was used.

    Fentanyl ignores the entered dose and uses nominal_dose_mg; alcohol is halved.
    """
    validate_positive("weight_kg", inputs.weight_kg)
    validate_positive("nominal_dose_mg", nominal_dose_mg)
    dose =nominal_dose_mg if substance is Substance.FENTANYL else inputs.dose_mg
    conc = dose * adjusted.oral_factor * adjusted.bioavailability / inputs.weight_kg
    if substance is Substance.ALCOHOL:
        conc *= ALCOHOL_DOSE_FACTOR
    return conc, dose


def flip_flop_halflife(halflife_h: float, absorption_h: float) -> float:
    """
    Stretch the half-life when absorption is slower than elimination, so the
    apparent terminal phase follows the absorption rate.
    """
    validate_positive("halflife_h", halflife_h)
    threshold = halflife_h * LN2
    if absorption_h > threshold:
        return halflife_h * (1.0 + absorption_h / threshold)
    return halflife_h


def elimination_rate(halflife_h: float, age_years: float, metab_factor: float) -> float:
    validate_positive("halflife_h", halflife_h)
    return (LN2 / halflife_h) * age_factor(age_years) * metab_factor


def retention_factor(elim_rate: float, interval_h: float) -> float:
    return 1.0 - math.exp(-elim_rate * interval_h)


def accumulation_factor(retention: float, num_doses: int) -> float:
    """(1 - r^n) / (1 - r), or n itself when r is within tolerance of 1."""
    if abs(retention - 1.0) < DEGENERATE_RETENTION_TOL:
        return float(num_doses)
    return (1.0 - retention ** num_doses) / (1.0 - retention)


def detection_time(total_conc: float, cutoff: float, elim_rate: float) -> float:
    """Hours until total_conc decays to cutoff; 0 when never above cutoff."""
    validate_positive("cutoff_ng_ml", cutoff)
    if total_conc > cutoff:
        validate_positive("elim_rate", elim_rate)
        return math.log(total_conc / cutoff) / elim_rate
    return 0.0


def compute_matrix(matrix: Matrix, profile: SubstanceProfile, adjusted: AdjustedRoute,
                   inputs: DosingInputs, single_conc: float) -> DetectionResult:
    interval = profile.dosing_interval_h
    cutoff = profile.cutoff_ng_ml[matrix]
    validate_positive("dosing_interval_h", interval)
    validate_positive("cutoff_ng_ml", cutoff)

    halflife = flip_flop_halflife(profile.halflife_h[matrix], adjusted.absorption_h)
    k = elimination_rate(halflife, inputs.age_years, inputs.metabolism.factor)
    n = number_of_doses(inputs.duration_h, interval)
    r = retention_factor(k, interval)
    if not (r > 0):
        raise InvalidPrecondition(f"{matrix.label}: retention factor must be > 0 (got {r}).")
    accum = accumulation_factor(r, n)

    total = single_conc * accum
    steady = single_conc / r
    buildup = min(100.0, total / steady * 100.0) if steady > 0 else 0.0
    t_detect = detection_time(total, cutoff, k)

    logger.debug("%s: t1/2=%.3f h k=%.5f /h n=%d r=%.5f accum=%.4f total=%.4f",
                 matrix.label, halflife, k, n, r, accum, total)
    return DetectionResult(
        matrix=matrix,
        halflife_h=halflife,
        cutoff_ng_ml=cutoff,
        dosing_interval_h=interval,
        single_conc=single_conc,
        elim_rate=k,
        num_doses=n,
        retention=r,
        accumulation=accum,
        total_conc=total,
        steady_conc=steady,
        buildup_pct=buildup,
        detection_time_h=t_detect,
    )


def compute_detection(profile: SubstanceProfile, route: RouteProfile, adjusted: AdjustedRoute,
                      inputs: DosingInputs, *, nominal_dose_mg: float = DEFAULT_FENTANYL_NOMINAL_MG,
                      matrices: Iterable[Matrix] = (Matrix.SALIVA, Matrix.URINE)) -> DetectionReport:
    """
    Run the accumulation model for every requested matrix.

    Every matrix shares the single-dose concentration but uses its own
    half-life and cutoff. Raises InvalidPrecondition before any division by
    a zero weight, interval, half-life or cutoff; nothing is returned in that case.
    """
    single_conc, dose_used = single_dose_concentration(profile.substance, adjusted, inputs, nominal_dose_mg)
    logger.debug("%s via %s: F=%.3f oral_factor=%.4f abs=%.3f h single=%.5f ng/mL",
                 profile.name, route.name, adjusted.bioavailability, adjusted.oral_factor,
                 adjusted.absorption_h, single_conc)
    results = {m: compute_matrix(m, profile, adjusted, inputs, single_conc) for m in matrices}
    return DetectionReport(
        substance=profile,
        route=route,
        adjusted=adjusted,
        inputs=inputs,
        results=MappingProxyType(results),
        effective_dose_mg=dose_used,
        dose_overridden=profile.substance is Substance.FENTANYL,
    )
