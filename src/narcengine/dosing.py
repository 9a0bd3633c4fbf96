# src/narcengine/dosing.py
from __future__ import annotations

import math

import numpy as np

from .errors import InvalidPrecondition
from .types import DosingInputs, Metabolism


def make_inputs(dose_mg: float, weight_kg: float, age_years: float,
                metabolism: Metabolism | int, duration_h: float) -> DosingInputs:
    """
    Validate and bundle what the user entered.
    Examples:
      - 100 mg, 70 kg, 30 years, normal metabolism, one day of use
        make_inputs(100, 70, 30, Metabolism.NORMAL, 24.0)
      - metabolism may be given by its menu code (1=slow, 2=normal, 3=fast)
    """
    validate_positive("dose_mg", dose_mg)
    validate_positive("weight_kg", weight_kg)
    validate_non_negative("age_years", age_years)
    validate_non_negative("duration_h", duration_h)
    return DosingInputs(dose_mg=float(dose_mg), weight_kg=float(weight_kg), age_years=float(age_years),
                        metabolism=parse_metabolism(metabolism), duration_h=float(duration_h))


def parse_metabolism(code: Metabolism | int) -> Metabolism:
    try:
        return Metabolism(int(code))
    except ValueError:
        raise InvalidPrecondition(f"metabolism must be 1 (slow), 2 (normal) or 3 (fast) (got {code}).") from None


def number_of_doses(duration_h: float, interval_h: float) -> int:
    """
    Doses administered during the dosing period: one at t=0, then one every
    interval_h while still inside the period. Always >= 1.
    """
    validate_non_negative("duration_h", duration_h)
    validate_positive("dosing_interval_h", interval_h)
    return int(math.floor(duration_h / interval_h)) + 1


def dose_times(duration_h: float, interval_h: float) -> np.ndarray:
    """Administration times (hours): 0, interval, 2*interval, ... for number_of_doses doses."""
    n = number_of_doses(duration_h, interval_h)
    return np.arange(n, dtype=float) * float(interval_h)


# --------------------------
# Small input validators
# --------------------------
def validate_positive(name: str, x: float) -> None:
    if not (x > 0 and math.isfinite(x)):
        raise InvalidPrecondition(f"{name} must be finite and > 0 (got {x}).")

def validate_non_negative(name: str, x: float) -> None:
    if not (x >= 0 and math.isfinite(x)):
        raise InvalidPrecondition(f"{name} must be finite and >= 0 (got {x}).")
