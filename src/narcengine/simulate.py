# src/narcengine/simulate.py
from dataclasses import dataclass

import numpy as np

from .types import DetectionReport, DosingInputs, Matrix, Route, Substance
from .reference import resolve_route, resolve_substance, route_profile, substance_profile
from .routes import adjust_route
from .detection import compute_detection
from .settings import DEFAULT_FENTANYL_NOMINAL_MG
from .solvers import concentration_profile

# the chart follows oral fluid, the matrix the calculator is built around
PLOTTED_MATRIX = Matrix.SALIVA


@dataclass(frozen=True)
class Calculation:
    """Detection report plus the sampled curve of the plotted matrix."""
    report: DetectionReport
    t: np.ndarray
    C: np.ndarray
    matrix: Matrix = PLOTTED_MATRIX


def calculate(substance: Substance, route: Route, inputs: DosingInputs,
              nominal_dose_mg: float = DEFAULT_FENTANYL_NOMINAL_MG) -> Calculation:
    """
    Adjust the route, run the engine and sample the oral-fluid curve.
    Raises InvalidPrecondition; nothing is computed in that case.
    """
    profile = substance_profile(substance)
    rprofile = route_profile(route)
    adjusted = adjust_route(profile, rprofile)
    report = compute_detection(profile, rprofile, adjusted, inputs, nominal_dose_mg=nominal_dose_mg)
    t, C = concentration_profile(report.results[PLOTTED_MATRIX], inputs, adjusted)
    return Calculation(report=report, t=t, C=C)


def run_calculation(substance_name: str, route_name: str, inputs: DosingInputs,
                    nominal_dose_mg: float = DEFAULT_FENTANYL_NOMINAL_MG) -> Calculation:
    """Same as calculate() but starting from typed names. Raises SelectionNotFound too."""
    return calculate(resolve_substance(substance_name), resolve_route(route_name), inputs, nominal_dose_mg)
