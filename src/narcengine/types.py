# src/narcengine/types.py
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Mapping

from .errors import InvalidPrecondition

# We keep *all* time in HOURS internally and concentrations in ng/mL.


class Substance(Enum):
    FENTANYL = "FENTANYL"
    NITAZENES = "NITAZENES"
    AMPHETAMINE = "AMPHETAMINE"
    METHAMPHETAMINE = "METHAMPHETAMINE"
    DEXTROAMPHETAMINE = "DEXTROAMPHETAMINE"
    HYDROMORPHONE = "HYDROMORPHONE"
    OXYCODONE = "OXYCODONE"
    MORPHINE = "MORPHINE"
    HYDROCODONE = "HYDROCODONE"
    CODEINE = "CODEINE"
    PETHIDINE = "PETHIDINE"
    BARBITURATES = "BARBITURATES"
    BENZODIAZEPINES = "BENZODIAZEPINES"
    ALCOHOL = "ALCOHOL"
    LSD = "LSD"
    KETAMINE = "KETAMINE"
    MESCALINE = "MESCALINE"
    PSILOCYBIN = "PSILOCYBIN"
    DMT = "DMT"
    GHB = "GHB"
    METHAQUALONE = "METHAQUALONE"
    METHADONE = "METHADONE"
    DEXTROPROPOXYPHENE = "DEXTROPROPOXYPHENE"
    DIAMORPHINE = "DIAMORPHINE"


class Route(Enum):
    ORAL = "ORAL"
    INTRAVENOUS = "INTRAVENOUS"
    INTRAMUSCULAR = "INTRAMUSCULAR"
    SUBCUTANEOUS = "SUBCUTANEOUS"
    INTRANASAL = "INTRANASAL"
    INHALATION = "INHALATION"
    SUBLINGUAL = "SUBLINGUAL"
    TRANSDERMAL = "TRANSDERMAL"
    RECTAL = "RECTAL"
    BUCCAL = "BUCCAL"
    TOPICAL = "TOPICAL"


class SubstanceClass(Enum):
    """Pharmacological class used to dispatch route adjustment rules."""
    SYNTHETIC_OPIOID = "synthetic_opioid"
    OPIOID = "opioid"
    STIMULANT = "stimulant"
    PSYCHEDELIC = "psychedelic"
    DEPRESSANT = "depressant"


class Matrix(Enum):
    SALIVA = "saliva"
    URINE = "urine"

    @property
    def label(self) -> str:
        return self.name


class Metabolism(IntEnum):
    SLOW = 1
    NORMAL = 2
    FAST = 3

    @property
    def factor(self) -> float:
        return {Metabolism.SLOW: 0.70, Metabolism.NORMAL: 1.00, Metabolism.FAST: 1.40}[self]


@dataclass(frozen=True)
class SubstanceProfile:
    """
    Static pharmacokinetic constants for one substance.

    substance        : enum tag (identity)
    name             : display name
    drug_class       : class tag used by the route adjuster
    menu_group       : heading the substance is listed under in the menu
    halflife_h       : elimination half-life per matrix (hours)
    cutoff_ng_ml     : detection cutoff per matrix (ng/mL)
    dosing_interval_h: nominal time between doses (hours)
    metabolite_info  : free text, display only
    """
    substance: Substance
    name: str
    drug_class: SubstanceClass
    menu_group: str
    halflife_h: Mapping[Matrix, float]
    cutoff_ng_ml: Mapping[Matrix, float]
    dosing_interval_h: float
    metabolite_info: str

    def __post_init__(self):
        for matrix, value in self.halflife_h.items():
            if not (value > 0):
                raise InvalidPrecondition(f"{self.name}: {matrix.label} half-life must be > 0 (got {value}).")
        for matrix, value in self.cutoff_ng_ml.items():
            if not (value > 0):
                raise InvalidPrecondition(f"{self.name}: {matrix.label} cutoff must be > 0 (got {value}).")
        if not (self.dosing_interval_h > 0):
            raise InvalidPrecondition(f"{self.name}: dosing interval must be > 0 (got {self.dosing_interval_h}).")


@dataclass(frozen=True)
class RouteProfile:
    """
    Generic constants for a route of administration.

    bioavailability : fraction of the dose reaching circulation, (0, 1]
    absorption_h    : absorption time constant (hours, half-life-like)
    oral_factor     : empirical dose -> oral fluid concentration scaling
    """
    route: Route
    name: str
    bioavailability: float
    absorption_h: float
    oral_factor: float


@dataclass(frozen=True)
class AdjustedRoute:
    """Route constants after substance-specific overrides."""
    bioavailability: float
    absorption_h: float
    oral_factor: float


@dataclass(frozen=True)
class DosingInputs:
    """
    What the user entered.

    dose_mg    : dose per administration
    weight_kg  : body weight
    age_years  : age
    metabolism : SLOW / NORMAL / FAST
    duration_h : length of the dosing period; doses repeat every dosing interval
    """
    dose_mg: float
    weight_kg: float
    age_years: float
    metabolism: Metabolism
    duration_h: float


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of the accumulation model for one matrix."""
    matrix: Matrix
    halflife_h: float          # after the flip-flop correction
    cutoff_ng_ml: float
    dosing_interval_h: float
    single_conc: float         # ng/mL contributed by one dose
    elim_rate: float           # 1/h, age and metabolism adjusted
    num_doses: int
    retention: float           # r = 1 - exp(-k * tau)
    accumulation: float
    total_conc: float
    steady_conc: float
    buildup_pct: float
    detection_time_h: float    # 0 when never above cutoff

    @property
    def detectable(self) -> bool:
        return self.detection_time_h > 0.0


@dataclass(frozen=True)
class DetectionReport:
    """Everything the engine computed for one (substance, route, inputs) triple."""
    substance: SubstanceProfile
    route: RouteProfile
    adjusted: AdjustedRoute
    inputs: DosingInputs
    results: Mapping[Matrix, DetectionResult]
    effective_dose_mg: float   # dose used in the concentration formula
    dose_overridden: bool = False


@dataclass(frozen=True)
class Peak:
    """One line of the synthetic spectrum (shift in ppm, arbitrary intensity)."""
    shift_ppm: float
    intensity: float
    width: float
