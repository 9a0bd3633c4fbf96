# src/narcengine/reference.py
"""
Static reference tables: substances, routes and the synonyms typed for them.

All tables are read-only mappings built once at import time.
"""
import logging
from types import MappingProxyType
from typing import Mapping

from .errors import SelectionNotFound
from .helpers import normalize_name
from .types import Matrix, Route, RouteProfile, Substance, SubstanceClass, SubstanceProfile

logger = logging.getLogger(__name__)

S, U = Matrix.SALIVA, Matrix.URINE

SYNTHETIC_OPIOIDS = "SYNTHETIC OPIOIDS"
NATURAL_OPIOIDS = "NATURAL OPIOIDS"
STIMULANTS = "STIMULANTS"
DEPRESSANTS = "DEPRESSANTS"
PSYCHEDELICS = "PSYCHEDELICS"
OTHER = "OTHER"

MENU_GROUPS = (SYNTHETIC_OPIOIDS, NATURAL_OPIOIDS, STIMULANTS, DEPRESSANTS, PSYCHEDELICS, OTHER)


def _substance(substance: Substance, drug_class: SubstanceClass, menu_group: str,
               halflife: tuple[float, float], cutoff: tuple[float, float],
               interval_h: float, metabolites: str) -> SubstanceProfile:
    # (saliva, urine) pairs
    return SubstanceProfile(
        substance=substance,
        name=substance.value,
        drug_class=drug_class,
        menu_group=menu_group,
        halflife_h=MappingProxyType({S: halflife[0], U: halflife[1]}),
        cutoff_ng_ml=MappingProxyType({S: cutoff[0], U: cutoff[1]}),
        dosing_interval_h=interval_h,
        metabolite_info=metabolites,
    )


_SUBSTANCE_ROWS = (
    _substance(Substance.FENTANYL, SubstanceClass.SYNTHETIC_OPIOID, SYNTHETIC_OPIOIDS,
               (7.0, 20.0), (1.0, 2.0), 4.0, "Parent drug + norfentanyl"),
    _substance(Substance.NITAZENES, SubstanceClass.SYNTHETIC_OPIOID, SYNTHETIC_OPIOIDS,
               (8.0, 24.0), (0.5, 1.0), 6.0, "Parent drug + hydroxy metabolites"),
    _substance(Substance.AMPHETAMINE, SubstanceClass.STIMULANT, STIMULANTS,
               (8.0, 30.0), (50.0, 500.0), 12.0, "Unchanged drug (80%) + metabolites"),
    _substance(Substance.METHAMPHETAMINE, SubstanceClass.STIMULANT, STIMULANTS,
               (12.0, 36.0), (50.0, 500.0), 8.0, "Parent drug + amphetamine metabolite"),
    _substance(Substance.DEXTROAMPHETAMINE, SubstanceClass.STIMULANT, STIMULANTS,
               (9.0, 32.0), (50.0, 500.0), 12.0, "Unchanged drug + hydroxylated metabolites"),
    _substance(Substance.HYDROMORPHONE, SubstanceClass.OPIOID, SYNTHETIC_OPIOIDS,
               (3.0, 11.0), (1.0, 10.0), 4.0, "Parent drug + hydromorphone-3-glucuronide"),
    _substance(Substance.OXYCODONE, SubstanceClass.OPIOID, SYNTHETIC_OPIOIDS,
               (4.5, 19.0), (5.0, 100.0), 6.0, "Parent drug + oxymorphone + glucuronides"),
    _substance(Substance.MORPHINE, SubstanceClass.OPIOID, NATURAL_OPIOIDS,
               (3.5, 15.0), (10.0, 300.0), 4.0, "Parent drug + morphine-3-glucuronide + M6G"),
    _substance(Substance.HYDROCODONE, SubstanceClass.OPIOID, SYNTHETIC_OPIOIDS,
               (4.0, 18.0), (5.0, 100.0), 6.0, "Parent drug + hydromorphone + glucuronides"),
    _substance(Substance.CODEINE, SubstanceClass.OPIOID, NATURAL_OPIOIDS,
               (3.0, 12.0), (10.0, 300.0), 6.0, "Parent drug + morphine + norcodeine"),
    _substance(Substance.PETHIDINE, SubstanceClass.OPIOID, NATURAL_OPIOIDS,
               (4.0, 16.0), (25.0, 200.0), 6.0, "Parent drug + norpethidine"),
    _substance(Substance.BARBITURATES, SubstanceClass.DEPRESSANT, DEPRESSANTS,
               (120.0, 240.0), (50.0, 200.0), 24.0, "Parent drugs + hydroxylated metabolites"),
    _substance(Substance.BENZODIAZEPINES, SubstanceClass.DEPRESSANT, DEPRESSANTS,
               (72.0, 168.0), (10.0, 200.0), 24.0, "Parent drugs + oxazepam + glucuronides"),
    _substance(Substance.ALCOHOL, SubstanceClass.DEPRESSANT, OTHER,
               (1.0, 2.0), (25.0, 100.0), 2.0, "Ethanol + EtG (up to 80 hours urine)"),
    _substance(Substance.LSD, SubstanceClass.PSYCHEDELIC, PSYCHEDELICS,
               (5.0, 8.0), (0.5, 0.5), 12.0, "Parent drug + iso-LSD + nor-LSD"),
    _substance(Substance.KETAMINE, SubstanceClass.PSYCHEDELIC, OTHER,
               (3.5, 14.0), (25.0, 100.0), 4.0, "Parent drug + norketamine + dehydronorketamine"),
    _substance(Substance.MESCALINE, SubstanceClass.PSYCHEDELIC, PSYCHEDELICS,
               (8.0, 36.0), (25.0, 100.0), 12.0, "Parent drug + 3,4,5-trimethoxyphenylacetic acid"),
    _substance(Substance.PSILOCYBIN, SubstanceClass.PSYCHEDELIC, PSYCHEDELICS,
               (3.0, 13.0), (1.0, 10.0), 8.0, "Psilocin (active metabolite) + glucuronide"),
    _substance(Substance.DMT, SubstanceClass.PSYCHEDELIC, PSYCHEDELICS,
               (0.5, 2.0), (1.0, 10.0), 1.0, "Indole-3-acetic acid + 6-hydroxyindole-3-acetic acid"),
    _substance(Substance.GHB, SubstanceClass.DEPRESSANT, OTHER,
               (1.0, 6.0), (5.0, 10.0), 2.0, "Parent drug (endogenous levels present)"),
    _substance(Substance.METHAQUALONE, SubstanceClass.DEPRESSANT, DEPRESSANTS,
               (36.0, 72.0), (25.0, 200.0), 12.0, "Parent drug + hydroxylated metabolites"),
    _substance(Substance.METHADONE, SubstanceClass.OPIOID, NATURAL_OPIOIDS,
               (48.0, 86.0), (25.0, 200.0), 24.0, "Parent drug + EDDP + EMDP metabolites"),
    _substance(Substance.DEXTROPROPOXYPHENE, SubstanceClass.SYNTHETIC_OPIOID, SYNTHETIC_OPIOIDS,
               (18.0, 48.0), (10.0, 300.0), 8.0, "Parent drug + norpropoxyphene"),
    _substance(Substance.DIAMORPHINE, SubstanceClass.OPIOID, NATURAL_OPIOIDS,
               (8.0, 24.0), (2.0, 10.0), 4.0, "6-MAM (specific) + morphine + morphine glucuronides"),
)

SUBSTANCES: Mapping[Substance, SubstanceProfile] = MappingProxyType(
    {p.substance: p for p in _SUBSTANCE_ROWS}
)


def _route(route: Route, bioavailability: float, absorption_h: float, oral_factor: float) -> RouteProfile:
    return RouteProfile(route=route, name=route.value, bioavailability=bioavailability,
                        absorption_h=absorption_h, oral_factor=oral_factor)


ROUTES: Mapping[Route, RouteProfile] = MappingProxyType({
    r.route: r for r in (
        _route(Route.ORAL, 0.70, 1.5, 0.010),
        _route(Route.INTRAVENOUS, 1.00, 0.1, 0.050),
        _route(Route.INTRAMUSCULAR, 0.90, 0.5, 0.030),
        _route(Route.SUBCUTANEOUS, 0.80, 0.8, 0.025),
        _route(Route.INTRANASAL, 0.60, 0.3, 0.020),
        _route(Route.INHALATION, 0.90, 0.1, 0.040),
        _route(Route.SUBLINGUAL, 0.80, 0.5, 0.020),
        _route(Route.TRANSDERMAL, 0.90, 4.0, 0.015),
        _route(Route.RECTAL, 0.70, 1.0, 0.015),
        _route(Route.BUCCAL, 0.75, 0.8, 0.025),
        _route(Route.TOPICAL, 0.10, 8.0, 0.005),
    )
})

SUBSTANCE_SYNONYMS: Mapping[str, Substance] = MappingProxyType({
    "MEPERIDINE": Substance.PETHIDINE,
    "ETHANOL": Substance.ALCOHOL,
    "PROPOXYPHENE": Substance.DEXTROPROPOXYPHENE,
    "HEROIN": Substance.DIAMORPHINE,
})

ROUTE_SYNONYMS: Mapping[str, Route] = MappingProxyType({
    **dict.fromkeys(("IV", "I.V.", "I.V", "INJECTION"), Route.INTRAVENOUS),
    **dict.fromkeys(("IM", "I.M.", "I.M", "MUSCLE"), Route.INTRAMUSCULAR),
    **dict.fromkeys(("SC", "SQ", "SUBQ", "S.C.", "SUB-Q"), Route.SUBCUTANEOUS),
    **dict.fromkeys(("IN", "NASAL", "SNORT", "SNORTING", "NOSE"), Route.INTRANASAL),
    **dict.fromkeys(("INH", "INHALED", "SMOKING", "SMOKE", "VAPING", "VAPE"), Route.INHALATION),
    **dict.fromkeys(("PO", "P.O.", "MOUTH", "SWALLOW", "PILL", "TABLET"), Route.ORAL),
    **dict.fromkeys(("SL", "S.L.", "UNDER TONGUE", "SUB"), Route.SUBLINGUAL),
    **dict.fromkeys(("TD", "PATCH", "SKIN"), Route.TRANSDERMAL),
    **dict.fromkeys(("PR", "P.R.", "SUPPOSITORY"), Route.RECTAL),
    **dict.fromkeys(("BUC", "CHEEK"), Route.BUCCAL),
    **dict.fromkeys(("TOP", "CREAM", "GEL"), Route.TOPICAL),
})


def resolve_substance(name: str) -> Substance:
    """Canonical name first, then synonyms. Raises SelectionNotFound."""
    key = normalize_name(name)
    try:
        return Substance(key)
    except ValueError:
        pass
    if key in SUBSTANCE_SYNONYMS:
        return SUBSTANCE_SYNONYMS[key]
    logger.warning("No substance matches %r", name)
    raise SelectionNotFound("substance", name)


def resolve_route(name: str) -> Route:
    """Canonical name first, then abbreviations. Raises SelectionNotFound."""
    key = normalize_name(name)
    try:
        return Route(key)
    except ValueError:
        pass
    if key in ROUTE_SYNONYMS:
        return ROUTE_SYNONYMS[key]
    logger.warning("No route matches %r", name)
    raise SelectionNotFound("route", name)


def substance_profile(substance: Substance) -> SubstanceProfile:
    return SUBSTANCES[substance]


def route_profile(route: Route) -> RouteProfile:
    return ROUTES[route]


def substances_by_menu_group() -> dict[str, list[SubstanceProfile]]:
    """Group profiles under their menu heading, in table order."""
    groups: dict[str, list[SubstanceProfile]] = {g: [] for g in MENU_GROUPS}
    for p in SUBSTANCES.values():
        groups[p.menu_group].append(p)
    return groups
