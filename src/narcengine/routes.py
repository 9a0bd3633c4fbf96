# src/narcengine/routes.py
"""
Substance x route overrides of the generic route constants.

Each rule targets a set of substances and/or substance classes and a set of
routes, and either overwrites ("assign") or multiplies ("scale") some of the
three route parameters. Rules are evaluated in RULES order; a later rule wins
when two rules touch the same parameter.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from .types import AdjustedRoute, Route, RouteProfile, Substance, SubstanceClass, SubstanceProfile
from .reference import substance_profile

logger = logging.getLogger(__name__)

Params = Mapping[str, float]   # keys: bioavailability, oral_factor, absorption_h


@dataclass(frozen=True)
class RouteRule:
    """
    label             : name shown in debug logs
    substances        : substances the rule applies to
    classes           : substance classes the rule applies to
    exclude_substances: substances exempt even if matched by class
    routes            : routes the rule applies to (None = every route)
    exclude_routes    : routes exempt when routes is None
    assign            : parameter -> new value
    scale             : parameter -> multiplier
    """
    label: str
    substances: frozenset[Substance] = frozenset()
    classes: frozenset[SubstanceClass] = frozenset()
    exclude_substances: frozenset[Substance] = frozenset()
    routes: frozenset[Route] | None = None
    exclude_routes: frozenset[Route] = frozenset()
    assign: Params = field(default_factory=dict)
    scale: Params = field(default_factory=dict)
    any_substance: bool = False

    def matches(self, substance: Substance, drug_class: SubstanceClass, route: Route) -> bool:
        if substance in self.exclude_substances:
            return False
        if not (self.any_substance or substance in self.substances or drug_class in self.classes):
            return False
        if self.routes is not None:
            return route in self.routes
        return route not in self.exclude_routes

    def apply(self, params: dict[str, float]) -> None:
        for name, factor in self.scale.items():
            params[name] *= factor
        params.update(self.assign)


def _only(*items):
    return frozenset(items)


R = Route

RULES: tuple[RouteRule, ...] = (
    # alcohol
    RouteRule("alcohol-parenteral", substances=_only(Substance.ALCOHOL),
              routes=_only(R.INTRAVENOUS, R.INTRAMUSCULAR, R.SUBCUTANEOUS),
              scale={"bioavailability": 0.1}),
    RouteRule("alcohol-vapour", substances=_only(Substance.ALCOHOL), routes=_only(R.INHALATION),
              assign={"bioavailability": 0.95, "absorption_h": 0.05}),
    # fentanyl
    RouteRule("fentanyl-patch", substances=_only(Substance.FENTANYL), routes=_only(R.TRANSDERMAL),
              assign={"absorption_h": 12.0, "bioavailability": 0.92}),
    RouteRule("fentanyl-sublingual", substances=_only(Substance.FENTANYL), routes=_only(R.SUBLINGUAL),
              assign={"bioavailability": 0.8}),
    # stimulants
    RouteRule("stimulant-nasal", classes=_only(SubstanceClass.STIMULANT), routes=_only(R.INTRANASAL),
              assign={"bioavailability": 0.8, "absorption_h": 0.2}),
    RouteRule("stimulant-smoked", classes=_only(SubstanceClass.STIMULANT), routes=_only(R.INHALATION),
              assign={"bioavailability": 0.7, "absorption_h": 0.08}),
    # opioids
    RouteRule("opioid-iv", classes=_only(SubstanceClass.OPIOID), routes=_only(R.INTRAVENOUS),
              assign={"bioavailability": 1.0, "oral_factor": 0.08}),
    RouteRule("opioid-nasal", classes=_only(SubstanceClass.OPIOID), routes=_only(R.INTRANASAL),
              assign={"bioavailability": 0.65}),
    # psychedelics
    RouteRule("psychedelic-smoked", classes=_only(SubstanceClass.PSYCHEDELIC),
              exclude_substances=_only(Substance.DMT), routes=_only(R.INHALATION),
              scale={"bioavailability": 0.3}),
    RouteRule("dmt-smoked", substances=_only(Substance.DMT), routes=_only(R.INHALATION),
              assign={"bioavailability": 0.8, "absorption_h": 0.02}),
    # benzodiazepines
    RouteRule("benzo-sublingual", substances=_only(Substance.BENZODIAZEPINES), routes=_only(R.SUBLINGUAL),
              assign={"bioavailability": 0.9, "absorption_h": 0.3}),
    RouteRule("benzo-rectal", substances=_only(Substance.BENZODIAZEPINES), routes=_only(R.RECTAL),
              assign={"bioavailability": 0.8, "absorption_h": 0.5}),
    # ketamine
    RouteRule("ketamine-nasal", substances=_only(Substance.KETAMINE), routes=_only(R.INTRANASAL),
              assign={"bioavailability": 0.5, "absorption_h": 0.3}),
    RouteRule("ketamine-im", substances=_only(Substance.KETAMINE), routes=_only(R.INTRAMUSCULAR),
              assign={"bioavailability": 0.93, "absorption_h": 0.3}),
    # GHB is practically only taken by mouth
    RouteRule("ghb-non-oral", substances=_only(Substance.GHB), exclude_routes=_only(R.ORAL),
              scale={"bioavailability": 0.5}),
    # topical: negligible systemic uptake except for formulated patches/gels
    RouteRule("topical", any_substance=True, exclude_substances=_only(Substance.FENTANYL, Substance.METHADONE),
              routes=_only(R.TOPICAL), assign={"bioavailability": 0.05, "oral_factor": 0.002}),
)


def adjust(substance: Substance, route: Route, bioavailability: float, oral_factor: float,
           absorption_rate: float, *, rules: tuple[RouteRule, ...] = RULES) -> tuple[float, float, float]:
    """
    Apply every matching rule in order.

    Returns (bioavailability, oral_factor, absorption_rate); unmatched pairs come
    back unchanged.
    """
    drug_class = substance_profile(substance).drug_class
    params = {"bioavailability": bioavailability, "oral_factor": oral_factor, "absorption_h": absorption_rate}
    for rule in rules:
        if rule.matches(substance, drug_class, route):
            logger.debug("route rule %s applies to %s/%s", rule.label, substance.value, route.value)
            rule.apply(params)
    return params["bioavailability"], params["oral_factor"], params["absorption_h"]


def adjust_route(substance: SubstanceProfile, route: RouteProfile) -> AdjustedRoute:
    bio, oral, absorption = adjust(substance.substance, route.route,
                                   route.bioavailability, route.oral_factor, route.absorption_h)
    return AdjustedRoute(bioavailability=bio, absorption_h=absorption, oral_factor=oral)
