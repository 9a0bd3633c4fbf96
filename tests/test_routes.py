import pytest

from narcengine.reference import ROUTES, SUBSTANCES
from narcengine.routes import RULES, adjust, adjust_route
from narcengine.types import Route, Substance


def _adjusted(substance, route):
    return adjust_route(SUBSTANCES[substance], ROUTES[route])


def test_unmatched_pairs_are_unchanged():
    for substance, route in [(Substance.BARBITURATES, Route.ORAL), (Substance.LSD, Route.BUCCAL),
                             (Substance.FENTANYL, Route.INTRAVENOUS), (Substance.NITAZENES, Route.INTRANASAL)]:
        base = ROUTES[route]
        adj = _adjusted(substance, route)
        assert (adj.bioavailability, adj.oral_factor, adj.absorption_h) == \
            (base.bioavailability, base.oral_factor, base.absorption_h)


def test_adjust_returns_inputs_for_unmatched_tuple():
    assert adjust(Substance.MESCALINE, Route.ORAL, 0.3, 0.2, 0.1) == (0.3, 0.2, 0.1)


def test_alcohol_rules():
    assert _adjusted(Substance.ALCOHOL, Route.INTRAVENOUS).bioavailability == pytest.approx(0.1)
    assert _adjusted(Substance.ALCOHOL, Route.SUBCUTANEOUS).bioavailability == pytest.approx(0.08)
    vapour = _adjusted(Substance.ALCOHOL, Route.INHALATION)
    assert (vapour.bioavailability, vapour.absorption_h) == (0.95, 0.05)


def test_fentanyl_patch_and_sublingual():
    patch = _adjusted(Substance.FENTANYL, Route.TRANSDERMAL)
    assert (patch.bioavailability, patch.absorption_h) == (0.92, 12.0)
    assert _adjusted(Substance.FENTANYL, Route.SUBLINGUAL).bioavailability == 0.8


@pytest.mark.parametrize("substance", [Substance.AMPHETAMINE, Substance.METHAMPHETAMINE,
                                       Substance.DEXTROAMPHETAMINE])
def test_stimulant_class_rules(substance):
    nasal = _adjusted(substance, Route.INTRANASAL)
    smoked = _adjusted(substance, Route.INHALATION)
    assert (nasal.bioavailability, nasal.absorption_h) == (0.8, 0.2)
    assert (smoked.bioavailability, smoked.absorption_h) == (0.7, 0.08)


@pytest.mark.parametrize("substance", [Substance.HYDROMORPHONE, Substance.OXYCODONE, Substance.MORPHINE,
                                       Substance.HYDROCODONE, Substance.CODEINE, Substance.PETHIDINE,
                                       Substance.METHADONE, Substance.DIAMORPHINE])
def test_opioid_class_rules(substance):
    iv = _adjusted(substance, Route.INTRAVENOUS)
    assert (iv.bioavailability, iv.oral_factor) == (1.0, 0.08)
    assert _adjusted(substance, Route.INTRANASAL).bioavailability == 0.65


def test_psychedelic_inhalation_except_dmt():
    for substance in (Substance.LSD, Substance.KETAMINE, Substance.MESCALINE, Substance.PSILOCYBIN):
        assert _adjusted(substance, Route.INHALATION).bioavailability == pytest.approx(0.9 * 0.3)
    dmt = _adjusted(Substance.DMT, Route.INHALATION)
    assert (dmt.bioavailability, dmt.absorption_h) == (0.8, 0.02)


def test_benzodiazepine_and_ketamine_rules():
    sl = _adjusted(Substance.BENZODIAZEPINES, Route.SUBLINGUAL)
    pr = _adjusted(Substance.BENZODIAZEPINES, Route.RECTAL)
    assert (sl.bioavailability, sl.absorption_h) == (0.9, 0.3)
    assert (pr.bioavailability, pr.absorption_h) == (0.8, 0.5)
    nasal = _adjusted(Substance.KETAMINE, Route.INTRANASAL)
    im = _adjusted(Substance.KETAMINE, Route.INTRAMUSCULAR)
    assert (nasal.bioavailability, nasal.absorption_h) == (0.5, 0.3)
    assert (im.bioavailability, im.absorption_h) == (0.93, 0.3)


def test_ghb_halved_off_the_oral_route():
    assert _adjusted(Substance.GHB, Route.ORAL).bioavailability == 0.7
    assert _adjusted(Substance.GHB, Route.RECTAL).bioavailability == pytest.approx(0.35)


def test_topical_blanket_rule_runs_last():
    # GHB's halving is overwritten by the topical restriction
    ghb = _adjusted(Substance.GHB, Route.TOPICAL)
    assert (ghb.bioavailability, ghb.oral_factor) == (0.05, 0.002)
    for exempt in (Substance.FENTANYL, Substance.METHADONE):
        adj = _adjusted(exempt, Route.TOPICAL)
        assert (adj.bioavailability, adj.oral_factor) == (0.1, 0.005)
    assert RULES[-1].label == "topical"
