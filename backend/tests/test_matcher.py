"""End-to-end matching over the sample reference data."""
import asyncio
from datetime import date
from decimal import Decimal

from factories import make_criterion, make_lender, make_program, make_state
from lendermatch.db.seed_data import seed_id
from lendermatch.services.matching.matcher import (
    REJECTED_BY_CRITERIA,
    REJECTED_BY_GEOGRAPHY,
    MatchingService,
)
from lendermatch.services.matching.store import InMemoryReferenceDataStore, ReferenceData


def _find(matches, program_name):
    return next(m for m in matches if m.program.name == program_name)


def test_kiavi_rental_loan_example(store, kiavi_scenario):
    assert set(kiavi_scenario) == {"loan_amount", "fico", "state", "property_type"}
    matches = asyncio.run(MatchingService(store).find_matches(kiavi_scenario))

    kiavi = _find(matches, "Kiavi Rental Loan")
    assert kiavi.evaluation.passed
    assert kiavi.match_score == Decimal("100")
    assert kiavi.unmet_criteria == []
    assert "Operates in TX" in kiavi.reasons
    assert "Can handle loan amount of $595,000" in kiavi.reasons
    # No LTV or DSCR, so no pricing cell applies
    assert kiavi.pricing is None


def test_kiavi_rental_loan_priced_with_ratios(store, priced_scenario):
    matches = asyncio.run(MatchingService(store).find_matches(priced_scenario))

    kiavi = _find(matches, "Kiavi Rental Loan")
    assert kiavi.match_score == Decimal("100")
    assert kiavi.pricing.spread_bps == 750


def test_optional_ratio_criteria_still_gate_when_present(store, priced_scenario):
    scenario = dict(priced_scenario, ltv=85)
    report = asyncio.run(MatchingService(store).evaluate(scenario))

    kiavi = next(r for r in report.rejections if r.program.name == "Kiavi Rental Loan")
    assert kiavi.stage == REJECTED_BY_CRITERIA


def test_ranking_over_sample_data(store, priced_scenario):
    matches = asyncio.run(MatchingService(store).find_matches(priced_scenario))

    assert [(m.lender.name, m.program.name) for m in matches] == [
        ("Kiavi (formerly LendingHome)", "Kiavi Bridge Loan"),
        ("Kiavi (formerly LendingHome)", "Kiavi Rental Loan"),
        ("CoreVest Finance", "CoreVest Portfolio Express"),
        ("Lima One Capital", "Lima One Fix & Flip"),
        ("Lima One Capital", "Lima One Rental360"),
        ("Truss Financial", "Truss DSCR Investor"),
        ("Visio Lending", "Visio Plus (High LTV)"),
        ("Visio Lending", "Visio Rental360"),
        ("Griffin Funding", "Griffin DSCR Standard"),
        ("Asset Based Lending", "ABL No Credit DSCR"),
    ]

    abl = matches[-1]
    assert abl.match_score == Decimal("80")
    assert abl.unmet_criteria == ["max_ltv", "min_dscr"]


def test_rejections_are_reported_by_stage(store, priced_scenario):
    report = asyncio.run(MatchingService(store).evaluate(priced_scenario))

    assert report.lenders_evaluated == 9
    assert report.programs_evaluated == 16
    rejected = {r.program.name: r.stage for r in report.rejections}
    assert rejected == {
        "CoreVest Portfolio Pro": REJECTED_BY_CRITERIA,
        "RCN Fix & Flip": REJECTED_BY_GEOGRAPHY,
        "RCN Rental Finance": REJECTED_BY_GEOGRAPHY,
        "Civic Bridge Plus": REJECTED_BY_GEOGRAPHY,
        "Civic Rental Pro": REJECTED_BY_GEOGRAPHY,
        "ABL Pure Asset": REJECTED_BY_CRITERIA,
    }


def test_loan_below_every_minimum_matches_nothing(store):
    matches = asyncio.run(MatchingService(store).find_matches({"loan_amount": 50000, "state": "TX"}))
    assert matches == []


def test_state_outside_explicit_list_excludes_program(store, priced_scenario):
    scenario = dict(priced_scenario, state="AK")
    report = asyncio.run(MatchingService(store).evaluate(scenario))

    assert all(m.lender.name != "Lima One Capital" for m in report.matches)
    lima_one = next(r for r in report.rejections if r.program.name == "Lima One Rental360")
    assert lima_one.stage == REJECTED_BY_GEOGRAPHY
    assert lima_one.reasons == ["Does not operate in AK"]

    # Visio has no state rows and covers AK
    assert any(m.lender.name == "Visio Lending" for m in report.matches)


def test_missing_required_fields_reject_program(kiavi_scenario):
    lender = make_lender("Strict Lender")
    strict = make_program("Strict DSCR", lender=lender)
    lenient = make_program("Lenient DSCR", lender=lender)
    data = ReferenceData(
        lenders=[lender],
        programs=[strict, lenient],
        criteria=[
            make_criterion("max_ltv", hard_max="80", program=strict),
            make_criterion("max_ltv", hard_max="80", required=False, program=lenient),
        ],
    )
    report = asyncio.run(MatchingService(InMemoryReferenceDataStore(data)).evaluate(kiavi_scenario))

    rejected = next(r for r in report.rejections if r.program.name == "Strict DSCR")
    assert rejected.stage == REJECTED_BY_CRITERIA
    assert "Missing required field 'ltv' for criterion 'max_ltv'" in rejected.reasons
    assert [m.program.name for m in report.matches] == ["Lenient DSCR"]


def test_metro_override_in_matching(store, priced_scenario):
    bay_area = dict(priced_scenario, state="CA", metro_id=str(seed_id("metro", "bay-area")))
    matches = asyncio.run(MatchingService(store).find_matches(bay_area))
    civic = _find(matches, "Civic Rental Pro")
    assert civic.match_score == Decimal("100")

    dfw = dict(priced_scenario, state="CA", metro_id=str(seed_id("metro", "dfw")))
    report = asyncio.run(MatchingService(store).evaluate(dfw))
    rejected = {r.program.name: r.stage for r in report.rejections}
    assert rejected["Civic Rental Pro"] == REJECTED_BY_GEOGRAPHY


def test_matching_is_idempotent(store, priced_scenario):
    service = MatchingService(store)
    first = asyncio.run(service.find_matches(priced_scenario))
    second = asyncio.run(service.find_matches(priced_scenario))

    assert [(m.program.program_id, m.match_score, m.reasons) for m in first] == [
        (m.program.program_id, m.match_score, m.reasons) for m in second
    ]


def test_program_validity_window(reference_data, priced_scenario):
    visio = next(lender for lender in reference_data.lenders if lender.name == "Visio Lending")
    future = make_program(
        "Visio Future DSCR",
        lender=visio,
        valid_from=date(2030, 1, 1),
        valid_to=date(2030, 12, 31),
    )
    reference_data.programs.append(future)
    service = MatchingService(InMemoryReferenceDataStore(reference_data))

    before = asyncio.run(service.find_matches(priced_scenario, as_of=date(2029, 12, 31)))
    during = asyncio.run(service.find_matches(priced_scenario, as_of=date(2030, 6, 1)))
    after = asyncio.run(service.find_matches(priced_scenario, as_of=date(2031, 1, 1)))

    assert "Visio Future DSCR" not in [m.program.name for m in before]
    assert "Visio Future DSCR" in [m.program.name for m in during]
    assert "Visio Future DSCR" not in [m.program.name for m in after]


def test_program_versions_use_their_own_criteria():
    lender = make_lender("Versioned Lender")
    v1 = make_program("Versioned DSCR", lender=lender, valid_to=date(2025, 12, 31))
    v2 = make_program("Versioned DSCR", lender=lender, program_version=2, valid_from=date(2026, 1, 1))
    data = ReferenceData(
        lenders=[lender],
        programs=[v1, v2],
        criteria=[
            make_criterion("min_fico", hard_min="700", program=v1),
            make_criterion("min_fico", hard_min="740", program=v2),
        ],
    )
    service = MatchingService(InMemoryReferenceDataStore(data))
    scenario = {"fico": 720, "state": "TX"}

    assert len(asyncio.run(service.find_matches(scenario, as_of=date(2025, 6, 1)))) == 1
    assert asyncio.run(service.find_matches(scenario, as_of=date(2026, 6, 1))) == []


def test_inactive_lenders_and_programs_are_skipped():
    active = make_lender("Active Lender")
    inactive = make_lender("Inactive Lender", active=False)
    data = ReferenceData(
        lenders=[active, inactive],
        programs=[
            make_program("Open Program", lender=active),
            make_program("Closed Program", lender=active, active=False),
            make_program("Orphaned Program", lender=inactive),
        ],
    )
    matches = asyncio.run(MatchingService(InMemoryReferenceDataStore(data)).find_matches({"state": "TX"}))
    assert [m.program.name for m in matches] == ["Open Program"]


def test_ties_break_on_profile_score_then_name():
    top = make_lender("Zeta Lending", profile_score="95")
    same_a = make_lender("Alpha Lending", profile_score="80")
    same_b = make_lender("Beta Lending", profile_score="80")
    unscored = make_lender("Aardvark Lending", profile_score=None)
    lenders = [unscored, same_b, same_a, top]
    data = ReferenceData(
        lenders=lenders,
        lender_states=[make_state(lender, "TX") for lender in lenders],
        programs=[make_program(f"{lender.name} DSCR", lender=lender) for lender in lenders],
    )
    matches = asyncio.run(MatchingService(InMemoryReferenceDataStore(data)).find_matches({"state": "TX"}))

    assert [m.lender.name for m in matches] == [
        "Zeta Lending",
        "Alpha Lending",
        "Beta Lending",
        "Aardvark Lending",
    ]


def test_malformed_metro_id_is_ignored(store, priced_scenario):
    scenario = dict(priced_scenario, metro_id="not-a-uuid")
    matches = asyncio.run(MatchingService(store).find_matches(scenario))
    assert _find(matches, "Kiavi Rental Loan").match_score == Decimal("100")
