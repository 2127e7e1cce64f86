"""HTTP surface: health, scenarios, lenders and matching."""
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from factories import FailingStore, make_criterion, make_lender, make_program, make_state
from lendermatch.core.enums import CriterionDataType, ScenarioStatus
from lendermatch.deps import (
    get_lender_repository,
    get_match_service,
    get_scenario_repository,
    get_session,
)
from lendermatch.main import app
from lendermatch.services.matching.matcher import MatchingService
from lendermatch.services.scenario_match_service import ScenarioMatchService

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
KIAVI_SCENARIO_ID = uuid.UUID("0b7e3a52-6f0d-4e39-9a0e-5d2c1f4a8b61")


class FakeScenarioLookup:
    def __init__(self, scenarios):
        self.scenarios = scenarios

    async def get_attributes(self, scenario_id):
        return self.scenarios.get(scenario_id)


class FakeSession:
    def __init__(self, error=None):
        self.error = error

    async def execute(self, stmt):
        if self.error is not None:
            raise self.error
        return None


class FakeScenarioRepository:
    async def create(self, **fields):
        return SimpleNamespace(
            id=KIAVI_SCENARIO_ID,
            status=ScenarioStatus.DRAFT,
            created_at=NOW,
            updated_at=NOW,
            **fields,
        )


class FakeLenderRepository:
    def __init__(self, lenders):
        self.lenders = {lender.lender_id: lender for lender in lenders}

    async def list_lenders(self, active_only=True, skip=0, limit=100):
        lenders = [l for l in self.lenders.values() if l.active or not active_only]
        return sorted(lenders, key=lambda l: l.name)[skip:skip + limit]

    async def count_lenders(self, active_only=True):
        return len([l for l in self.lenders.values() if l.active or not active_only])

    async def get_with_programs(self, lender_id):
        return self.lenders.get(lender_id)


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def match_service(store, priced_scenario):
    lookup = FakeScenarioLookup({KIAVI_SCENARIO_ID: priced_scenario})
    service = ScenarioMatchService(lookup, MatchingService(store), soft_match_threshold=Decimal("100"))
    app.dependency_overrides[get_match_service] = lambda: service
    return service


def _match_url(scenario_id=KIAVI_SCENARIO_ID):
    return f"/api/v1/scenarios/{scenario_id}/match"


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/api/docs"


def test_health_reports_database_and_cache(client):
    app.dependency_overrides[get_session] = lambda: FakeSession()
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "healthy"
    assert "reference_cache_entries" in body


def test_health_degrades_when_database_is_down(client):
    app.dependency_overrides[get_session] = lambda: FakeSession(SQLAlchemyError("connection refused"))
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"


def test_create_scenario(client):
    app.dependency_overrides[get_scenario_repository] = lambda: FakeScenarioRepository()
    payload = {
        "title": "Kiavi example",
        "loan_data": {"loan": {"loanAmount": 595000}, "borrower": {"creditScore": 720}},
    }

    response = client.post("/api/v1/scenarios/", json=payload)

    assert response.status_code == 201
    body = response.json()
    assert body["id"] == str(KIAVI_SCENARIO_ID)
    assert body["status"] == "draft"
    assert body["loan_data"]["loan"]["loanAmount"] == 595000


def test_create_scenario_validates_title(client):
    app.dependency_overrides[get_scenario_repository] = lambda: FakeScenarioRepository()
    response = client.post("/api/v1/scenarios/", json={"title": ""})
    assert response.status_code == 422


def test_match_scenario_camel_case_response(client, match_service):
    response = client.post(_match_url())

    assert response.status_code == 200
    body = response.json()
    assert body["scenarioId"] == str(KIAVI_SCENARIO_ID)
    assert body["totalMatches"] == 10
    assert Decimal(str(body["confidenceScore"])) == Decimal("100")
    assert body["rejectedPrograms"] == []

    kiavi = body["matches"][0]
    assert kiavi["lenderName"] == "Kiavi (formerly LendingHome)"
    rental = next(p for p in kiavi["matchingPrograms"] if p["programName"] == "Kiavi Rental Loan")
    assert rental["matchType"] == "HARD"
    assert Decimal(str(rental["matchScore"])) == Decimal("100")
    assert rental["pricing"]["spreadBps"] == 750
    assert "Operates in TX" in rental["reasons"]
    assert "Can handle loan amount of $595,000" in rental["reasons"]

    abl = body["matches"][-1]
    assert abl["lenderName"] == "Asset Based Lending"
    assert abl["matchingPrograms"][0]["matchType"] == "SOFT"
    assert abl["matchingPrograms"][0]["unmetCriteria"] == ["max_ltv", "min_dscr"]


def test_match_scenario_can_exclude_soft_matches(client, match_service):
    response = client.post(_match_url(), json={"includeSoftMatches": False})

    assert response.status_code == 200
    body = response.json()
    assert body["totalMatches"] == 9
    assert all(m["lenderName"] != "Asset Based Lending" for m in body["matches"])


def test_match_scenario_can_include_rejections(client, match_service):
    response = client.post(_match_url(), json={"includeRejected": True})

    body = response.json()
    stages = {p["programName"]: p["stage"] for p in body["rejectedPrograms"]}
    assert stages["RCN Fix & Flip"] == "geography"
    assert stages["CoreVest Portfolio Pro"] == "criteria"


def test_match_unknown_scenario_is_404(client, match_service):
    response = client.post(_match_url(uuid.uuid4()))
    assert response.status_code == 404


def test_match_with_no_qualifying_program_is_empty(client, store):
    scenario_id = uuid.uuid4()
    lookup = FakeScenarioLookup({scenario_id: {"loan_amount": 50000, "state": "TX"}})
    service = ScenarioMatchService(lookup, MatchingService(store))
    app.dependency_overrides[get_match_service] = lambda: service

    response = client.post(_match_url(scenario_id))

    assert response.status_code == 200
    body = response.json()
    assert body["matches"] == []
    assert body["totalMatches"] == 0
    assert Decimal(str(body["confidenceScore"])) == Decimal("0")
    assert body["totalLenders"] == 0
    assert body["byProductType"] == {}


def test_reference_data_outage_is_503(client):
    lookup = FakeScenarioLookup({KIAVI_SCENARIO_ID: {"loan_amount": 595000, "state": "TX"}})
    service = ScenarioMatchService(lookup, MatchingService(FailingStore()))
    app.dependency_overrides[get_match_service] = lambda: service

    response = client.post(_match_url())

    assert response.status_code == 503
    assert response.json()["detail"] == "Lender reference data is temporarily unavailable"


def _lenders_with_programs():
    nationwide = make_lender("Visio Lending", profile_score="88", created_at=NOW, updated_at=NOW)
    restricted = make_lender(
        "Lima One Capital", profile_score="92", created_at=NOW, updated_at=NOW
    )
    restricted.states = [make_state(restricted, "TX"), make_state(restricted, "FL")]

    program = make_program("Visio Rental360", lender=nationwide)
    program.criteria = [
        make_criterion("min_loan_amount", hard_min="100000", program=program),
        make_criterion("property_types", CriterionDataType.ENUM, enum_values=["SFR"], program=program),
    ]
    nationwide.programs = [program]
    return [nationwide, restricted]


def test_list_lenders_with_coverage(client):
    app.dependency_overrides[get_lender_repository] = lambda: FakeLenderRepository(_lenders_with_programs())

    response = client.get("/api/v1/lenders/")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    coverage = {item["name"]: (item["coverage"], item["states"]) for item in body["items"]}
    assert coverage["Visio Lending"] == ("nationwide", [])
    assert coverage["Lima One Capital"] == ("restricted", ["FL", "TX"])


def test_get_lender_with_programs(client):
    lenders = _lenders_with_programs()
    app.dependency_overrides[get_lender_repository] = lambda: FakeLenderRepository(lenders)

    response = client.get(f"/api/v1/lenders/{lenders[0].lender_id}")

    assert response.status_code == 200
    programs = response.json()["programs"]
    assert [p["name"] for p in programs] == ["Visio Rental360"]
    assert {c["name"] for c in programs[0]["criteria"]} == {"min_loan_amount", "property_types"}


def test_get_unknown_lender_is_404(client):
    app.dependency_overrides[get_lender_repository] = lambda: FakeLenderRepository([])
    response = client.get(f"/api/v1/lenders/{uuid.uuid4()}")
    assert response.status_code == 404


def test_lender_total_counts_beyond_the_page(client):
    app.dependency_overrides[get_lender_repository] = lambda: FakeLenderRepository(_lenders_with_programs())

    response = client.get("/api/v1/lenders/", params={"limit": 1})

    body = response.json()
    assert [item["name"] for item in body["items"]] == ["Lima One Capital"]
    assert body["total"] == 2


def test_match_summary_counts_lenders_and_product_types(client, match_service):
    body = client.post(_match_url()).json()

    assert body["totalLenders"] == 7
    assert body["byProductType"] == {"DSCR": 8, "Bridge": 1, "Fix and Flip": 1}
    assert sum(body["byProductType"].values()) == body["totalMatches"]


def test_match_summary_follows_soft_match_filter(client, match_service):
    body = client.post(_match_url(), json={"includeSoftMatches": False}).json()

    assert body["totalLenders"] == 6
    assert body["byProductType"]["DSCR"] == 7


def test_soft_matches_are_kept_when_flag_is_omitted(client, match_service):
    omitted = client.post(_match_url()).json()
    explicit = client.post(_match_url(), json={"includeSoftMatches": True}).json()

    assert omitted["totalMatches"] == explicit["totalMatches"] == 10
    assert any(
        program["matchType"] == "SOFT"
        for lender in omitted["matches"]
        for program in lender["matchingPrograms"]
    )
