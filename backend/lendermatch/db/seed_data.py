"""
Sample lender reference data: nine DSCR/bridge lenders with their programs,
criteria, state coverage, metros and pricing.

IDs are derived with uuid5 from stable labels so that reseeding, tests and
the in-memory store all agree on the same identifiers.
"""
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional

from lendermatch.core.enums import US_STATE_CODES, CriterionDataType
from lendermatch.models.domain.lender import (
    Lender,
    LenderState,
    Metro,
    PricingMatrixRow,
    Program,
    ProgramCriterion,
    ProgramMetro,
)
from lendermatch.services.matching.criteria_types import CriteriaTypeRegistry
from lendermatch.services.matching.store import ReferenceData

SEED_NAMESPACE = uuid.UUID("8d3f2a5e-4c61-5b7a-9e0d-1f2a3b4c5d6e")


def seed_id(*parts: str) -> uuid.UUID:
    """Deterministic UUID for a seeded row, e.g. seed_id("program", "kiavi-rental")."""
    return uuid.uuid5(SEED_NAMESPACE, "/".join(parts))


def _all_states_except(*excluded: str) -> List[str]:
    return [code for code in US_STATE_CODES if code not in excluded]


METROS_DATA: List[Dict[str, Any]] = [
    {"key": "dfw", "name": "DFW", "state_code": "TX", "coverage_notes": "Dallas-Fort Worth metroplex"},
    {"key": "houston", "name": "Houston", "state_code": "TX", "coverage_notes": "Greater Houston area"},
    {"key": "bay-area", "name": "Bay Area", "state_code": "CA", "coverage_notes": "San Francisco Bay Area"},
    {"key": "los-angeles", "name": "Los Angeles", "state_code": "CA", "coverage_notes": "Greater Los Angeles"},
    {"key": "san-diego", "name": "San Diego", "state_code": "CA", "coverage_notes": "San Diego County"},
    {"key": "phoenix", "name": "Phoenix", "state_code": "AZ", "coverage_notes": "Phoenix metropolitan area"},
    {"key": "miami", "name": "Miami", "state_code": "FL", "coverage_notes": "Miami-Dade, Broward, Palm Beach"},
]

# Criterion tuples: (name, data_type, hard_min, hard_max, soft_min, soft_max, required)
LENDERS_DATA: List[Dict[str, Any]] = [
    {
        "key": "kiavi",
        "name": "Kiavi (formerly LendingHome)",
        "website_url": "https://kiavi.com",
        "contact_name": "John Smith",
        "contact_email": "contact@kiavi.com",
        "profile_score": "95.0",
        "notes": "Major DSCR lender, fast closings",
        "states": _all_states_except("ND", "SD", "VT"),
        "programs": [
            {
                "key": "kiavi-rental",
                "name": "Kiavi Rental Loan",
                "product_type": "DSCR",
                "criteria": [
                    ("min_loan_amount", "decimal", "150000", None, None, None, True),
                    ("max_loan_amount", "decimal", None, "3000000", None, None, True),
                    ("min_fico", "integer", "660", None, "700", None, True),
                    ("max_ltv", "decimal", None, "80", None, "75", False),
                    ("min_dscr", "decimal", "1.15", None, "1.25", None, False),
                ],
                "pricing": [
                    (675, "0-65", "1.35+"),
                    (700, "65-70", "1.35+"),
                    (725, "70-75", "1.35+"),
                    (700, "0-65", "1.25-1.35"),
                    (725, "65-70", "1.25-1.35"),
                    (750, "70-75", "1.25-1.35"),
                ],
            },
            {
                "key": "kiavi-bridge",
                "name": "Kiavi Bridge Loan",
                "product_type": "Bridge",
                "criteria": [
                    ("min_loan_amount", "decimal", "150000", None, None, None, True),
                    ("max_loan_amount", "decimal", None, "7500000", None, None, True),
                ],
            },
        ],
    },
    {
        "key": "lima-one",
        "name": "Lima One Capital",
        "website_url": "https://limaone.com",
        "contact_name": "Jane Doe",
        "contact_email": "contact@limaone.com",
        "profile_score": "92.0",
        "notes": "Good for fix and flip and DSCR",
        "states": ["TX", "FL", "GA", "NC", "SC", "TN", "AL", "OH"],
        "programs": [
            {
                "key": "lima-one-rental360",
                "name": "Lima One Rental360",
                "product_type": "DSCR",
                "criteria": [
                    ("min_loan_amount", "decimal", "100000", None, None, None, True),
                    ("max_loan_amount", "decimal", None, "2000000", None, None, True),
                ],
            },
            {
                "key": "lima-one-fix-flip",
                "name": "Lima One Fix & Flip",
                "product_type": "Fix and Flip",
                "criteria": [
                    ("min_loan_amount", "decimal", "75000", None, None, None, True),
                    ("max_loan_amount", "decimal", None, "1500000", None, None, True),
                ],
            },
        ],
    },
    {
        "key": "visio",
        "name": "Visio Lending",
        "website_url": "https://visiolending.com",
        "contact_name": "Bob Johnson",
        "contact_email": "contact@visiolending.com",
        "profile_score": "88.0",
        "notes": "DSCR specialist, nationwide coverage",
        "states": [],
        "programs": [
            {
                "key": "visio-rental360",
                "name": "Visio Rental360",
                "product_type": "DSCR",
                "criteria": [
                    ("min_loan_amount", "decimal", "100000", None, None, None, True),
                    ("max_loan_amount", "decimal", None, "2000000", None, None, True),
                ],
            },
            {
                "key": "visio-plus",
                "name": "Visio Plus (High LTV)",
                "product_type": "DSCR",
                "criteria": [
                    ("min_loan_amount", "decimal", "75000", None, None, None, True),
                    ("max_loan_amount", "decimal", None, "3000000", None, None, True),
                ],
            },
        ],
    },
    {
        "key": "griffin",
        "name": "Griffin Funding",
        "website_url": "https://griffinfunding.com",
        "contact_name": "Alice Brown",
        "contact_email": "contact@griffinfunding.com",
        "profile_score": "85.0",
        "notes": "Good rates, slower process",
        "states": _all_states_except("NY", "CA", "MN", "ND", "SD", "OR"),
        "programs": [
            {
                "key": "griffin-dscr",
                "name": "Griffin DSCR Standard",
                "product_type": "DSCR",
                "criteria": [
                    ("min_loan_amount", "decimal", "150000", None, None, None, True),
                    ("max_loan_amount", "decimal", None, "2500000", None, None, True),
                ],
            },
        ],
    },
    {
        "key": "truss",
        "name": "Truss Financial",
        "website_url": "https://trussfinancial.com",
        "contact_name": "Charlie Wilson",
        "contact_email": "contact@trussfinancial.com",
        "profile_score": "90.0",
        "notes": "DSCR focus, good for new investors",
        "states": ["TX", "FL", "AZ", "NV", "CO", "GA", "NC"],
        "programs": [
            {
                "key": "truss-dscr",
                "name": "Truss DSCR Investor",
                "product_type": "DSCR",
                "criteria": [
                    ("min_loan_amount", "decimal", "75000", None, None, None, True),
                    ("max_loan_amount", "decimal", None, "1500000", None, None, True),
                ],
            },
        ],
    },
    {
        "key": "corevest",
        "name": "CoreVest Finance",
        "website_url": "https://corevestfinance.com",
        "contact_name": "David Miller",
        "contact_email": "contact@corevest.com",
        "profile_score": "93.0",
        "notes": "Portfolio loans specialist",
        "states": list(US_STATE_CODES),
        "programs": [
            {
                "key": "corevest-express",
                "name": "CoreVest Portfolio Express",
                "product_type": "DSCR",
                "criteria": [
                    ("min_loan_amount", "decimal", "75000", None, "150000", None, True),
                    ("max_loan_amount", "decimal", None, "5000000", None, "3000000", True),
                    ("min_fico", "integer", "680", None, "720", None, True),
                    ("max_ltv", "decimal", None, "80", None, "75", False),
                    ("min_dscr", "decimal", "1.20", None, "1.25", None, True),
                    ("max_properties", "integer", None, "10", None, "5", False),
                ],
                "enums": [("property_types", ["SFR", "MF", "Condo", "Townhome"], True)],
            },
            {
                "key": "corevest-pro",
                "name": "CoreVest Portfolio Pro",
                "product_type": "Portfolio",
                "criteria": [
                    ("min_loan_amount", "decimal", "1000000", None, "2000000", None, True),
                    ("max_loan_amount", "decimal", None, "50000000", None, "20000000", True),
                    ("min_properties", "integer", "5", None, "10", None, True),
                    ("min_fico", "integer", "700", None, "740", None, True),
                    ("max_ltv", "decimal", None, "75", None, "70", True),
                ],
                "pricing": [
                    (625, "0-60", "1.30+"),
                    (650, "60-65", "1.30+"),
                    (675, "65-70", "1.30+"),
                    (700, "70-75", "1.30+"),
                ],
            },
        ],
    },
    {
        "key": "rcn",
        "name": "RCN Capital",
        "website_url": "https://rcncapital.com",
        "contact_name": "Emily Chen",
        "contact_email": "contact@rcncapital.com",
        "profile_score": "87.0",
        "notes": "Fix and flip focus, some DSCR",
        "states": ["CT", "NY", "NJ", "MA", "PA", "FL", "MD", "VA", "NC", "SC", "GA"],
        "programs": [
            {
                "key": "rcn-fix-flip",
                "name": "RCN Fix & Flip",
                "product_type": "Fix and Flip",
                "criteria": [
                    ("min_loan_amount", "decimal", "50000", None, "100000", None, True),
                    ("max_loan_amount", "decimal", None, "2500000", None, "1500000", True),
                    ("min_fico", "integer", "650", None, "680", None, False),
                    ("max_ltc", "decimal", None, "90", None, "85", True),
                    ("max_arv", "decimal", None, "70", None, "65", True),
                    ("term_months", "integer", "12", "12", None, None, True),
                ],
                "enums": [("property_types", ["SFR"], True)],
            },
            {
                "key": "rcn-rental",
                "name": "RCN Rental Finance",
                "product_type": "DSCR",
                "criteria": [
                    ("min_loan_amount", "decimal", "75000", None, "100000", None, True),
                    ("max_loan_amount", "decimal", None, "2500000", None, "2000000", True),
                    ("min_fico", "integer", "680", None, "700", None, True),
                    ("max_ltv", "decimal", None, "80", None, "75", False),
                    ("min_dscr", "decimal", "1.10", None, "1.20", None, True),
                ],
            },
        ],
    },
    {
        "key": "civic",
        "name": "Civic Financial",
        "website_url": "https://civicfs.com",
        "contact_name": "Frank Rodriguez",
        "contact_email": "contact@civicfs.com",
        "profile_score": "89.0",
        "notes": "West coast focused",
        "states": ["CA", "OR", "WA", "AZ", "NV", "UT", "CO"],
        "programs": [
            {
                "key": "civic-bridge-plus",
                "name": "Civic Bridge Plus",
                "product_type": "Bridge",
                "criteria": [
                    ("min_loan_amount", "decimal", "150000", None, "250000", None, True),
                    ("max_loan_amount", "decimal", None, "10000000", None, "5000000", True),
                    ("min_fico", "integer", "660", None, "700", None, True),
                    ("max_ltv", "decimal", None, "85", None, "80", True),
                    ("term_months", "integer", "12", "24", "12", "18", True),
                ],
            },
            {
                "key": "civic-rental-pro",
                "name": "Civic Rental Pro",
                "product_type": "DSCR",
                "criteria": [
                    ("min_loan_amount", "decimal", "150000", None, "300000", None, True),
                    ("max_loan_amount", "decimal", None, "5000000", None, "3000000", True),
                    ("min_fico", "integer", "700", None, "720", None, True),
                    ("max_ltv", "decimal", None, "75", None, "70", True),
                    ("min_dscr", "decimal", "1.20", None, "1.25", None, True),
                ],
                "enums": [("property_types", ["SFR", "Condo", "Townhome"], True)],
                "bools": [("condo_warrantable", None, False)],
                "metros": ["bay-area", "los-angeles", "san-diego"],
            },
        ],
    },
    {
        "key": "abl",
        "name": "Asset Based Lending",
        "website_url": "https://ablending.com",
        "contact_name": "Grace Kim",
        "contact_email": "contact@ablending.com",
        "profile_score": "82.0",
        "notes": "True asset-based, no credit DSCR",
        "states": ["TX", "FL", "GA", "TN", "OH"],
        "programs": [
            {
                "key": "abl-no-credit",
                "name": "ABL No Credit DSCR",
                "product_type": "DSCR",
                "criteria": [
                    ("min_loan_amount", "decimal", "100000", None, "150000", None, True),
                    ("max_loan_amount", "decimal", None, "2000000", None, "1500000", True),
                    # No FICO requirement
                    ("min_fico", "integer", None, None, None, None, False),
                    ("max_ltv", "decimal", None, "70", None, "65", True),
                    ("min_dscr", "decimal", "1.25", None, "1.35", None, True),
                ],
            },
            {
                "key": "abl-pure-asset",
                "name": "ABL Pure Asset",
                "product_type": "Asset Based",
                "criteria": [
                    ("min_loan_amount", "decimal", "100000", None, "200000", None, True),
                    ("max_loan_amount", "decimal", None, "1500000", None, "1000000", True),
                    ("max_ltv", "decimal", None, "65", None, "60", True),
                    ("min_property_value", "decimal", "150000", None, "300000", None, True),
                ],
            },
        ],
    },
]


def _decimal(value: Optional[str]) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


def build_reference_data(registry: Optional[CriteriaTypeRegistry] = None) -> ReferenceData:
    """
    Build the sample reference data as detached model instances.

    Every criterion is validated before it is returned.

    Args:
        registry: Criteria type registry used for validation

    Returns:
        ReferenceData ready to be added to a session or wrapped in an in-memory store

    Raises:
        ValueError: If a seeded criterion violates the authoring invariants
    """
    registry = registry or CriteriaTypeRegistry()
    data = ReferenceData()

    metro_ids: Dict[str, uuid.UUID] = {}
    for metro in METROS_DATA:
        metro_ids[metro["key"]] = seed_id("metro", metro["key"])
        data.metros.append(
            Metro(
                metro_id=metro_ids[metro["key"]],
                name=metro["name"],
                state_code=metro["state_code"],
                coverage_notes=metro["coverage_notes"],
            )
        )

    for lender_data in LENDERS_DATA:
        lender_id = seed_id("lender", lender_data["key"])
        data.lenders.append(
            Lender(
                lender_id=lender_id,
                name=lender_data["name"],
                website_url=lender_data["website_url"],
                contact_name=lender_data["contact_name"],
                contact_email=lender_data["contact_email"],
                notes=lender_data["notes"],
                active=True,
                profile_score=_decimal(lender_data["profile_score"]),
            )
        )
        data.lender_states.extend(
            LenderState(lender_id=lender_id, state_code=code) for code in lender_data["states"]
        )

        for program_data in lender_data["programs"]:
            program_id = seed_id("program", program_data["key"])
            data.programs.append(
                Program(
                    program_id=program_id,
                    program_version=1,
                    lender_id=lender_id,
                    name=program_data["name"],
                    product_type=program_data["product_type"],
                    active=True,
                )
            )

            criteria: List[ProgramCriterion] = []
            for name, data_type, hard_min, hard_max, soft_min, soft_max, required in program_data["criteria"]:
                criteria.append(
                    ProgramCriterion(
                        criterion_id=seed_id("criterion", program_data["key"], name),
                        program_id=program_id,
                        program_version=1,
                        name=name,
                        data_type=CriterionDataType(data_type),
                        hard_min=_decimal(hard_min),
                        hard_max=_decimal(hard_max),
                        soft_min=_decimal(soft_min),
                        soft_max=_decimal(soft_max),
                        required_flag=required,
                        active=True,
                    )
                )
            for name, values, required in program_data.get("enums", []):
                criteria.append(
                    ProgramCriterion(
                        criterion_id=seed_id("criterion", program_data["key"], name),
                        program_id=program_id,
                        program_version=1,
                        name=name,
                        data_type=CriterionDataType.ENUM,
                        enum_values=list(values),
                        required_flag=required,
                        active=True,
                    )
                )
            for name, bool_value, required in program_data.get("bools", []):
                criteria.append(
                    ProgramCriterion(
                        criterion_id=seed_id("criterion", program_data["key"], name),
                        program_id=program_id,
                        program_version=1,
                        name=name,
                        data_type=CriterionDataType.BOOL,
                        bool_value=bool_value,
                        required_flag=required,
                        active=True,
                    )
                )

            for criterion in criteria:
                registry.validate_criterion(criterion)
            data.criteria.extend(criteria)

            data.program_metros.extend(
                ProgramMetro(program_id=program_id, program_version=1, metro_id=metro_ids[key])
                for key in program_data.get("metros", [])
            )
            data.pricing_rows.extend(
                PricingMatrixRow(
                    matrix_id=seed_id("pricing", program_data["key"], ltv_band, dscr_band),
                    program_id=program_id,
                    program_version=1,
                    spread_bps=spread_bps,
                    ltv_band=ltv_band,
                    dscr_band=dscr_band,
                )
                for spread_bps, ltv_band, dscr_band in program_data.get("pricing", [])
            )

    return data
