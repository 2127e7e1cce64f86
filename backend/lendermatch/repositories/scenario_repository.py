"""Repository for loan scenarios and their matching attribute maps."""

from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lendermatch.models.domain.scenario import Scenario
from lendermatch.repositories.base import BaseRepository
from lendermatch.utils.case import dict_keys_to_snake

# Well-known loan_data field names -> attribute names criteria resolve against
SCENARIO_ATTRIBUTE_ALIASES: Dict[str, str] = {
    "credit_score": "fico",
    "fico_score": "fico",
    "requested_amount": "loan_amount",
    "state_code": "state",
    "estimated_value": "property_value",
    "number_of_properties": "property_count",
    "num_properties": "property_count",
    "metro": "metro_id",
}


def flatten_loan_data(loan_data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Flatten a nested loan_data document into named scenario attributes.

    Keys are converted to snake_case and nested sections such as
    "borrower", "property" and "loan" are merged into one level, with
    top-level values winning over nested ones. Aliases only fill
    attributes that are not already present.

    Example:
        {"borrower": {"creditScore": 720}, "loan": {"loanAmount": 595000}}
        -> {"credit_score": 720, "fico": 720, "loan_amount": 595000}

    Args:
        loan_data: Raw scenario document (camelCase or snake_case)

    Returns:
        Flat attribute map
    """
    if not loan_data:
        return {}

    document = dict_keys_to_snake(loan_data)
    attributes: Dict[str, Any] = {}

    for value in document.values():
        if isinstance(value, dict):
            for key, nested in value.items():
                if not isinstance(nested, (dict, list)):
                    attributes[key] = nested

    for key, value in document.items():
        if not isinstance(value, dict):
            attributes[key] = value

    for source, target in SCENARIO_ATTRIBUTE_ALIASES.items():
        if attributes.get(target) is None and attributes.get(source) is not None:
            attributes[target] = attributes[source]

    return attributes


class ScenarioRepository(BaseRepository[Scenario]):
    """Repository for Scenario with the lookup the matching endpoint consumes."""

    def __init__(self, db: AsyncSession):
        """
        Initialize the scenario repository.

        Args:
            db: Async database session
        """
        super().__init__(Scenario, db)

    async def get_attributes(self, scenario_id: UUID) -> Optional[Dict[str, Any]]:
        """
        Named attribute map of a scenario.

        Args:
            scenario_id: UUID of the scenario

        Returns:
            Flattened attributes, or None if the scenario does not exist
        """
        scenario = await self.get_by_id(scenario_id)
        if scenario is None:
            return None
        return flatten_loan_data(scenario.loan_data)
