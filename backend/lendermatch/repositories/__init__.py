from .base import BaseRepository
from .lender_repository import LenderRepository
from .scenario_repository import ScenarioRepository

__all__ = [
    "BaseRepository",
    "LenderRepository",
    "ScenarioRepository",
]
