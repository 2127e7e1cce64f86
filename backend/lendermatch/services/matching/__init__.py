"""Matching engine for evaluating loan scenarios against lender programs."""

from .cache import CachedReferenceDataStore, ReferenceDataCache
from .criteria_types import CriteriaTypeRegistry
from .evaluator import CriteriaEvaluator, CriterionResult, ProgramEvaluation
from .geography import CoverageMode, GeographicCoverageResolver
from .matcher import MatchingService, MatchReport, RankedMatch, RejectedProgram
from .pricing import PricingTier, PricingTierResolver
from .scoring import SOFT_MISS_PENALTY, MatchScore, MatchScorer
from .store import InMemoryReferenceDataStore, ReferenceData, ReferenceDataStore

__all__ = [
    "CachedReferenceDataStore",
    "CoverageMode",
    "CriteriaEvaluator",
    "CriteriaTypeRegistry",
    "CriterionResult",
    "GeographicCoverageResolver",
    "InMemoryReferenceDataStore",
    "MatchReport",
    "MatchScore",
    "MatchScorer",
    "MatchingService",
    "PricingTier",
    "PricingTierResolver",
    "ProgramEvaluation",
    "RankedMatch",
    "ReferenceDataCache",
    "ReferenceData",
    "ReferenceDataStore",
    "RejectedProgram",
    "SOFT_MISS_PENALTY",
]
