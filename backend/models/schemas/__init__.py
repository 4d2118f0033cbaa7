"""Pydantic contracts shared by the scoring services."""

from models.schemas.feedback import FeedbackScoreResult, HistoricalFeedback, SimilarFeedback
from models.schemas.quality import QualityScores
from models.schemas.tier import Tier, TierConfig, TierProgress

__all__ = [
    "FeedbackScoreResult",
    "HistoricalFeedback",
    "SimilarFeedback",
    "QualityScores",
    "Tier",
    "TierConfig",
    "TierProgress",
]
