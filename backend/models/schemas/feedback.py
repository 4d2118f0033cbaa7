"""Feedback history records and scoring results."""

from datetime import datetime

from pydantic import BaseModel, Field

from models.schemas.quality import QualityScores


class HistoricalFeedback(BaseModel):
    """A previously stored feedback item used for originality comparison."""
    id: int | str
    content: str = ""
    embedding: list[float] | None = None  # absent until backfilled
    created_at: datetime


class SimilarFeedback(BaseModel):
    """One history match for a new feedback item."""
    id: int | str
    similarity: float = 0.0  # cosine similarity, -1.0-1.0
    weight: float = 1.0  # time-decay weight, >= 0.1


class FeedbackScoreResult(BaseModel):
    """Outcome of scoring a single feedback item.

    ``scored`` is False when the judge produced no usable result; in that
    case ``quality`` is None and ``xp`` is 0.
    """
    scored: bool = False
    quality: QualityScores | None = None
    originality: int = Field(10, ge=1, le=10)
    xp: int = Field(0, ge=0, le=500)
    similar_feedback: list[SimilarFeedback] = []
    embedding: list[float] | None = None
