"""Quality sub-scores returned by the LLM feedback judge."""

from pydantic import BaseModel, Field

SCORE_FIELDS = ("relevance", "depth", "evidence", "constructiveness", "tone")


class QualityScores(BaseModel):
    """The five judged dimensions of a feedback item, each 1-10.

    Produced by the external judge; the reward engine only consumes them.
    Values outside 1-10 fail validation.
    """
    relevance: int = Field(..., ge=1, le=10)
    depth: int = Field(..., ge=1, le=10)
    evidence: int = Field(..., ge=1, le=10)
    constructiveness: int = Field(..., ge=1, le=10)
    tone: int = Field(..., ge=1, le=10)
    summary: str = ""  # one-sentence summary from the judge

    def as_list(self) -> list[int]:
        return [getattr(self, name) for name in SCORE_FIELDS]
