from pydantic import BaseModel

from models.schemas.feedback import FeedbackScoreResult
from models.schemas.tier import TierConfig, TierProgress
from services.xp_ledger import XPAward


class FeedbackScoreResponse(BaseModel):
    result: FeedbackScoreResult
    award: XPAward | None = None  # set when XP was credited to a user


class TiersResponse(BaseModel):
    tiers: list[TierConfig] = []


class UserXPResponse(BaseModel):
    user_id: int
    progress: TierProgress
    history: list[XPAward] = []


class SummaryResponse(BaseModel):
    project_id: int
    summary: str
