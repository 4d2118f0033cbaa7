from pydantic import BaseModel, Field

from models.schemas.feedback import HistoricalFeedback


class FeedbackScoreRequest(BaseModel):
    feedback_text: str = Field(..., min_length=1, max_length=10000, description="Feedback content")
    project_context: str = Field("", max_length=10000, description="Project summary the feedback is about")
    has_media: bool = False
    feedback_id: int | str | None = Field(None, description="Stored id of this feedback, excluded from history matches")
    user_id: int | None = Field(None, description="Author to award XP to, if any")
    history: list[HistoricalFeedback] = Field(default_factory=list, description="Prior feedback on the same project")


class ProjectXPRequest(BaseModel):
    user_id: int


class FeedbackItem(BaseModel):
    content: str = ""
    has_media: bool = False


class SummaryRequest(BaseModel):
    items: list[FeedbackItem] = Field(default_factory=list)
