from fastapi import APIRouter, Depends, HTTPException, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_ledger, get_summary_guard
from config import settings
from models.requests import FeedbackScoreRequest, ProjectXPRequest, SummaryRequest
from models.responses import FeedbackScoreResponse, SummaryResponse, TiersResponse, UserXPResponse
from models.schemas.tier import TierProgress
from services import feedback_scorer, summary as summary_service
from services.similarity import DimensionMismatchError
from services.summary import InFlightGuard, SummaryInProgressError
from services.xp import TIER_THRESHOLDS, get_tier_progress
from services.xp_ledger import XPAward, XPLedger

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
    }


@router.post("/feedback/score", response_model=FeedbackScoreResponse)
@limiter.limit("30/minute")
async def score_feedback(
    request: Request,
    body: FeedbackScoreRequest,
    ledger: XPLedger = Depends(get_ledger),
):
    if len(body.feedback_text) > settings.max_feedback_length:
        raise HTTPException(
            status_code=400,
            detail=f"Feedback too long (max {settings.max_feedback_length} chars)",
        )
    if not body.feedback_text.strip():
        raise HTTPException(status_code=400, detail="Feedback text is empty")

    try:
        result = await feedback_scorer.score_feedback(
            body.feedback_text,
            body.project_context,
            has_media=body.has_media,
            history=body.history,
            feedback_id=body.feedback_id,
        )
    except DimensionMismatchError as e:
        raise HTTPException(status_code=422, detail=str(e))

    award = None
    if body.user_id is not None and result.xp > 0:
        award = ledger.award(body.user_id, result.xp, "feedback")
    return FeedbackScoreResponse(result=result, award=award)


@router.post("/projects/xp", response_model=XPAward)
async def award_project_xp(
    body: ProjectXPRequest,
    ledger: XPLedger = Depends(get_ledger),
):
    return ledger.award_project(body.user_id)


@router.get("/tiers", response_model=TiersResponse)
async def list_tiers():
    return TiersResponse(tiers=TIER_THRESHOLDS)


@router.get("/tiers/progress", response_model=TierProgress)
async def tier_progress(xp: int = Query(..., ge=0)):
    return get_tier_progress(xp)


@router.get("/users/{user_id}/xp", response_model=UserXPResponse)
async def user_xp(user_id: int, ledger: XPLedger = Depends(get_ledger)):
    return UserXPResponse(
        user_id=user_id,
        progress=ledger.progress(user_id),
        history=ledger.history(user_id),
    )


@router.post("/projects/{project_id}/summary", response_model=SummaryResponse)
async def generate_summary(
    project_id: int,
    body: SummaryRequest,
    guard: InFlightGuard = Depends(get_summary_guard),
):
    items = [(item.content, item.has_media) for item in body.items if item.content.strip()]
    if not items:
        raise HTTPException(status_code=400, detail="No feedback available to summarize")

    try:
        text = await summary_service.summarize_feedback(project_id, items, guard=guard)
    except SummaryInProgressError:
        raise HTTPException(status_code=409, detail="Summary already in progress for this project")

    if text is None:
        raise HTTPException(status_code=502, detail="Failed to generate summary")
    return SummaryResponse(project_id=project_id, summary=text)
