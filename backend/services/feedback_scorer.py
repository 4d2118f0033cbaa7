"""Orchestrator: scores a feedback item and computes its XP reward.

Pipeline:
1. Gemini quality judgment and text embedding (concurrent, timeout-bounded)
2. Similarity against prior feedback, weighted by recency
3. Originality score from the weighted similarities
4. XP from quality sub-scores + originality

A missing embedding is generous (feedback counts as fully original); a
missing judgment is conservative (no score, no XP). Neither fails the call.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Sequence

from config import settings
from models.schemas.feedback import FeedbackScoreResult, HistoricalFeedback
from services import embeddings, quality_judge
from services.originality import calculate_originality_score
from services.similarity import rank_similar_feedback
from services.xp import calculate_feedback_xp

logger = logging.getLogger(__name__)


async def score_feedback(
    feedback_text: str,
    project_context: str,
    has_media: bool = False,
    history: Sequence[HistoricalFeedback] = (),
    feedback_id: int | str | None = None,
    now: datetime | None = None,
) -> FeedbackScoreResult:
    """Run the full scoring pipeline for one feedback item."""
    # --- Layer 1: Judge + embedding in parallel ---
    quality, embedding = await asyncio.gather(
        quality_judge.analyze_feedback(feedback_text, project_context, has_media),
        embeddings.generate_embedding(feedback_text),
    )

    # --- Layer 2: Similarity against history ---
    similar = []
    if embedding is not None:
        similar = rank_similar_feedback(
            embedding,
            history,
            limit=settings.similar_feedback_limit,
            exclude_id=feedback_id,
            now=now,
            decay=timedelta(days=settings.time_decay_days),
        )
    else:
        logger.warning("Failed to generate embedding, treating feedback as fully original")

    # --- Layer 3: Originality ---
    originality = calculate_originality_score(
        [m.similarity for m in similar],
        [m.weight for m in similar],
    )
    if similar:
        logger.info(
            "Originality score: %d (based on top %d matches)", originality, len(similar)
        )

    # --- Layer 4: XP ---
    if quality is None:
        logger.error("Failed to analyze feedback, no XP awarded")
        return FeedbackScoreResult(
            scored=False,
            originality=originality,
            xp=0,
            similar_feedback=similar,
            embedding=embedding,
        )

    xp = calculate_feedback_xp(quality, originality)
    return FeedbackScoreResult(
        scored=True,
        quality=quality,
        originality=originality,
        xp=xp,
        similar_feedback=similar,
        embedding=embedding,
    )
