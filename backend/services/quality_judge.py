"""LLM judge for feedback quality.

Asks Gemini to score a feedback item on five dimensions. A missing or
unusable answer is reported as None and must never be replaced by guessed
scores: no quality signal means no reward.
"""

import logging
import math
from typing import Any

from config import settings
from models.schemas.quality import SCORE_FIELDS, QualityScores
from services import gemini_client, prompt_builder

logger = logging.getLogger(__name__)


def _coerce_score(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    # Out-of-range answers are clamped rather than rejected
    return max(1, min(10, int(math.floor(value + 0.5))))


def parse_judge_payload(payload: Any) -> QualityScores | None:
    """Validate a judge response into QualityScores, or None if unusable."""
    if not isinstance(payload, dict):
        logger.error("Judge response is not a JSON object: %r", payload)
        return None

    scores: dict[str, int] = {}
    for name in SCORE_FIELDS:
        score = _coerce_score(payload.get(name))
        if score is None:
            logger.error("Judge response has missing or invalid %s: %r", name, payload.get(name))
            return None
        scores[name] = score

    summary = payload.get("summary")
    return QualityScores(**scores, summary=summary.strip() if isinstance(summary, str) else "")


async def analyze_feedback(
    feedback_text: str,
    project_context: str,
    has_media: bool,
    timeout: float | None = None,
) -> QualityScores | None:
    """Judge one feedback item against its project context."""
    prompt = prompt_builder.build_feedback_analysis_prompt(
        project_context, feedback_text, has_media
    )
    if timeout is None:
        timeout = settings.judge_timeout_seconds
    payload = await gemini_client.generate_json(prompt, timeout=timeout)
    if payload is None:
        logger.warning("Feedback judge unavailable, no quality scores")
        return None
    return parse_judge_payload(payload)
