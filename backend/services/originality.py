"""Originality scoring for feedback against prior feedback history.

Historical matches are weighted by recency (exponential time decay) and
their weighted average similarity is mapped onto a 1-10 originality scale.
The mapping is deliberately steeper near the duplicate end so that
paraphrased or copy-pasted feedback loses most of its reward.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Sequence

DEFAULT_DECAY = timedelta(days=30)
MIN_TIME_WEIGHT = 0.1  # old feedback never stops counting entirely

MAX_ORIGINALITY = 10
MIN_ORIGINALITY = 1


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def calculate_time_weight(
    timestamp: datetime,
    now: datetime | None = None,
    decay: timedelta = DEFAULT_DECAY,
) -> float:
    """Weight of a historical item by age: ``max(0.1, exp(-age / decay))``.

    Naive datetimes are treated as UTC. A timestamp in the future gives a
    weight above 1.0; this is not capped.
    """
    if decay <= timedelta(0):
        raise ValueError(f"decay must be positive, got {decay}")
    current = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    age = current - _as_utc(timestamp)
    return max(MIN_TIME_WEIGHT, math.exp(-(age / decay)))


def _raw_originality(avg_similarity: float) -> float:
    if avg_similarity >= 0.95:
        # Almost identical - likely spam/farming
        return 1.0
    if avg_similarity >= 0.85:
        return 1 + (0.95 - avg_similarity) * 20  # 1-3
    if avg_similarity >= 0.7:
        return 3 + (0.85 - avg_similarity) * 20  # 3-6
    if avg_similarity >= 0.5:
        return 6 + (0.7 - avg_similarity) * 15  # 6-9
    return 9 + (0.5 - avg_similarity) * 2  # 9-10


def calculate_originality_score(
    similarities: Sequence[float],
    weights: Sequence[float] | None = None,
) -> int:
    """Convert similarity scores against history into originality (1-10).

    Args:
        similarities: Cosine similarities between the new feedback and
            historical feedback items.
        weights: Optional per-item weights (usually time-decay weights),
            aligned with ``similarities``. Uniform when omitted.

    Returns:
        10 when there is nothing to compare against, down to 1 for
        near-duplicates.
    """
    sims = list(similarities)
    if weights is None:
        ws = [1.0] * len(sims)
    else:
        ws = list(weights)
        if len(ws) != len(sims):
            raise ValueError(
                f"Got {len(ws)} weights for {len(sims)} similarity scores"
            )

    # NaN/inf similarities carry no signal
    pairs = [(s, w) for s, w in zip(sims, ws) if math.isfinite(s)]
    if not pairs:
        return MAX_ORIGINALITY

    total_weight = sum(w for _, w in pairs)
    if total_weight <= 0:
        return MAX_ORIGINALITY

    avg_similarity = sum(s * w for s, w in pairs) / total_weight
    originality = round_half_up(_raw_originality(avg_similarity))
    return max(MIN_ORIGINALITY, min(MAX_ORIGINALITY, originality))
