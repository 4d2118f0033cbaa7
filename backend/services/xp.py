"""XP (experience points) rewards and tier progression.

Users earn XP from:
- Creating projects (fixed amount)
- Giving feedback (200-500, scaled by judged quality and originality)

Tiers are a pure function of cumulative XP and are never stored on their own.
"""

import math

from models.schemas.quality import QualityScores
from models.schemas.tier import Tier, TierConfig, TierProgress
from services.originality import round_half_up

TIER_THRESHOLDS: list[TierConfig] = [
    TierConfig(name=Tier.BRONZE, min_xp=0, max_xp=999, label="Bronze - Beginner / Newcomer"),
    TierConfig(name=Tier.SILVER, min_xp=1000, max_xp=4999, label="Silver - Active Contributor"),
    TierConfig(name=Tier.GOLD, min_xp=5000, max_xp=11999, label="Gold - Reliable Builder / Creator"),
    TierConfig(name=Tier.PLATINUM, min_xp=12000, max_xp=24999, label="Platinum - Top 10-15%"),
    TierConfig(name=Tier.DIAMOND, min_xp=25000, max_xp=None, label="Diamond - Top 1-3% (elite)"),
]

PROJECT_BASE = 200  # fixed XP for creating a project
FEEDBACK_MIN = 200  # floor for any accepted, non-duplicate feedback
FEEDBACK_MAX = 500
ORIGINALITY_THRESHOLD = 5  # below this, XP is penalized
ORIGINALITY_PENALTY = 0.5

SCORE_MIN = 1
SCORE_MAX = 10


def _clamp_score(value: float, name: str) -> float:
    if not math.isfinite(value):
        raise ValueError(f"{name} score must be a finite number, got {value!r}")
    return max(SCORE_MIN, min(SCORE_MAX, value))


def calculate_tier(xp: float) -> Tier:
    """Highest tier whose ``min_xp`` is at or below ``xp``.

    Each tier runs up to the next tier's ``min_xp``, so fractional XP such as
    4999.5 stays in silver. Negative or NaN XP falls back to bronze.
    """
    tier = Tier.BRONZE
    for config in TIER_THRESHOLDS:
        if xp >= config.min_xp:
            tier = config.name
    return tier


def get_tier_config(tier: Tier) -> TierConfig:
    for config in TIER_THRESHOLDS:
        if config.name == tier:
            return config
    raise ValueError(f"Unknown tier: {tier}")


def calculate_project_xp() -> int:
    return PROJECT_BASE


def calculate_feedback_xp(scores: QualityScores, originality: float) -> int:
    """XP earned for one feedback item.

    Args:
        scores: Judged quality sub-scores (1-10 each).
        originality: Originality score (1-10) against prior feedback.

    Returns:
        0 for duplicate feedback (originality <= 1), otherwise 200-500.
        Feedback with originality below 5 earns half, but never less than
        the 200 floor.
    """
    originality = _clamp_score(originality, "originality")

    # Duplicate/unoriginal feedback earns nothing
    if originality <= 1:
        return 0

    sub_scores = [
        _clamp_score(value, name)
        for name, value in zip(
            ("relevance", "depth", "evidence", "constructiveness", "tone"),
            scores.as_list(),
        )
    ]
    average = (sum(sub_scores) + originality) / 6

    # Map a [1, 10] average onto [FEEDBACK_MIN, FEEDBACK_MAX]
    xp = FEEDBACK_MIN + (average - 1) * ((FEEDBACK_MAX - FEEDBACK_MIN) / 9)

    # Anti-farming penalty
    if originality < ORIGINALITY_THRESHOLD:
        xp = xp * ORIGINALITY_PENALTY

    xp = max(FEEDBACK_MIN, min(FEEDBACK_MAX, xp))
    return round_half_up(xp)


def get_tier_progress(xp: int) -> TierProgress:
    """Current tier, next tier and progress through the current tier."""
    current_tier = calculate_tier(xp)
    current_config = get_tier_config(current_tier)
    index = TIER_THRESHOLDS.index(current_config)
    next_config = TIER_THRESHOLDS[index + 1] if index < len(TIER_THRESHOLDS) - 1 else None

    if next_config is not None and current_config.max_xp is not None:
        tier_range = current_config.max_xp - current_config.min_xp + 1
        progress = (xp - current_config.min_xp) / tier_range * 100
        xp_to_next = next_config.min_xp - xp
    else:
        # Already at max tier
        progress = 100
        xp_to_next = 0

    return TierProgress(
        xp=xp,
        current_tier=current_tier,
        current_tier_config=current_config,
        next_tier_config=next_config,
        progress_percentage=round_half_up(progress),
        xp_to_next_tier=max(0, xp_to_next),
    )
