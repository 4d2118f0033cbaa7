"""Tier table entries and progress views."""

from enum import Enum

from pydantic import BaseModel


class Tier(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    DIAMOND = "diamond"


class TierConfig(BaseModel):
    name: Tier
    min_xp: int
    max_xp: int | None = None  # None = unbounded
    label: str = ""


class TierProgress(BaseModel):
    """Where a user's cumulative XP sits within the tier table."""
    xp: int = 0
    current_tier: Tier = Tier.BRONZE
    current_tier_config: TierConfig
    next_tier_config: TierConfig | None = None
    progress_percentage: int = 0  # 0-100
    xp_to_next_tier: int = 0
