"""In-memory XP accounts.

Stands in for the user store's atomic XP increment: every award is applied
under one lock, so concurrent awards for the same user are never lost, and
each award is appended to that user's audit trail in the order it was made.
"""

import logging
import threading
from collections import defaultdict
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel

from models.schemas.tier import Tier, TierProgress
from services.xp import calculate_project_xp, calculate_tier, get_tier_progress

logger = logging.getLogger(__name__)

AwardReason = Literal["project", "feedback"]


class XPAward(BaseModel):
    user_id: int
    amount: int
    reason: AwardReason
    total_xp: int
    tier: Tier
    awarded_at: datetime


class XPLedger:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._totals: dict[int, int] = defaultdict(int)
        self._history: dict[int, list[XPAward]] = defaultdict(list)

    def award(self, user_id: int, amount: int, reason: AwardReason) -> XPAward:
        """Add ``amount`` XP to a user and return the resulting balance."""
        if amount < 0:
            raise ValueError(f"XP awards cannot be negative, got {amount}")

        with self._lock:
            previous = self._totals[user_id]
            total = previous + amount
            self._totals[user_id] = total
            entry = XPAward(
                user_id=user_id,
                amount=amount,
                reason=reason,
                total_xp=total,
                tier=calculate_tier(total),
                awarded_at=datetime.now(timezone.utc),
            )
            self._history[user_id].append(entry)

        logger.info(
            "Updating user %s: %d + %d = %d XP (%s tier)",
            user_id, previous, amount, total, entry.tier.value,
        )
        return entry

    def award_project(self, user_id: int) -> XPAward:
        return self.award(user_id, calculate_project_xp(), "project")

    def total(self, user_id: int) -> int:
        with self._lock:
            return self._totals.get(user_id, 0)

    def progress(self, user_id: int) -> TierProgress:
        return get_tier_progress(self.total(user_id))

    def history(self, user_id: int) -> list[XPAward]:
        with self._lock:
            return list(self._history.get(user_id, []))

    def clear(self) -> None:
        with self._lock:
            self._totals.clear()
            self._history.clear()


ledger = XPLedger()
