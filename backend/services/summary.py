"""Project-level summaries of collected feedback."""

import asyncio
import logging
from collections.abc import Hashable, Sequence
from contextlib import asynccontextmanager
from typing import AsyncIterator

from config import settings
from services import gemini_client, prompt_builder

logger = logging.getLogger(__name__)


class SummaryInProgressError(RuntimeError):
    """Raised when a summary is requested for a key that is already running."""

    def __init__(self, key: Hashable) -> None:
        super().__init__(f"Summary already in progress for {key!r}")
        self.key = key


class InFlightGuard:
    """At most one running job per key.

    Keys are released on every exit path, including errors and cancellation.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._running: set[Hashable] = set()

    def is_running(self, key: Hashable) -> bool:
        return key in self._running

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        async with self._lock:
            if key in self._running:
                raise SummaryInProgressError(key)
            self._running.add(key)
        try:
            yield
        finally:
            self._running.discard(key)


_guard = InFlightGuard()


def get_guard() -> InFlightGuard:
    return _guard


async def summarize_feedback(
    project_id: int | str,
    items: Sequence[tuple[str, bool]],
    guard: InFlightGuard | None = None,
) -> str | None:
    """Summarize a project's feedback; ``items`` are (content, has_media).

    Returns None if the model produced nothing.
    """
    if not items:
        raise ValueError("No feedback available to summarize")
    guard = guard or _guard

    async with guard.hold(project_id):
        logger.info("Generating summary for project %s from %d feedback items", project_id, len(items))
        prompt = prompt_builder.build_feedback_summary_prompt(items)
        summary = await gemini_client.generate_text(prompt, timeout=settings.summary_timeout_seconds)

    if summary is None:
        logger.error("Failed to generate summary for project %s", project_id)
    return summary
