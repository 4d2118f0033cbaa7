"""Tests for the feedback scoring pipeline."""

from datetime import datetime, timedelta, timezone

import pytest

from models.schemas.feedback import FeedbackScoreResult, HistoricalFeedback
from models.schemas.quality import QualityScores
from services import embeddings, feedback_scorer, quality_judge

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)

GOOD_SCORES = QualityScores(
    relevance=8, depth=7, evidence=6, constructiveness=8, tone=9,
    summary="Detailed performance report with a fix.",
)


def _install(monkeypatch, quality, embedding):
    async def fake_judge(feedback_text, project_context, has_media, timeout=None):
        return quality

    async def fake_embed(text, timeout=None):
        return embedding

    monkeypatch.setattr(quality_judge, "analyze_feedback", fake_judge)
    monkeypatch.setattr(embeddings, "generate_embedding", fake_embed)


def _history(*items):
    return [
        HistoricalFeedback(
            id=item_id,
            content="older feedback",
            embedding=vector,
            created_at=NOW - timedelta(days=days_ago),
        )
        for item_id, vector, days_ago in items
    ]


class TestScoreFeedback:
    @pytest.mark.asyncio
    async def test_first_feedback_is_fully_original(self, monkeypatch):
        _install(monkeypatch, GOOD_SCORES, [1.0, 0.0, 0.0])
        result = await feedback_scorer.score_feedback("text", "context", now=NOW)
        assert isinstance(result, FeedbackScoreResult)
        assert result.scored is True
        assert result.originality == 10
        # (8+7+6+8+9+10)/6 = 8 -> 200 + 7 * 300/9
        assert result.xp == 433
        assert result.similar_feedback == []
        assert result.embedding == [1.0, 0.0, 0.0]

    @pytest.mark.asyncio
    async def test_duplicate_earns_nothing(self, monkeypatch):
        _install(monkeypatch, GOOD_SCORES, [1.0, 0.0, 0.0])
        history = _history((1, [1.0, 0.0, 0.0], 1))
        result = await feedback_scorer.score_feedback(
            "text", "context", history=history, now=NOW
        )
        assert result.originality == 1
        assert result.xp == 0
        assert result.scored is True
        assert result.similar_feedback[0].id == 1

    @pytest.mark.asyncio
    async def test_dissimilar_history_keeps_originality_high(self, monkeypatch):
        _install(monkeypatch, GOOD_SCORES, [1.0, 0.0, 0.0])
        history = _history((1, [0.0, 1.0, 0.0], 2), (2, [0.0, 0.0, 1.0], 40))
        result = await feedback_scorer.score_feedback(
            "text", "context", history=history, now=NOW
        )
        assert result.originality == 10
        assert len(result.similar_feedback) == 2

    @pytest.mark.asyncio
    async def test_own_record_excluded(self, monkeypatch):
        _install(monkeypatch, GOOD_SCORES, [1.0, 0.0, 0.0])
        history = _history((42, [1.0, 0.0, 0.0], 0))
        result = await feedback_scorer.score_feedback(
            "text", "context", history=history, feedback_id=42, now=NOW
        )
        assert result.originality == 10
        assert result.similar_feedback == []

    @pytest.mark.asyncio
    async def test_own_record_excluded_when_id_is_string(self, monkeypatch):
        _install(monkeypatch, GOOD_SCORES, [1.0, 0.0, 0.0])
        history = _history((42, [1.0, 0.0, 0.0], 0))
        result = await feedback_scorer.score_feedback(
            "text", "context", history=history, feedback_id="42", now=NOW
        )
        assert result.originality == 10
        assert result.similar_feedback == []

    @pytest.mark.asyncio
    async def test_corrupt_history_embedding_is_ignored(self, monkeypatch):
        _install(monkeypatch, GOOD_SCORES, [1.0, 0.0, 0.0])
        history = _history((1, [float("nan"), 1.0, 0.0], 0), (2, [1.0, 0.0, 0.0], 0))
        result = await feedback_scorer.score_feedback(
            "text", "context", history=history, now=NOW
        )
        assert [m.id for m in result.similar_feedback] == [2]
        assert result.originality == 1
        assert result.xp == 0

    @pytest.mark.asyncio
    async def test_low_originality_is_penalized(self, monkeypatch):
        _install(monkeypatch, GOOD_SCORES, [1.0, 0.0])
        # similarity 0.8 -> originality 4 -> half XP, floored at 200
        history = _history((1, [0.8, 0.6], 0))
        result = await feedback_scorer.score_feedback(
            "text", "context", history=history, now=NOW
        )
        assert result.originality == 4
        assert result.xp == 200

    @pytest.mark.asyncio
    async def test_missing_embedding_is_generous(self, monkeypatch):
        _install(monkeypatch, GOOD_SCORES, None)
        history = _history((1, [1.0, 0.0, 0.0], 0))
        result = await feedback_scorer.score_feedback(
            "text", "context", history=history, now=NOW
        )
        assert result.originality == 10
        assert result.xp == 433
        assert result.embedding is None

    @pytest.mark.asyncio
    async def test_missing_judgment_awards_nothing(self, monkeypatch):
        _install(monkeypatch, None, [1.0, 0.0, 0.0])
        result = await feedback_scorer.score_feedback("text", "context", now=NOW)
        assert result.scored is False
        assert result.quality is None
        assert result.xp == 0
        # embedding is still returned so it can be stored
        assert result.embedding == [1.0, 0.0, 0.0]

    @pytest.mark.asyncio
    async def test_idempotent(self, monkeypatch):
        _install(monkeypatch, GOOD_SCORES, [0.6, 0.8])
        history = _history((1, [0.8, 0.6], 3), (2, [0.0, 1.0], 10))
        first = await feedback_scorer.score_feedback("t", "c", history=history, now=NOW)
        second = await feedback_scorer.score_feedback("t", "c", history=history, now=NOW)
        assert first == second
