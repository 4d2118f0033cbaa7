"""Embedding similarity for feedback deduplication."""

import logging
from datetime import datetime, timedelta
from typing import Sequence

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as sklearn_cosine

from config import settings
from models.schemas.feedback import HistoricalFeedback, SimilarFeedback
from services.originality import calculate_time_weight

logger = logging.getLogger(__name__)


class DimensionMismatchError(ValueError):
    """Raised when two embeddings of different length are compared."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(f"Embedding dimension mismatch: {left} != {right}")
        self.left = left
        self.right = right


def _as_vector(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=float).ravel()


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity between two equal-length embeddings.

    A zero-norm vector has no direction, so any comparison involving one
    scores 0.0.
    """
    va = _as_vector(a)
    vb = _as_vector(b)
    if va.shape != vb.shape:
        raise DimensionMismatchError(va.size, vb.size)

    norm = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if norm == 0.0:
        return 0.0
    return float(np.dot(va, vb) / norm)


def batch_cosine_similarity(
    query: Sequence[float],
    matrix: Sequence[Sequence[float]],
) -> list[float]:
    """Cosine similarity of one embedding against each row of ``matrix``."""
    q = _as_vector(query)
    if not len(matrix):
        return []
    for row in matrix:
        if len(row) != q.size:
            raise DimensionMismatchError(q.size, len(row))

    rows = np.asarray(matrix, dtype=float)
    scores = np.full(len(rows), np.nan)
    if not np.isfinite(q).all():
        return scores.tolist()

    # Non-finite rows stay NaN, matching cosine_similarity
    finite = np.isfinite(rows).all(axis=1)
    if finite.any():
        # sklearn leaves zero-norm rows unnormalised, so they score 0.0
        scores[finite] = sklearn_cosine(q.reshape(1, -1), rows[finite])[0]
    return [float(s) for s in scores]


def rank_similar_feedback(
    query_embedding: Sequence[float],
    history: Sequence[HistoricalFeedback],
    limit: int | None = None,
    exclude_id: int | str | None = None,
    now: datetime | None = None,
    decay: timedelta | None = None,
) -> list[SimilarFeedback]:
    """Find the most similar historical feedback, most similar first.

    Items without a usable (present, finite) embedding and the item matching
    ``exclude_id`` (the feedback being scored) are skipped. Ids are compared
    as strings, so ``"42"`` and ``42`` refer to the same feedback. Each match
    carries its time-decay weight.
    """
    if limit is None:
        limit = settings.similar_feedback_limit
    if decay is None:
        decay = timedelta(days=settings.time_decay_days)

    excluded = None if exclude_id is None else str(exclude_id)
    candidates = []
    for item in history:
        if item.embedding is None or str(item.id) == excluded:
            continue
        if not np.isfinite(np.asarray(item.embedding, dtype=float)).all():
            logger.warning("Skipping feedback %s: embedding contains non-finite values", item.id)
            continue
        candidates.append(item)
    if not candidates:
        return []
    if not np.isfinite(np.asarray(query_embedding, dtype=float)).all():
        logger.warning("Query embedding contains non-finite values, no similarity signal")
        return []

    scores = batch_cosine_similarity(query_embedding, [item.embedding for item in candidates])
    ranked = sorted(zip(candidates, scores), key=lambda pair: pair[1], reverse=True)[:limit]

    matches = [
        SimilarFeedback(
            id=item.id,
            similarity=score,
            weight=calculate_time_weight(item.created_at, now=now, decay=decay),
        )
        for item, score in ranked
    ]
    if matches:
        logger.debug(
            "Top similarities: %s",
            ", ".join(f"{m.similarity:.3f}" for m in matches[:3]),
        )
    return matches
