import asyncio
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from services import embeddings


@pytest.fixture(autouse=True)
def _fresh_workers(monkeypatch):
    """Give each test its own encode workers and slots."""
    executor = ThreadPoolExecutor(max_workers=2)
    monkeypatch.setattr(embeddings, "_executor", executor)
    monkeypatch.setattr(embeddings, "_encode_slots", threading.BoundedSemaphore(2))
    yield
    executor.shutdown(wait=False)


class _FakeModel:
    def __init__(self, delay=0.0):
        self.delay = delay
        self.calls = 0

    def encode(self, text, convert_to_numpy=True):
        self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        return np.array([0.25, -0.5, 1.0], dtype=np.float32)


@pytest.mark.asyncio
async def test_generate_embedding(monkeypatch):
    monkeypatch.setattr(embeddings, "_get_sbert_model", lambda: _FakeModel())
    vector = await embeddings.generate_embedding("The onboarding flow is confusing")
    assert vector == [0.25, -0.5, 1.0]
    assert all(isinstance(x, float) for x in vector)


@pytest.mark.asyncio
async def test_blank_text(monkeypatch):
    monkeypatch.setattr(embeddings, "_get_sbert_model", lambda: _FakeModel())
    assert await embeddings.generate_embedding("   ") is None


@pytest.mark.asyncio
async def test_model_unavailable(monkeypatch):
    monkeypatch.setattr(embeddings, "_get_sbert_model", lambda: None)
    assert await embeddings.generate_embedding("some feedback") is None


@pytest.mark.asyncio
async def test_timeout(monkeypatch):
    monkeypatch.setattr(embeddings, "_get_sbert_model", lambda: _FakeModel(delay=0.5))
    assert await embeddings.generate_embedding("some feedback", timeout=0.01) is None


@pytest.mark.asyncio
async def test_timed_out_encodes_hold_their_slot(monkeypatch):
    monkeypatch.setattr(embeddings, "_encode_slots", threading.BoundedSemaphore(1))
    slow = _FakeModel(delay=0.3)
    monkeypatch.setattr(embeddings, "_get_sbert_model", lambda: slow)

    assert await embeddings.generate_embedding("first", timeout=0.01) is None
    # The abandoned encode is still running, so nothing new is queued behind it
    assert await embeddings.generate_embedding("second", timeout=0.01) is None

    await asyncio.sleep(0.6)
    assert slow.calls == 1
    monkeypatch.setattr(embeddings, "_get_sbert_model", lambda: _FakeModel())
    assert await embeddings.generate_embedding("third") == [0.25, -0.5, 1.0]


@pytest.mark.asyncio
async def test_concurrent_calls_within_limit(monkeypatch):
    model = _FakeModel(delay=0.05)
    monkeypatch.setattr(embeddings, "_get_sbert_model", lambda: model)
    results = await asyncio.gather(
        embeddings.generate_embedding("a"),
        embeddings.generate_embedding("b"),
        embeddings.generate_embedding("c"),
    )
    assert sum(r is not None for r in results) == 2
    assert model.calls == 2


@pytest.mark.asyncio
async def test_encode_error(monkeypatch):
    class Broken:
        def encode(self, text, convert_to_numpy=True):
            raise RuntimeError("CUDA out of memory")

    monkeypatch.setattr(embeddings, "_get_sbert_model", lambda: Broken())
    assert await embeddings.generate_embedding("some feedback") is None


@pytest.mark.integration
@pytest.mark.asyncio
async def test_real_model_similarity():
    from services.similarity import cosine_similarity

    a = await embeddings.generate_embedding("Great project! Very innovative approach.", timeout=300)
    b = await embeddings.generate_embedding("The API documentation needs error code examples.", timeout=300)
    if a is None or b is None:
        pytest.skip("embedding model not available")
    assert cosine_similarity(a, a) == pytest.approx(1.0, abs=1e-6)
    assert cosine_similarity(a, b) < 0.9
