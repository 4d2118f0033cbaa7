"""Sentence embeddings for feedback text."""

import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from config import settings

logger = logging.getLogger(__name__)

# Lazy-loaded SentenceTransformer (loaded on first use)
_sbert_model = None

# A timed-out encode keeps its worker until the model returns, so the slot is
# only released when the thread finishes, not when the caller gives up.
_executor = ThreadPoolExecutor(
    max_workers=settings.embedding_max_concurrency,
    thread_name_prefix="embedding",
)
_encode_slots = threading.BoundedSemaphore(settings.embedding_max_concurrency)


def _get_sbert_model():
    """Load the embedding model lazily on first call."""
    global _sbert_model
    if _sbert_model is None:
        try:
            from sentence_transformers import SentenceTransformer

            _sbert_model = SentenceTransformer(settings.embedding_model_name)
            logger.info("Embedding model %s loaded successfully", settings.embedding_model_name)
        except Exception as e:
            logger.warning("Failed to load embedding model %s: %s", settings.embedding_model_name, e)
    return _sbert_model


def _encode(text: str) -> list[float] | None:
    model = _get_sbert_model()
    if model is None:
        return None
    embedding = model.encode(text, convert_to_numpy=True)
    return [float(x) for x in embedding]


async def generate_embedding(text: str, timeout: float | None = None) -> list[float] | None:
    """Embed ``text``; None when the model is unavailable, fails, or times out.

    Encoding runs in a worker thread so the event loop is not blocked. At most
    ``embedding_max_concurrency`` encodes run at once; when every slot is taken
    (for example by encodes that already timed out) the call returns None
    immediately instead of queueing more work.
    """
    if not text.strip():
        return None
    if timeout is None:
        timeout = settings.embedding_timeout_seconds

    slots = _encode_slots
    if not slots.acquire(blocking=False):
        logger.warning("All embedding workers busy, skipping embedding")
        return None
    future = _executor.submit(_encode, text)
    # Fires when the thread finishes, or when a queued encode is cancelled
    future.add_done_callback(lambda _: slots.release())

    try:
        return await asyncio.wait_for(asyncio.wrap_future(future), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Embedding timed out after %.1fs", timeout)
        return None
    except Exception as e:
        logger.warning("Embedding failed: %s", e)
        return None
