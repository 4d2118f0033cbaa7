import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Upstream providers
    embedding_model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    judge_timeout_seconds: float = 30.0
    embedding_timeout_seconds: float = 15.0
    embedding_max_concurrency: int = 2  # encodes in flight, including timed-out ones
    summary_timeout_seconds: float = 60.0

    # Originality
    time_decay_days: float = 30.0
    similar_feedback_limit: int = 5

    max_feedback_length: int = 10000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "protected_namespaces": ("settings_",)}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
