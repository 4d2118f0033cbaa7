"""Google Gemini API wrapper with error handling."""

import asyncio
import json
import logging

from google import genai
from google.genai import types

from config import settings

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - Gemini features disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


async def _generate(prompt: str, timeout: float, json_output: bool) -> str | None:
    client = get_client()
    if client is None:
        return None

    config = types.GenerateContentConfig(
        temperature=0.3,
        max_output_tokens=4096,
        response_mime_type="application/json" if json_output else None,
    )
    try:
        response = await asyncio.wait_for(
            client.aio.models.generate_content(
                model=settings.gemini_model,
                contents=prompt,
                config=config,
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.error("Gemini API call timed out after %.1fs", timeout)
        return None
    except Exception as e:
        logger.error("Gemini API error: %s", e)
        return None

    if not response.text:
        logger.error("Empty response from Gemini")
        return None
    return response.text


async def generate_json(prompt: str, timeout: float = 30.0) -> dict | None:
    """Send a prompt to Gemini and parse the JSON response."""
    text = await _generate(prompt, timeout, json_output=True)
    if text is None:
        return None

    try:
        data = json.loads(_strip_code_fences(text))
    except json.JSONDecodeError as e:
        logger.error("Failed to parse Gemini response as JSON: %s", e)
        return None

    if not isinstance(data, dict):
        logger.error("Gemini returned JSON %s, expected an object", type(data).__name__)
        return None
    return data


async def generate_text(prompt: str, timeout: float = 60.0) -> str | None:
    """Send a prompt to Gemini and return the plain-text response."""
    text = await _generate(prompt, timeout, json_output=False)
    if text is None:
        return None
    return _strip_code_fences(text) or None
