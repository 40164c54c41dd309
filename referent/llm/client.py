import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from referent.core.config import settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional translator. Translate the following article from English "
    "into Russian. Keep the structure and formatting of the text and translate all "
    "technical terms accurately."
)


class TranslationError(Exception):
    def __init__(self, message: str, status_code: int = 500, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


def friendly_error_message(message: str, status_code: int) -> str:
    """Map known upstream error messages to something a user can act on."""
    if "Insufficient credits" in message:
        return "Insufficient credits on the OpenRouter account. Top up at https://openrouter.ai/settings/credits"
    if "Invalid API key" in message or "Unauthorized" in message:
        return "Invalid API key. Check OPENROUTER_API_KEY"
    if "Rate limit" in message:
        return "Request limit exceeded. Try again later"
    return message or f"Translation API error: {status_code}"


def build_payload(content: str) -> Dict[str, Any]:
    return {
        "model": settings.OPENROUTER_MODEL,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": f"Translate the following article into Russian:\n\n{content}"},
        ],
        "temperature": 0.3,
        "max_tokens": 4000,
    }


async def translate_text(content: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    """
    Translate article text through the OpenRouter chat completion API.

    Timeouts are retried up to LLM_MAX_ATTEMPTS times; any other failure
    raises ``TranslationError`` straight away.
    """
    if settings.USE_MOCK:
        return _mock_translate(content)

    if not settings.OPENROUTER_API_KEY:
        raise TranslationError("API key not configured", status_code=500)

    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.OPENROUTER_API_KEY}",
        "HTTP-Referer": settings.APP_URL,
        "X-Title": "Referent - Article Translator",
    }
    payload = build_payload(content)
    max_attempts = max(1, settings.LLM_MAX_ATTEMPTS)

    async with httpx.AsyncClient(timeout=settings.LLM_TIMEOUT_SECONDS, transport=transport) as client:
        for attempt in range(max_attempts):
            logger.info(
                "LLM ATTEMPT %d/%d: content_len=%d, timeout=%ss",
                attempt + 1, max_attempts, len(content), settings.LLM_TIMEOUT_SECONDS,
            )
            try:
                response = await client.post(settings.OPENROUTER_URL, headers=headers, json=payload)
            except httpx.TimeoutException as e:
                if attempt < max_attempts - 1:
                    backoff = 0.7 * (attempt + 1)
                    logger.warning("LLM timeout, retrying in %.1fs... (%s)", backoff, e)
                    await asyncio.sleep(backoff)
                    continue
                raise TranslationError("Translation service timed out", status_code=504) from e
            except httpx.HTTPError as e:
                raise TranslationError(f"Translation service unreachable: {e}", status_code=503) from e

            return _parse_response(response)

    raise TranslationError("Translation failed")


def _parse_response(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = {}

    if not response.is_success:
        raw = ""
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            raw = data["error"].get("message") or ""
        logger.error("OpenRouter error: status=%d message=%s", response.status_code, raw)
        raise TranslationError(
            friendly_error_message(raw, response.status_code),
            status_code=response.status_code,
            details=raw or None,
        )

    choices = data.get("choices") if isinstance(data, dict) else None
    translated = None
    if choices:
        translated = (choices[0].get("message") or {}).get("content")
    if not translated:
        logger.error("No translation in OpenRouter response")
        raise TranslationError("No translation received from the API", status_code=502)

    logger.info("Translation received: %d chars", len(translated))
    return translated


def _mock_translate(content: str) -> str:
    """Mock implementation for testing without LLM API"""
    return f"[mock translation] {content}"
