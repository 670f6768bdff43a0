"""OpenRouter LLM client factory and single-shot completion call."""
from __future__ import annotations

import time

import httpx
import openai

from pagegenie.config import settings
from pagegenie.errors import UpstreamCallFailure
from pagegenie.services import logger as log_service


def _temperature_for_model(model: str) -> float:
    # Some OpenAI GPT-5-compatible gateways reject low temperatures.
    lowered = (model or "").lower()
    if "gpt-5" in lowered:
        return 1
    return 0.2


def get_client() -> openai.AsyncOpenAI:
    """Get an OpenRouter client via the OpenAI-compatible SDK."""
    base_url = settings.openrouter_base_url.strip() or "https://openrouter.ai/api/v1"
    return openai.AsyncOpenAI(
        api_key=settings.openrouter_api_key,
        base_url=base_url,
        timeout=settings.llm_timeout_seconds,
    )


def get_model() -> str:
    """Get the active OpenRouter model id."""
    if settings.openrouter_model:
        return settings.openrouter_model
    return settings.default_model


_client: openai.AsyncOpenAI | None = None


def client() -> openai.AsyncOpenAI:
    """Get or create the LLM client."""
    global _client
    if _client is None:
        _client = get_client()
    return _client


async def complete(
    prompt: str,
    *,
    model: str | None = None,
    max_tokens: int | None = None,
    caller: str = "pipeline",
) -> str:
    """Send ``prompt`` as a single user turn and return the text reply.

    Raises ``UpstreamCallFailure`` on transport errors, non-2xx statuses,
    and empty or malformed responses. There is no retry here.
    """
    if not settings.openrouter_api_key:
        raise UpstreamCallFailure("llm", "OPENROUTER_API_KEY is not configured")

    active_model = model or get_model()
    t0 = time.monotonic()
    try:
        response = await client().chat.completions.create(
            model=active_model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens or settings.llm_max_tokens,
            temperature=_temperature_for_model(active_model),
        )
    except (openai.OpenAIError, httpx.HTTPError) as e:
        log_service.log_llm_call(
            model=active_model,
            caller=caller,
            duration_ms=int((time.monotonic() - t0) * 1000),
            status="error",
            error=str(e),
        )
        raise UpstreamCallFailure("llm", str(e) or type(e).__name__) from e

    elapsed_ms = int((time.monotonic() - t0) * 1000)
    choices = getattr(response, "choices", None) or []
    message = getattr(choices[0], "message", None) if choices else None
    text = getattr(message, "content", None)

    usage = getattr(response, "usage", None)
    input_tokens = getattr(usage, "prompt_tokens", 0) or 0
    output_tokens = getattr(usage, "completion_tokens", 0) or 0

    if not isinstance(text, str) or not text.strip():
        log_service.log_llm_call(
            model=active_model,
            caller=caller,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=elapsed_ms,
            status="error",
            error="empty response",
        )
        raise UpstreamCallFailure("llm", "model returned an empty response")

    log_service.log_llm_call(
        model=active_model,
        caller=caller,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        duration_ms=elapsed_ms,
    )
    return text
