import json
import logging
import re
from typing import Any, Optional

from openai import APIError, APIStatusError, AsyncOpenAI, RateLimitError

from ..config import settings

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """The AI gateway call failed."""


class GatewayNotConfiguredError(GatewayError):
    pass


class GatewayRateLimitError(GatewayError):
    pass


class GatewayPaymentError(GatewayError):
    pass


_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_FENCED_JSON_RE = re.compile(r"```json\n([\s\S]*?)\n```")
_FENCED_RE = re.compile(r"```\n([\s\S]*?)\n```")


def extract_json_object(reply: Optional[str]) -> Optional[dict[str, Any]]:
    """Parse the outermost {...} span of a model reply. None if there is none or it is invalid."""
    if not reply:
        return None
    match = _JSON_OBJECT_RE.search(reply)
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def extract_fenced_json(reply: Optional[str]) -> Optional[dict[str, Any]]:
    """Parse JSON from a ```json (or bare ```) block, else the whole reply."""
    if not reply:
        return None
    match = _FENCED_JSON_RE.search(reply) or _FENCED_RE.search(reply)
    raw = match.group(1) if match else reply.strip()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _client() -> AsyncOpenAI:
    if not settings.gateway_api_key:
        raise GatewayNotConfiguredError("GATEWAY_API_KEY is not configured.")
    return AsyncOpenAI(
        api_key=settings.gateway_api_key,
        base_url=settings.gateway_base_url,
        timeout=settings.gateway_timeout_seconds,
    )


async def complete(
    system_prompt: str,
    user_content: str | list[dict[str, Any]],
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> str:
    """
    Run one chat completion through the gateway and return the reply text.
    Raises GatewayNotConfiguredError, GatewayRateLimitError, GatewayPaymentError or GatewayError.
    """
    client = _client()

    kwargs: dict[str, Any] = {}
    if temperature is not None:
        kwargs["temperature"] = temperature
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens

    try:
        response = await client.chat.completions.create(
            model=settings.gateway_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            **kwargs,
        )
    except RateLimitError as exc:
        logger.warning("AI gateway rate limit exceeded: %s", exc)
        raise GatewayRateLimitError("Rate limit exceeded. Please try again later.") from exc
    except APIStatusError as exc:
        if exc.status_code == 402:
            logger.warning("AI gateway requires payment: %s", exc)
            raise GatewayPaymentError("Payment required. Please add credits to your workspace.") from exc
        logger.error("AI gateway error %s: %s", exc.status_code, exc)
        raise GatewayError("AI gateway error") from exc
    except APIError as exc:
        logger.error("AI gateway error: %s", exc)
        raise GatewayError("AI gateway error") from exc

    if not response.choices:
        raise GatewayError("AI gateway returned no choices.")

    content = (response.choices[0].message.content or "").strip()
    logger.info("AI gateway reply: %s", content[:200])
    return content
