import logging
from typing import Any

from ..config import settings
from ..models.live import RiskLevel
from ..models.screenshot import ScreenshotAnalysis
from .llm_gateway import complete, extract_fenced_json, extract_json_object

logger = logging.getLogger(__name__)

FALLBACK_RECOMMENDATION = "Verify the sender through official channels before responding."

_USER_INSTRUCTION = (
    "Analyze this conversation screenshot for any signs of scam or fraudulent activity. "
    "Provide a detailed analysis following the specified JSON format."
)

_SYSTEM_PROMPT = """\
You are an expert scam detection AI specializing in analyzing conversation screenshots for fraudulent activity in the Middle East region (Qatar, UAE, Saudi Arabia, Bahrain, Kuwait, Oman, and surrounding countries).

Analyze the screenshot for:
1. Sender Legitimacy: Check phone numbers, usernames, and profile details
2. Message Content: Look for urgency tactics, threats, promises of rewards
3. Language Patterns: Identify suspicious grammar, spelling, or phrasing
4. Regional Scam Patterns: Recognize Middle East-specific fraud tactics
5. Visual Indicators: Check for fake logos, edited images, or impersonation

Regional scam types to detect:
- Government impersonation (MOI, police, immigration, customs)
- Banking fraud (QNB, Emirates NBD, Al Rajhi Bank, etc.)
- Delivery scams (Aramex, DHL, FedEx)
- Telecom fraud (Ooredoo, Etisalat, Du, Zain, STC, Mobily)
- Prize/lottery scams
- Investment schemes
- Romance scams
- Job offer fraud
- Real estate scams

Response format (JSON):
{{
  "riskLevel": "low" | "medium" | "high",
  "confidence": 0-100,
  "scamType": "specific type or 'legitimate'",
  "reasoning": "detailed explanation of your analysis",
  "redFlags": ["flag1", "flag2"],
  "recommendations": ["action1", "action2"]
}}

Language: {language_instruction}\
"""


def build_system_prompt(language: str) -> str:
    instruction = "Respond in Arabic" if language == "ar" else "Respond in English"
    return _SYSTEM_PROMPT.format(language_instruction=instruction)


def _as_str_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


def _clamp_confidence(value: Any) -> int:
    try:
        return max(0, min(100, int(float(value))))
    except (TypeError, ValueError, OverflowError):
        return 50


def _normalize_reply(reply: str) -> ScreenshotAnalysis:
    data = extract_fenced_json(reply) or extract_json_object(reply)
    if data is None:
        logger.error("Failed to parse screenshot analysis: %s", reply[:200])
        return ScreenshotAnalysis(
            risk_level=RiskLevel.MEDIUM,
            confidence=50,
            scam_type="unknown",
            reasoning=reply,
            red_flags=[],
            recommendations=[FALLBACK_RECOMMENDATION],
        )

    risk = data.get("riskLevel")
    if risk not in ("low", "medium", "high"):
        risk = "medium"

    return ScreenshotAnalysis(
        risk_level=RiskLevel(risk),
        confidence=_clamp_confidence(data.get("confidence")),
        scam_type=str(data.get("scamType") or "unknown"),
        reasoning=str(data.get("reasoning") or ""),
        red_flags=_as_str_list(data.get("redFlags")),
        recommendations=_as_str_list(data.get("recommendations")) or [FALLBACK_RECOMMENDATION],
    )


async def analyze_screenshot(image: str, language: str = "en") -> ScreenshotAnalysis:
    if not image.strip():
        raise ValueError("No image provided")
    if not image.startswith(("data:image/", "http://", "https://")):
        raise ValueError("Image must be a data:image/... URL or an http(s) URL.")

    logger.info("Sending screenshot to AI gateway for analysis (language=%s).", language)
    reply = await complete(
        build_system_prompt(language),
        [
            {"type": "text", "text": _USER_INSTRUCTION},
            {"type": "image_url", "image_url": {"url": image}},
        ],
        temperature=settings.screenshot_temperature,
        max_tokens=settings.screenshot_max_tokens,
    )
    return _normalize_reply(reply)
