import logging
from typing import Any

from ..models.link import LinkAnalysis
from .llm_gateway import complete, extract_fenced_json

logger = logging.getLogger(__name__)

FALLBACK_CONCERN = "Unable to fully analyze the URL"
FALLBACK_RECOMMENDATION = (
    "Exercise caution when visiting this link. Verify its authenticity before proceeding."
)

_SYSTEM_PROMPT = """\
You are an expert cybersecurity analyst specializing in URL and link analysis. Analyze the provided URL for potential security threats, phishing attempts, malware, and suspicious patterns.

Consider:
1. Domain reputation and age
2. URL structure (suspicious subdomains, typosquatting, encoded characters)
3. Use of URL shorteners
4. Suspicious TLDs (top-level domains)
5. Phishing indicators (impersonating legitimate brands)
6. Malware distribution patterns
7. Social engineering tactics in URL structure
8. HTTPS vs HTTP usage
9. Known malicious patterns

Return your analysis in this JSON format:
{
  "risk": "safe" | "suspicious" | "dangerous",
  "confidence": "low" | "medium" | "high",
  "concerns": ["list of specific security concerns"],
  "analysis": "detailed explanation of findings",
  "recommendation": "clear action the user should take"
}\
"""


def _fallback(url: str, reply: str) -> LinkAnalysis:
    return LinkAnalysis(
        url=url,
        risk="suspicious",
        confidence="low",
        concerns=[FALLBACK_CONCERN],
        analysis=reply,
        recommendation=FALLBACK_RECOMMENDATION,
    )


def _normalize_reply(url: str, reply: str) -> LinkAnalysis:
    data: dict[str, Any] | None = extract_fenced_json(reply)
    if data is None:
        logger.error("Failed to parse AI response as JSON: %s", reply[:200])
        return _fallback(url, reply)

    risk = data.get("risk")
    if risk not in ("safe", "suspicious", "dangerous"):
        risk = "suspicious"

    confidence = data.get("confidence")
    if confidence not in ("low", "medium", "high"):
        confidence = "low"

    concerns = data.get("concerns") or []
    if not isinstance(concerns, list):
        concerns = [concerns]

    return LinkAnalysis(
        url=url,
        risk=risk,
        confidence=confidence,
        concerns=[str(c) for c in concerns],
        analysis=str(data.get("analysis") or ""),
        recommendation=str(data.get("recommendation") or FALLBACK_RECOMMENDATION),
    )


async def analyze_link(url: str) -> LinkAnalysis:
    url = url.strip()
    if not url:
        raise ValueError("URL is required")

    logger.info("Analyzing URL: %s", url[:100])
    reply = await complete(_SYSTEM_PROMPT, f"Analyze this URL for security threats: {url}")
    return _normalize_reply(url, reply)
