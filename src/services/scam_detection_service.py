import logging

from ..models.live import RiskLevel
from ..models.scam_detection import ScamDetectionRequest, ScamDetectionResult
from .llm_gateway import (
    GatewayError,
    GatewayPaymentError,
    GatewayRateLimitError,
    complete,
    extract_json_object,
)
from .phrase_classifier import classify

logger = logging.getLogger(__name__)


UNPARSABLE_REASON = "Unable to parse AI analysis. Please review the message carefully."
DEFAULT_REASON = "Analysis completed."

_SYSTEM_PROMPT = """\
You are an expert scam detection AI. Analyze the given message and determine if it's likely a scam.

Consider these scam indicators:
- Urgent or threatening language
- Requests for personal information (passwords, SSN, bank details)
- Claims of prizes, winnings, or unexpected money
- Pressure tactics or time-limited offers
- Suspicious links or shortened URLs
- Impersonation of legitimate organizations
- Grammar/spelling errors from supposed official sources
- Requests to transfer money or gift cards
- Cryptocurrency/investment schemes
- Phishing attempts

Respond ONLY with a JSON object in this exact format:
{
  "risk": "low" | "medium" | "high",
  "reason": "Brief explanation of your assessment"
}

Be strict in your evaluation - err on the side of caution.\
"""


def _normalize_reply(reply: str) -> ScamDetectionResult:
    data = extract_json_object(reply)
    if data is None:
        logger.error("Failed to parse AI response: %s", reply[:200])
        return ScamDetectionResult(risk=RiskLevel.MEDIUM, reason=UNPARSABLE_REASON, method="gateway")

    risk = data.get("risk")
    if risk not in ("low", "medium", "high"):
        risk = "medium"

    reason = data.get("reason")
    if not reason or not isinstance(reason, str):
        reason = DEFAULT_REASON

    return ScamDetectionResult(risk=RiskLevel(risk), reason=reason, method="gateway")


def _phrase_detect(message: str) -> ScamDetectionResult:
    result = classify(message)
    return ScamDetectionResult(
        risk=result.risk,
        reason=result.reason,
        method="phrases",
        matched_phrases=result.matched_phrases,
    )


async def detect_scam(request: ScamDetectionRequest) -> ScamDetectionResult:
    message = request.message
    if not message.strip():
        raise ValueError("Message is required")

    logger.info("Analyzing message: %s", message[:100])

    try:
        reply = await complete(_SYSTEM_PROMPT, message)
        return _normalize_reply(reply)
    except (GatewayRateLimitError, GatewayPaymentError):
        raise
    except GatewayError as exc:
        logger.warning("Gateway scam detection failed (%s), falling back to phrase classifier.", exc)

    return _phrase_detect(message)
