import logging
from typing import Optional

from ..models.live import RiskLevel, SegmentResult, TranscriptReport
from .phrase_classifier import PhraseRiskClassifier, get_classifier

logger = logging.getLogger(__name__)


def classify_transcript(
    segments: list[str],
    classifier: Optional[PhraseRiskClassifier] = None,
) -> TranscriptReport:
    """
    Classify finalized transcript segments in arrival order.
    Each segment is scored on its own; the report carries the most severe tier seen.
    """
    classifier = classifier or get_classifier()

    results: list[SegmentResult] = []
    high_risk: list[int] = []

    for index, text in enumerate(segments):
        result = classifier.classify(text)
        results.append(SegmentResult(index=index, text=text, **result.model_dump()))

        if result.risk == RiskLevel.HIGH:
            high_risk.append(index)
            logger.warning("High-risk speech in segment %d: %s", index, result.reason)

    overall = max((r.risk for r in results), default=RiskLevel.LOW)

    return TranscriptReport(
        segments=results,
        overall_risk=overall,
        alert=bool(high_risk),
        high_risk_segments=high_risk,
    )
