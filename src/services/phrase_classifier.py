import logging
from typing import Optional

from ..config import settings
from ..models.live import ClassificationResult, RiskLevel
from .phrase_dictionary import (
    PhraseDictionary,
    default_phrase_dictionary,
    load_phrase_dictionary,
    normalize_text,
)

logger = logging.getLogger(__name__)

NO_MATCH_REASON = "No suspicious phrases detected"

_REASON_LABELS = {
    RiskLevel.HIGH: "High-risk phrases detected",
    RiskLevel.MEDIUM: "Medium-risk phrases detected",
    RiskLevel.LOW: "Low-risk phrases detected",
}

_classifier: Optional["PhraseRiskClassifier"] = None


class PhraseRiskClassifier:
    """
    Scores a single utterance against tiered phrase lists.

    Matching is raw substring containment on NFKC-normalized, lower-cased
    text, with no word-boundary check. Calls share the dictionary and keep
    no state between them.
    """

    def __init__(self, dictionary: PhraseDictionary, reason_max_phrases: int = 3):
        if reason_max_phrases < 1:
            raise ValueError("reason_max_phrases must be at least 1.")
        self.dictionary = dictionary
        self.reason_max_phrases = reason_max_phrases

    def _matches(self, text: str, level: RiskLevel) -> list[str]:
        return [phrase for phrase in self.dictionary.tier(level) if phrase in text]

    def _reason(self, level: RiskLevel, matched: list[str]) -> str:
        shown = ", ".join(matched[: self.reason_max_phrases])
        return f"{_REASON_LABELS[level]}: {shown}"

    def classify(self, text: str) -> ClassificationResult:
        normalized = normalize_text(text or "")

        high = self._matches(normalized, RiskLevel.HIGH)
        medium = self._matches(normalized, RiskLevel.MEDIUM)
        low = self._matches(normalized, RiskLevel.LOW)

        if high:
            return ClassificationResult(
                risk=RiskLevel.HIGH,
                matched_phrases=high,
                reason=self._reason(RiskLevel.HIGH, high),
            )

        if len(medium) >= 2 or (medium and low):
            matched = medium + low
            return ClassificationResult(
                risk=RiskLevel.MEDIUM,
                matched_phrases=matched,
                reason=self._reason(RiskLevel.MEDIUM, matched),
            )

        # A lone medium phrase, or any low-tier evidence, is reported but stays low.
        if medium or low:
            matched = medium + low
            return ClassificationResult(
                risk=RiskLevel.LOW,
                matched_phrases=matched,
                reason=self._reason(RiskLevel.LOW, matched),
            )

        return ClassificationResult(risk=RiskLevel.LOW, matched_phrases=[], reason=NO_MATCH_REASON)


def build_classifier() -> PhraseRiskClassifier:
    if settings.phrase_dictionary_path:
        dictionary = load_phrase_dictionary(settings.phrase_dictionary_path)
    else:
        dictionary = default_phrase_dictionary()
    return PhraseRiskClassifier(dictionary, reason_max_phrases=settings.reason_max_phrases)


def init_classifier() -> PhraseRiskClassifier:
    """Build the shared classifier now. A bad phrase dictionary raises ValueError here."""
    global _classifier
    _classifier = build_classifier()
    logger.info("Phrase risk classifier ready.")
    return _classifier


def get_classifier() -> PhraseRiskClassifier:
    if _classifier is None:
        return init_classifier()
    return _classifier


def classify(text: str) -> ClassificationResult:
    return get_classifier().classify(text)
