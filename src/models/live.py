from enum import Enum

from pydantic import BaseModel, Field


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]

    def __lt__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_RANK = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2}


class ClassificationResult(BaseModel):
    risk: RiskLevel
    matched_phrases: list[str] = Field(
        default_factory=list,
        description="Dictionary phrases found in the text, high tier first, then medium, then low.",
    )
    reason: str


class ClassifyRequest(BaseModel):
    text: str = Field(
        default="",
        description="One finalized transcript segment. Empty text is accepted and classified as low risk.",
    )


class TranscriptRequest(BaseModel):
    segments: list[str] = Field(
        default_factory=list,
        description="Finalized transcript segments in arrival order.",
    )


class SegmentResult(ClassificationResult):
    index: int = Field(ge=0, description="Position of the segment in the submitted transcript.")
    text: str


class TranscriptReport(BaseModel):
    segments: list[SegmentResult]
    overall_risk: RiskLevel
    alert: bool = Field(description="True when at least one segment was classified as high risk.")
    high_risk_segments: list[int] = Field(default_factory=list)


class PhraseTablesResponse(BaseModel):
    high: list[str]
    medium: list[str]
    low: list[str]
