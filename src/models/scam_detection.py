from typing import Literal

from pydantic import BaseModel, Field

from .live import RiskLevel


class ScamDetectionRequest(BaseModel):
    message: str = Field(..., min_length=1, description="The pasted message to check.")


class ScamDetectionResult(BaseModel):
    risk: RiskLevel
    reason: str
    method: Literal["gateway", "phrases"]
    matched_phrases: list[str] = Field(
        default_factory=list,
        description="Only filled when the local phrase classifier produced the verdict.",
    )
