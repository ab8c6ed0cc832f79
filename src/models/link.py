from typing import Literal

from pydantic import BaseModel, Field


LinkRisk = Literal["safe", "suspicious", "dangerous"]
Confidence = Literal["low", "medium", "high"]


class LinkRequest(BaseModel):
    url: str = Field(..., min_length=1, description="The URL to check.")


class LinkAnalysis(BaseModel):
    url: str
    risk: LinkRisk
    confidence: Confidence
    concerns: list[str] = Field(default_factory=list)
    analysis: str
    recommendation: str
