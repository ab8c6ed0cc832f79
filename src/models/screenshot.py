from typing import Literal

from pydantic import BaseModel, Field

from .live import RiskLevel


class ScreenshotRequest(BaseModel):
    image: str = Field(
        ...,
        min_length=1,
        description="The screenshot as a data URL (data:image/png;base64,...) or an http(s) URL.",
    )
    language: Literal["en", "ar"] = Field(
        default="en",
        description="Language the analysis should be written in.",
    )


class ScreenshotAnalysis(BaseModel):
    risk_level: RiskLevel
    confidence: int = Field(ge=0, le=100)
    scam_type: str
    reasoning: str
    red_flags: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
