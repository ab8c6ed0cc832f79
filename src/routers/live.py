from fastapi import APIRouter

from ..models.live import (
    ClassificationResult,
    ClassifyRequest,
    PhraseTablesResponse,
    TranscriptReport,
    TranscriptRequest,
)
from ..services.live_monitor_service import classify_transcript
from ..services.phrase_classifier import get_classifier

router = APIRouter(prefix="/live", tags=["Live Call Monitor"])


@router.post(
    "/classify",
    response_model=ClassificationResult,
    summary="Classify one transcript segment",
    description=(
        "Scores a finalized speech segment against the local phrase lists. "
        "No network call is made; empty text is classified as low risk."
    ),
)
def classify_segment(request: ClassifyRequest) -> ClassificationResult:
    return get_classifier().classify(request.text)


@router.post(
    "/transcript",
    response_model=TranscriptReport,
    summary="Classify a running transcript",
    description=(
        "Scores each segment in arrival order and reports the most severe tier. "
        "'alert' is true when any segment is high risk."
    ),
)
def classify_running_transcript(request: TranscriptRequest) -> TranscriptReport:
    return classify_transcript(request.segments)


@router.get("/phrases", response_model=PhraseTablesResponse, summary="List the active phrase tables")
def list_phrases() -> PhraseTablesResponse:
    return PhraseTablesResponse(**get_classifier().dictionary.as_dict())
