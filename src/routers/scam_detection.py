from fastapi import APIRouter, HTTPException, status

from ..models.scam_detection import ScamDetectionRequest, ScamDetectionResult
from ..services.llm_gateway import GatewayPaymentError, GatewayRateLimitError
from ..services.scam_detection_service import detect_scam

router = APIRouter(prefix="/message", tags=["Message Scanner"])


@router.post(
    "",
    response_model=ScamDetectionResult,
    summary="Check a pasted message for scam signals",
    description=(
        "Sends the message to the AI gateway for a low/medium/high verdict. "
        "Falls back to the local phrase classifier when the gateway is unavailable."
    ),
)
async def detect_scam_route(request: ScamDetectionRequest) -> ScamDetectionResult:
    try:
        return await detect_scam(request)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except GatewayRateLimitError as exc:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(exc))
    except GatewayPaymentError as exc:
        raise HTTPException(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=str(exc))
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Scam detection failed: {exc}",
        )
