from fastapi import APIRouter, HTTPException, status

from ..models.screenshot import ScreenshotAnalysis, ScreenshotRequest
from ..services.llm_gateway import (
    GatewayNotConfiguredError,
    GatewayPaymentError,
    GatewayRateLimitError,
)
from ..services.screenshot_service import analyze_screenshot

router = APIRouter(prefix="/screenshot", tags=["Screenshot Scanner"])


@router.post(
    "",
    response_model=ScreenshotAnalysis,
    summary="Check a conversation screenshot for fraud",
    description=(
        "Sends the screenshot to a vision-capable model on the AI gateway. "
        "Set language to 'ar' for an Arabic analysis."
    ),
)
async def analyze_screenshot_route(request: ScreenshotRequest) -> ScreenshotAnalysis:
    try:
        return await analyze_screenshot(request.image, language=request.language)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except GatewayNotConfiguredError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI service not configured",
        )
    except GatewayRateLimitError as exc:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(exc))
    except GatewayPaymentError as exc:
        raise HTTPException(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=str(exc))
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="AI analysis failed",
        )
