from fastapi import APIRouter, HTTPException, status

from ..models.link import LinkAnalysis, LinkRequest
from ..services.link_service import analyze_link
from ..services.llm_gateway import (
    GatewayNotConfiguredError,
    GatewayPaymentError,
    GatewayRateLimitError,
)

router = APIRouter(prefix="/link", tags=["Link Analyzer"])


@router.post(
    "",
    response_model=LinkAnalysis,
    summary="Check a URL for phishing and malware signals",
    description=(
        "Asks the AI gateway to review the URL structure, domain and known malicious patterns. "
        "Unparsable model replies are returned as 'suspicious' with low confidence."
    ),
)
async def analyze_link_route(request: LinkRequest) -> LinkAnalysis:
    try:
        return await analyze_link(request.url)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except GatewayNotConfiguredError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    except GatewayRateLimitError as exc:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(exc))
    except GatewayPaymentError:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail="AI service requires payment. Please contact support.",
        )
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Link analysis failed: {exc}",
        )
