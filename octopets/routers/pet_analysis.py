from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from ..middleware.rate_limit import limiter, PET_ANALYSIS_LIMIT
from ..schemas.pet_analysis import (
    PetAnalysisRequest,
    PetAnalysisResponse,
    VenueDescriptionRequest,
    VenueDescriptionResponse,
    VenueRecommendationRequest,
    VenueRecommendationsResponse,
)
from ..services.pet_analysis import GatewayResult, SERVICE_NAME, get_pet_analysis_gateway
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

DEGRADED_HEADER = "X-Pet-Analysis-Degraded"
DEGRADED_REASON_HEADER = "X-Pet-Analysis-Degraded-Reason"


def _blank(value: str) -> bool:
    return not value or not value.strip()


def mark_degraded(response: Response, result: GatewayResult) -> None:
    """The body keeps its usual shape; headers tell the caller it is a fallback."""
    if result.degraded:
        response.headers[DEGRADED_HEADER] = "true"
        # header values must stay on one line and in latin-1
        reason = " ".join((result.reason or "unknown").split())[:200]
        response.headers[DEGRADED_REASON_HEADER] = reason.encode("ascii", "replace").decode("ascii")


@router.post("/analyze", response_model=PetAnalysisResponse)
@limiter.limit(PET_ANALYSIS_LIMIT)
async def analyze_pet(request: Request,
                      response: Response,
                      payload: PetAnalysisRequest,
                      gateway=Depends(get_pet_analysis_gateway)):
    """Venue compatibility analysis for a pet."""
    if _blank(payload.pet_name) or _blank(payload.pet_type):
        raise HTTPException(status_code=400, detail="Pet name and type are required")

    result = await gateway.analyze(payload)
    mark_degraded(response, result)
    return result.value


@router.post("/recommendations", response_model=VenueRecommendationsResponse)
@limiter.limit(PET_ANALYSIS_LIMIT)
async def recommend_venues(request: Request,
                           response: Response,
                           payload: VenueRecommendationRequest,
                           gateway=Depends(get_pet_analysis_gateway)):
    if _blank(payload.pet_type):
        raise HTTPException(status_code=400, detail="Pet type is required")

    result = await gateway.recommend_venues(payload.pet_type, payload.breed, payload.preferences)
    mark_degraded(response, result)
    return VenueRecommendationsResponse(recommendations=result.value)


@router.post("/venue-description", response_model=VenueDescriptionResponse)
@limiter.limit(PET_ANALYSIS_LIMIT)
async def venue_description(request: Request,
                            response: Response,
                            payload: VenueDescriptionRequest,
                            gateway=Depends(get_pet_analysis_gateway)):
    if _blank(payload.venue_name) or _blank(payload.venue_type):
        raise HTTPException(status_code=400, detail="Venue name and type are required")

    result = await gateway.generate_venue_description(payload.venue_name, payload.venue_type, payload.allowed_pets)
    mark_degraded(response, result)
    return VenueDescriptionResponse(description=result.value)


@router.get("/health")
async def pet_analysis_health(gateway=Depends(get_pet_analysis_gateway)):
    try:
        result = await gateway.health_check()
        if result.degraded:
            raise RuntimeError(result.reason or "Pet analysis service unavailable")
    except Exception as e:
        logger.error(f"Pet analysis health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=jsonable_encoder({
                "status": "Unhealthy",
                "service": SERVICE_NAME,
                "error": str(e),
                "timestamp": datetime.now(timezone.utc),
            }),
        )

    return {
        "status": "Healthy (Mock Mode)" if gateway.mock else "Healthy",
        "service": SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc),
        "lastAnalysis": result.value,
    }
