"""Recommendation endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...persistence.rides import RideStoreError
from ...schemas.recommendations import RecommendationModel, RecommendationRequest, RecommendationResponse
from ...services.rides import service as ride_service

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.post("", response_model=RecommendationResponse, status_code=status.HTTP_200_OK)
def recommend(payload: RecommendationRequest) -> RecommendationResponse:
    """Rank available rides for a rider. An empty list means nothing matched."""
    try:
        results = ride_service.get_recommended_rides(
            payload.pickup.to_domain(),
            payload.destination.to_domain(),
            payload.rider_id,
        )
    except RideStoreError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error building recommendations: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to build recommendations: {str(exc)}"
        ) from exc

    return RecommendationResponse(
        rider_id=payload.rider_id,
        recommendations=[RecommendationModel.from_domain(result) for result in results],
    )
