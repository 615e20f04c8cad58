"""Routing and pricing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.common import coordinates_to_models
from ...schemas.routing import FallbackRouteRequest, PriceRequest, PriceResponse, RouteRequest, RouteResponse
from ...services.pricing import calculate_price
from ...services.routing import service as routing_service
from ...services.routing.models import RouteResult

router = APIRouter(prefix="/routing", tags=["routing"])


def _to_response(result: RouteResult) -> RouteResponse:
    return RouteResponse(
        path=coordinates_to_models(result.path),
        distance_km=result.distance_km,
        duration_min=result.duration_min,
        instructions=result.instructions,
        source=result.source,
    )


@router.post("/route", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def route(payload: RouteRequest) -> RouteResponse:
    try:
        result = routing_service.get_shortest_route(payload.start.to_domain(), payload.end.to_domain())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error computing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute route: {str(exc)}"
        ) from exc
    return _to_response(result)


@router.post("/fallback", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def fallback(payload: FallbackRouteRequest) -> RouteResponse:
    """Estimate a route locally, through optional waypoints, without calling OSRM."""
    try:
        result = routing_service.fallback_route(
            payload.start.to_domain(),
            payload.end.to_domain(),
            [waypoint.to_domain() for waypoint in payload.waypoints],
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _to_response(result)


@router.post("/price", response_model=PriceResponse, status_code=status.HTTP_200_OK)
def price(payload: PriceRequest) -> PriceResponse:
    return PriceResponse(
        distance_km=payload.distance_km,
        vehicle_class=payload.vehicle_class,
        price=calculate_price(payload.distance_km, payload.vehicle_class),
    )
