"""Recommendation request/response schemas."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel

from ..models.domain import RecommendationResult
from .common import CoordinateModel, RideModel


class RecommendationRequest(BaseModel):
    rider_id: str
    pickup: CoordinateModel
    destination: CoordinateModel


class RecommendationModel(BaseModel):
    ride: RideModel
    score: float
    reasoning: List[str]
    inductive_score: float
    content_score: float
    collaborative_score: float

    @classmethod
    def from_domain(cls, result: RecommendationResult) -> "RecommendationModel":
        return cls(
            ride=RideModel.from_domain(result.ride),
            score=result.score,
            reasoning=list(result.reasoning),
            inductive_score=result.inductive_score,
            content_score=result.content_score,
            collaborative_score=result.collaborative_score,
        )


class RecommendationResponse(BaseModel):
    rider_id: str
    recommendations: List[RecommendationModel]
