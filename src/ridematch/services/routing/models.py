"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

from ...models.domain import Coordinate


@dataclass(slots=True)
class RouteResult:
    path: List[Coordinate]
    distance_km: float
    duration_min: int
    instructions: List[str] = field(default_factory=list)
    source: Literal["osrm", "fallback"] = "osrm"
