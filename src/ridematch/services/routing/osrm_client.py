"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
import math
import time
from typing import Any

import httpx

from ...config import settings
from ...models.domain import Coordinate
from .models import RouteResult

logger = logging.getLogger(__name__)

USER_AGENT = "RideMatch/1.0"


class RoutingUnavailableError(ConnectionError):
    """The routing provider could not produce a route."""


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
    ) -> None:
        self.base_url = base_url or settings.osrm_base_url
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"User-Agent": USER_AGENT},
        )

    def _get_json(self, url: str, params: dict[str, str]) -> dict:
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    data = response.json()
                    if data.get("code") != "Ok":
                        error_msg = data.get("message", "Unknown OSRM route error")
                        raise RoutingUnavailableError(f"OSRM route request failed: {error_msg}")
                    return data
                except RoutingUnavailableError:
                    raise
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise RoutingUnavailableError(
                            f"OSRM route request timed out after {self.max_retries} retries: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM route timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except (httpx.HTTPError, OSError, ValueError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise RoutingUnavailableError(
                            f"Failed to get route from OSRM service at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * attempt
                    logger.debug(f"OSRM error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
        finally:
            client.close()

    def route(self, start: Coordinate, end: Coordinate, alternatives: bool = True) -> list[RouteResult]:
        """Get road routes between two coordinates using the OSRM route endpoint.

        Returns every alternative OSRM offers, in the order OSRM ranks them.
        Raises ``RoutingUnavailableError`` when no route can be obtained.
        """
        # OSRM route endpoint expects coordinates as "lon,lat;lon,lat"
        coordinate_str = f"{start.lng},{start.lat};{end.lng},{end.lat}"
        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "true",
        }
        if alternatives:
            params["alternatives"] = "true"
            params["continue_straight"] = "false"
        url = f"{self.base_url}/route/v1/{self.profile}/{coordinate_str}"

        data = self._get_json(url, params)
        try:
            routes = [parse_route(item) for item in data.get("routes") or []]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RoutingUnavailableError(f"OSRM returned a malformed route: {e}") from e
        if not routes:
            raise RoutingUnavailableError("OSRM returned no routes.")
        return routes


def parse_route(route: dict[str, Any]) -> RouteResult:
    """Convert one OSRM route object into a ``RouteResult``."""

    geometry = route.get("geometry") or {}
    # GeoJSON geometry is [lng, lat]
    path = [Coordinate(lat=float(lat), lng=float(lng)) for lng, lat in geometry.get("coordinates", [])]

    instructions: list[str] = []
    for leg in route.get("legs") or []:
        for step in leg.get("steps") or []:
            maneuver = step.get("maneuver") or {}
            instruction = maneuver.get("instruction")
            if instruction:
                instructions.append(instruction)
            elif step.get("name") and maneuver.get("type"):
                instructions.append(f"{maneuver['type']} {step['name']}")

    return RouteResult(
        path=path,
        distance_km=float(route.get("distance", 0.0)) / 1000.0,
        duration_min=math.ceil(float(route.get("duration", 0.0)) / 60.0),
        instructions=instructions,
        source="osrm",
    )


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM service health by routing between two fixed points."""
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    try:
        test_coords = "13.388860,52.517037;13.385983,52.496891"
        url = f"{base}/route/v1/{settings.osrm_profile}/{test_coords}"
        response = httpx.get(url, params={"overview": "false"}, timeout=5.0)
        response.raise_for_status()
        data = response.json()
        return data.get("code") == "Ok"
    except (httpx.HTTPError, ValueError):
        return False
