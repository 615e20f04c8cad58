import httpx
import pytest

from ridematch.models.domain import Coordinate
from ridematch.services.routing import service as routing_service
from ridematch.services.routing.models import RouteResult
from ridematch.services.routing.osrm_client import OSRMClient, RoutingUnavailableError, parse_route

START = Coordinate(40.0, -73.0)
END = Coordinate(40.02, -73.0)


def _osrm_route(distance_m: float, duration_s: float, coordinates: list[list[float]]) -> dict:
    return {
        "distance": distance_m,
        "duration": duration_s,
        "geometry": {"type": "LineString", "coordinates": coordinates},
        "legs": [
            {
                "steps": [
                    {"name": "Main Street", "maneuver": {"type": "depart"}},
                    {"name": "", "maneuver": {"type": "arrive", "instruction": "You have arrived"}},
                ]
            }
        ],
    }


def _client_with(monkeypatch: pytest.MonkeyPatch, handler, max_retries: int = 0) -> OSRMClient:
    client = OSRMClient(base_url="http://osrm.test", max_retries=max_retries, backoff_seconds=0)
    monkeypatch.setattr(client, "_get_client", lambda: httpx.Client(transport=httpx.MockTransport(handler)))
    return client


def test_parse_route_converts_units_and_geometry():
    route = parse_route(_osrm_route(2500, 301, [[-73.0, 40.0], [-73.0, 40.02]]))

    assert route.path == [START, END]
    assert route.distance_km == pytest.approx(2.5)
    assert route.duration_min == 6
    assert route.instructions == ["depart Main Street", "You have arrived"]
    assert route.source == "osrm"


def test_route_returns_every_alternative(monkeypatch: pytest.MonkeyPatch):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "code": "Ok",
                "routes": [
                    _osrm_route(3000, 400, [[-73.0, 40.0], [-73.0, 40.02]]),
                    _osrm_route(2500, 450, [[-73.0, 40.0], [-73.0, 40.02]]),
                ],
            },
        )

    routes = _client_with(monkeypatch, handler).route(START, END)

    assert [route.distance_km for route in routes] == [3.0, 2.5]
    assert seen[0].url.path == "/route/v1/driving/-73.0,40.0;-73.0,40.02"
    assert seen[0].url.params["alternatives"] == "true"


def test_route_raises_when_provider_reports_error(monkeypatch: pytest.MonkeyPatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": "NoRoute", "message": "Impossible route"})

    with pytest.raises(RoutingUnavailableError, match="Impossible route"):
        _client_with(monkeypatch, handler).route(START, END)


def test_route_raises_after_retries_on_server_error(monkeypatch: pytest.MonkeyPatch):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500, json={})

    with pytest.raises(RoutingUnavailableError):
        _client_with(monkeypatch, handler, max_retries=1).route(START, END)
    assert len(calls) == 2


def test_route_raises_on_empty_routes(monkeypatch: pytest.MonkeyPatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": "Ok", "routes": []})

    with pytest.raises(RoutingUnavailableError):
        _client_with(monkeypatch, handler).route(START, END)


def test_shortest_alternative_is_chosen(monkeypatch: pytest.MonkeyPatch):
    class DummyOSRM:
        def route(self, start, end, alternatives=True):
            return [
                RouteResult(path=[start, end], distance_km=4.0, duration_min=8),
                RouteResult(path=[start, end], distance_km=3.2, duration_min=9),
                RouteResult(path=[start, end], distance_km=3.5, duration_min=7),
            ]

    monkeypatch.setattr(routing_service, "OSRMClient", lambda: DummyOSRM())

    route = routing_service.get_shortest_route(START, END)

    assert route.distance_km == 3.2
    assert route.source == "osrm"


def test_empty_provider_path_is_replaced_by_endpoints(monkeypatch: pytest.MonkeyPatch):
    class DummyOSRM:
        def route(self, start, end, alternatives=True):
            return [RouteResult(path=[], distance_km=2.0, duration_min=4)]

    monkeypatch.setattr(routing_service, "OSRMClient", lambda: DummyOSRM())

    assert routing_service.get_shortest_route(START, END).path == [START, END]


def test_provider_failure_uses_fallback(monkeypatch: pytest.MonkeyPatch):
    class FailingOSRM:
        def route(self, start, end, alternatives=True):
            raise RoutingUnavailableError("down")

    monkeypatch.setattr(routing_service, "OSRMClient", lambda: FailingOSRM())

    route = routing_service.get_shortest_route(START, END)

    assert route.source == "fallback"
    assert route.path[0] == START
    assert route.distance_km == pytest.approx(2.224, abs=0.01)
    assert route.duration_min == 4
    assert route.instructions == []


def test_unconfigured_provider_uses_fallback(monkeypatch: pytest.MonkeyPatch):
    def unconfigured():
        raise ValueError("OSRM base URL is not configured.")

    monkeypatch.setattr(routing_service, "OSRMClient", unconfigured)

    assert routing_service.get_shortest_route(START, END).source == "fallback"


def test_fallback_route_with_waypoints():
    waypoint = Coordinate(40.01, -73.0)
    route = routing_service.fallback_route(START, END, [waypoint])

    assert route.source == "fallback"
    assert route.path[0] == START
    assert waypoint in route.path


@pytest.mark.parametrize(
    "route",
    [
        {"distance": None, "duration": 60, "geometry": {"coordinates": [[-73.0, 40.0]]}},
        {"distance": 1000, "duration": 60, "geometry": {"coordinates": [[-73.0]]}},
        {"distance": 1000, "duration": 60, "geometry": {"coordinates": [[-73.0, 140.0]]}},
        "not-a-route",
    ],
)
def test_malformed_provider_route_uses_fallback(monkeypatch: pytest.MonkeyPatch, route):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": "Ok", "routes": [route]})

    client = _client_with(monkeypatch, handler)
    with pytest.raises(RoutingUnavailableError, match="malformed"):
        client.route(START, END)

    monkeypatch.setattr(routing_service, "OSRMClient", lambda: client)
    result = routing_service.get_shortest_route(START, END)

    assert result.source == "fallback"
    assert result.path[0] == START
