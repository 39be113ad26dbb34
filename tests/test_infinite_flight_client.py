import httpx
import pytest

from livefleet.domain import UpstreamUnavailable
from livefleet.ingestors.infinite_flight import InfiniteFlightClient

BASE_URL = "https://if.test/public/v2"

SESSIONS = {
    "errorCode": 0,
    "result": [
        {"id": "casual-session", "name": "Casual Server", "worldType": 1},
        {"id": "expert-session", "name": "Expert Server", "worldType": 3},
    ],
}

FLIGHTS = {
    "errorCode": 0,
    "result": [
        {
            "flightId": "f1",
            "userId": "u1",
            "aircraftId": "a320",
            "liveryId": "l-va",
            "username": "captain",
            "virtualOrganization": "VA Group",
            "callsign": "VIR1VA",
            "latitude": 10.0,
            "longitude": 20.0,
            "altitude": 35000.2,
            "speed": 451.7,
            "verticalSpeed": 0,
            "track": 90,
            "heading": 91,
            "lastReport": "2024-05-03T19:40:00Z",
            "pilotState": 0,
            "isConnected": True,
        },
        {"flightId": "broken"},
    ],
}

LIVERIES = {
    "errorCode": 0,
    "result": [
        {"id": "l-generic", "aircraftID": "a320", "aircraftName": "Airbus A320", "liveryName": "Generic"},
        {"id": "l-va", "aircraftID": "a320", "aircraftName": "Airbus A320", "liveryName": "Virtual Air"},
        {"id": "l-738", "aircraftID": "b738", "aircraftName": "Boeing 737-800", "liveryName": "Sky Blue"},
    ],
}

FLIGHT_PLAN = {
    "errorCode": 0,
    "result": {
        "flightPlanId": "fp1",
        "flightId": "f1",
        "waypoints": ["KLAX", "KSFO"],
        "lastUpdate": "2024-05-03T19:00:00Z",
        "flightPlanType": 0,
        "flightPlanItems": [
            {
                "name": "KLAX",
                "type": 5,
                "children": None,
                "identifier": "KLAX",
                "altitude": 0,
                "location": {"latitude": 33.94, "longitude": -118.40, "altitude": 0},
            },
            {
                "name": "KSFO",
                "type": 5,
                "children": [
                    {
                        "name": "RW28L",
                        "type": 1,
                        "children": None,
                        "identifier": None,
                        "altitude": 0,
                        "location": {"latitude": 37.61, "longitude": -122.36, "altitude": 0},
                    }
                ],
                "identifier": "KSFO",
                "altitude": 0,
                "location": {"latitude": 37.62, "longitude": -122.38, "altitude": 0},
            },
        ],
    },
}


def _router(overrides=None, calls=None):
    responses = {
        "/public/v2/sessions": httpx.Response(200, json=SESSIONS),
        "/public/v2/sessions/expert-session/flights": httpx.Response(200, json=FLIGHTS),
        "/public/v2/aircraft/liveries": httpx.Response(200, json=LIVERIES),
        "/public/v2/sessions/expert-session/flights/f1/flightplan": httpx.Response(
            200, json=FLIGHT_PLAN
        ),
    }
    responses.update(overrides or {})

    def handler(request: httpx.Request):
        assert request.url.params["apikey"] == "secret"
        if calls is not None:
            calls.append(request.url.path)
        return responses.get(request.url.path, httpx.Response(404, json={"errorCode": 6}))

    return httpx.MockTransport(handler)


def _client(transport) -> InfiniteFlightClient:
    return InfiniteFlightClient(api_key="secret", base_url=BASE_URL, transport=transport)


@pytest.mark.anyio
async def test_get_flights_uses_expert_session_and_skips_malformed_entries():
    client = _client(_router())

    flights = await client.get_flights()

    assert len(flights) == 1
    flight = flights[0]
    assert flight.flight_id == "f1"
    assert flight.callsign == "VIR1VA"
    assert flight.username == "captain"
    assert flight.virtual_organization == "VA Group"
    assert flight.speed == pytest.approx(451.7)


@pytest.mark.anyio
async def test_session_id_is_cached():
    calls: list[str] = []
    client = _client(_router(calls=calls))

    await client.get_flights()
    await client.get_flights()

    assert calls.count("/public/v2/sessions") == 1
    assert calls.count("/public/v2/sessions/expert-session/flights") == 2


@pytest.mark.anyio
async def test_aircraft_catalog_groups_liveries_by_aircraft():
    calls: list[str] = []
    client = _client(_router(calls=calls))

    catalog = await client.get_aircraft_catalog()
    await client.get_aircraft_catalog()

    assert [aircraft.name for aircraft in catalog] == ["Airbus A320", "Boeing 737-800"]
    assert catalog[0].aircraft_id == "a320"
    assert [livery.id for livery in catalog[0].liveries] == ["l-generic", "l-va"]
    assert calls.count("/public/v2/aircraft/liveries") == 1


@pytest.mark.anyio
async def test_get_flight_plan_parses_items():
    client = _client(_router())

    plan = await client.get_flight_plan("f1")

    assert plan is not None
    assert [waypoint.name for waypoint in plan.waypoints] == ["KLAX", "KSFO"]
    assert plan.waypoints[0].children == []
    assert plan.waypoints[1].children[0].name == "RW28L"


@pytest.mark.anyio
async def test_get_flight_plan_without_result_returns_none():
    transport = _router(
        {
            "/public/v2/sessions/expert-session/flights/f1/flightplan": httpx.Response(
                200, json={"errorCode": 0, "result": None}
            )
        }
    )

    assert await _client(transport).get_flight_plan("f1") is None


@pytest.mark.anyio
async def test_application_error_code_raises_upstream_unavailable():
    transport = _router(
        {
            "/public/v2/sessions/expert-session/flights": httpx.Response(
                200, json={"errorCode": 2, "result": None}
            )
        }
    )

    with pytest.raises(UpstreamUnavailable):
        await _client(transport).get_flights()


@pytest.mark.anyio
async def test_http_error_raises_upstream_unavailable():
    transport = _router({"/public/v2/aircraft/liveries": httpx.Response(503, text="unavailable")})

    with pytest.raises(UpstreamUnavailable):
        await _client(transport).get_aircraft_catalog()


@pytest.mark.anyio
async def test_invalid_json_raises_upstream_unavailable():
    transport = _router({"/public/v2/sessions": httpx.Response(200, text="<html>")})

    with pytest.raises(UpstreamUnavailable):
        await _client(transport).get_session_id()


@pytest.mark.anyio
async def test_missing_expert_session_raises_upstream_unavailable():
    transport = _router(
        {"/public/v2/sessions": httpx.Response(200, json={"errorCode": 0, "result": []})}
    )

    with pytest.raises(UpstreamUnavailable):
        await _client(transport).get_flights()


@pytest.mark.anyio
async def test_timeout_raises_upstream_unavailable():
    def handler(request: httpx.Request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(UpstreamUnavailable):
        await _client(httpx.MockTransport(handler)).get_session_id()


@pytest.mark.anyio
async def test_missing_api_key_fails_without_request():
    calls: list[str] = []
    client = InfiniteFlightClient(api_key="", base_url=BASE_URL, transport=_router(calls=calls))

    assert client.is_configured is False
    with pytest.raises(UpstreamUnavailable):
        await client.get_flights()
    assert calls == []
