"""HTTP contract tests for the fare comparison API."""

from __future__ import annotations

import httpx
import pytest
from backend.app.distance import RemoteDistanceResolver
from backend.app.main import create_app
from backend.app.settings import Settings
from fastapi.testclient import TestClient

KORAMANGALA = "12.9352,77.6245"
MG_ROAD = "12.9716,77.5946"


def _remote_client(handler) -> TestClient:
    resolver = RemoteDistanceResolver(
        "secret-key",
        base_url="https://maps.example.test/distancematrix/json",
        transport=httpx.MockTransport(handler),
    )
    app = create_app(Settings(GOOGLE_API_KEY="secret-key", SENTRY_DSN=None), resolver=resolver)
    return TestClient(app)


def _ok_matrix(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "status": "OK",
            "rows": [
                {
                    "elements": [
                        {
                            "status": "OK",
                            "distance": {"value": 8000},
                            "duration": {"value": 1500},
                        }
                    ]
                }
            ],
        },
    )


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"ok": True}


def test_health_schema_documented(client):
    schema = client.get("/openapi.json").json()
    response = schema["paths"]["/health"]["get"]["responses"]["200"]
    assert response["content"]["application/json"]["schema"] == {
        "$ref": "#/components/schemas/HealthResponse"
    }


def test_fare_with_coordinates(client):
    res = client.post("/fare", json={"origin": KORAMANGALA, "destination": MG_ROAD})
    assert res.status_code == 200
    body = res.json()
    assert set(body) == {"meta", "fares", "links"}
    assert body["meta"]["distance_km"] == pytest.approx(5.18, abs=0.02)
    assert body["meta"]["duration_min"] == 14
    assert [f["key"] for f in body["fares"]] == [
        "rapido_bike",
        "nammayatri_auto",
        "ola_auto",
        "uber_auto",
    ]
    prices = [f["price"] for f in body["fares"]]
    assert prices == sorted(prices)
    assert body["links"]["ola"] == (
        "https://book.olacabs.com/?pickup=12.9352%2C77.6245&drop=12.9716%2C77.5946"
    )
    assert body["links"]["rapido"] == "https://rapido.bike/"
    assert body["links"]["namma"] == "https://nammayatri.in/"


def test_legacy_api_path(client):
    res = client.post("/api/fare", json={"origin": KORAMANGALA, "destination": MG_ROAD})
    assert res.status_code == 200
    assert res.json() == client.post(
        "/fare", json={"origin": KORAMANGALA, "destination": MG_ROAD}
    ).json()


@pytest.mark.parametrize(
    "payload",
    [
        {"origin": KORAMANGALA},
        {"destination": MG_ROAD},
        {"origin": "", "destination": MG_ROAD},
        {"origin": KORAMANGALA, "destination": "  "},
        {},
    ],
)
def test_missing_fields(client, payload):
    res = client.post("/fare", json=payload)
    assert res.status_code == 400
    assert res.json() == {"error": "origin and destination are required"}


def test_empty_body(client):
    res = client.post("/fare")
    assert res.status_code == 400
    assert res.json() == {"error": "origin and destination are required"}


def test_malformed_json_body(client):
    res = client.post(
        "/fare", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert res.status_code == 400
    assert res.json()["error"].startswith("Invalid request body")


def test_non_string_origin(client):
    res = client.post("/fare", json={"origin": 12.9, "destination": MG_ROAD})
    assert res.status_code == 400
    assert "origin" in res.json()["error"]


def test_address_without_key(client):
    res = client.post("/fare", json={"origin": "BTM Layout", "destination": "MG Road"})
    assert res.status_code == 400
    assert "GOOGLE_API_KEY" in res.json()["error"]


def test_malformed_coordinates(client):
    res = client.post("/fare", json={"origin": "12,77", "destination": MG_ROAD})
    assert res.status_code == 400
    error = res.json()["error"]
    assert "Malformed coordinates" in error
    assert "GOOGLE_API_KEY" not in error


def test_deterministic_responses(client):
    payload = {"origin": KORAMANGALA, "destination": MG_ROAD}
    assert client.post("/fare", json=payload).json() == client.post("/fare", json=payload).json()


def test_remote_strategy_accepts_addresses():
    client = _remote_client(_ok_matrix)
    res = client.post("/fare", json={"origin": "BTM Layout", "destination": "MG Road"})
    assert res.status_code == 200
    body = res.json()
    assert body["meta"] == {"distance_km": 8.0, "duration_min": 25}
    # rapido: 20 + 72 + 10 = 102
    assert body["fares"][0] == {"key": "rapido_bike", "label": "Rapido (Bike)", "price": 102}
    assert "pickup=BTM%20Layout" in body["links"]["uber"]


def test_remote_failure_surfaces_as_400_without_key():
    client = _remote_client(lambda request: httpx.Response(200, json={"status": "REQUEST_DENIED"}))
    res = client.post("/fare", json={"origin": "BTM Layout", "destination": "MG Road"})
    assert res.status_code == 400
    error = res.json()["error"]
    assert error.startswith("Google Distance Matrix request failed")
    assert "secret-key" not in error


def test_health_details_local(client):
    res = client.get("/health/details")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "healthy"
    assert body["checks"]["distance"]["strategy"] == "local"
    assert body["checks"]["sentry"] == {"status": "disabled"}


def test_health_details_remote_hides_key():
    client = _remote_client(_ok_matrix)
    res = client.get("/health/details")
    body = res.json()
    assert body["checks"]["distance"] == {
        "status": "ok",
        "strategy": "remote",
        "host": "maps.example.test",
        "timeout_seconds": 10.0,
    }
    assert "secret-key" not in res.text


def test_cors_allows_configured_origin():
    app = create_app(Settings(GOOGLE_API_KEY=None, CORS_ORIGIN="http://localhost:5173"))
    client = TestClient(app)
    res = client.options(
        "/fare",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_cors_wildcard_default(client):
    res = client.get("/health", headers={"Origin": "http://example.com"})
    assert res.headers["access-control-allow-origin"] == "*"


def test_remote_wrongly_shaped_reply_maps_to_400():
    client = _remote_client(lambda request: httpx.Response(200, json={"status": "OK", "rows": {"x": 1}}))
    res = client.post("/fare", json={"origin": "BTM Layout", "destination": "MG Road"})
    assert res.status_code == 400
    assert res.json()["error"].startswith("Google Distance Matrix request failed")
