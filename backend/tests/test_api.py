import pytest

from conftest import EXAMPLE_PLAN

FUNCTION_URL = "/functions/v1/generate-trip-plan"
NEW_YORK_TO_PARIS = {"fromLocation": "New York", "toLocation": "Paris", "travelDays": 5}


def test_end_to_end_new_york_to_paris(api_key, client, gateway):
    resp = client.post(FUNCTION_URL, json=NEW_YORK_TO_PARIS)

    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
    data = resp.json()
    assert set(data) == set(EXAMPLE_PLAN)
    assert 1 <= len(data["hotels"]) <= len(EXAMPLE_PLAN["hotels"])
    for hotel in data["hotels"]:
        for key in ("name", "price_range", "rating", "tips"):
            assert hotel[key]
    assert data["budget_per_person"]
    assert data["best_time_to_visit"]
    assert gateway.calls == 1


@pytest.mark.parametrize(
    "upstream, status, message",
    [
        (429, 429, "Rate limit exceeded. Please try again later."),
        (402, 402, "Payment required. Please add credits to your workspace."),
        (503, 500, "Failed to generate trip plan"),
    ],
)
def test_upstream_errors_map_to_status(api_key, client, gateway, upstream, status, message):
    gateway.status_code = upstream

    resp = client.post(FUNCTION_URL, json=NEW_YORK_TO_PARIS)

    assert resp.status_code == status
    assert resp.json() == {"error": message}
    assert resp.headers["access-control-allow-origin"] == "*"
    assert gateway.calls == 1


def test_malformed_model_output_is_500(api_key, client, gateway):
    gateway.content = "not json at all"

    resp = client.post(FUNCTION_URL, json=NEW_YORK_TO_PARIS)

    assert resp.status_code == 500
    assert resp.json() == {"error": "AI returned an invalid trip plan"}


def test_missing_credential_is_500_without_network(no_api_key, client, gateway):
    resp = client.post(FUNCTION_URL, json=NEW_YORK_TO_PARIS)

    assert resp.status_code == 500
    assert "AI_GATEWAY_API_KEY" in resp.json()["error"]
    assert gateway.calls == 0


def test_non_numeric_days_fail_fast(api_key, client, gateway):
    resp = client.post(FUNCTION_URL, json={**NEW_YORK_TO_PARIS, "travelDays": "a week"})

    assert resp.status_code == 400
    assert "travelDays" in resp.json()["error"]
    assert gateway.calls == 0


def test_unreadable_body_is_400(api_key, client, gateway):
    resp = client.post(FUNCTION_URL, content=b"{not json", headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert gateway.calls == 0


def test_options_returns_cors_headers_without_body(client):
    resp = client.options(FUNCTION_URL)

    assert resp.status_code == 200
    assert resp.content == b""
    assert resp.headers["access-control-allow-origin"] == "*"
    assert "x-client-info" in resp.headers["access-control-allow-headers"]


@pytest.mark.parametrize(
    "requested_headers",
    ["authorization, content-type", "authorization, x-supabase-api-version", "x-anything-else"],
)
def test_browser_preflight_gets_empty_200(client, requested_headers):
    resp = client.options(
        FUNCTION_URL,
        headers={
            "Origin": "https://app.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": requested_headers,
        },
    )

    assert resp.status_code == 200
    assert resp.content == b""
    assert resp.headers["access-control-allow-origin"] == "*"
    assert "apikey" in resp.headers["access-control-allow-headers"]


def test_preflight_on_other_routes_is_permitted(client):
    resp = client.options(
        "/planner/trips",
        headers={
            "Origin": "https://app.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "authorization, x-supabase-api-version",
        },
    )

    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"


def test_health_and_root(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/").json()["endpoints"]["generate_trip_plan"] == FUNCTION_URL
