from __future__ import annotations

from fastapi.testclient import TestClient

from portfolio_api.main import create_app


def test_request_id_is_generated_and_returned():
    app = create_app()
    client = TestClient(app)

    r = client.get("/")
    assert r.status_code == 200
    assert "X-Request-Id" in r.headers
    assert r.headers["X-Request-Id"]


def test_request_id_is_propagated_from_client():
    app = create_app()
    client = TestClient(app)

    r = client.get("/", headers={"X-Request-Id": "abc-123"})
    assert r.status_code == 200
    assert r.headers.get("X-Request-Id") == "abc-123"


def test_oversized_inbound_request_id_is_replaced():
    client = TestClient(create_app())

    r = client.get("/", headers={"X-Request-Id": "x" * 500})
    assert r.status_code == 200
    assert r.headers["X-Request-Id"] != "x" * 500


def test_health_lists_endpoints():
    client = TestClient(create_app())

    body = client.get("/").json()
    assert body["status"] == "running"
    assert "POST /api/auth/login" in body["endpoints"]


def test_validation_errors_are_problem_json():
    app = create_app()
    client = TestClient(app)

    # Missing required body fields => pydantic validation error
    r = client.post("/api/auth/login", json={})
    assert r.status_code == 400
    assert r.headers.get("content-type", "").startswith("application/problem+json")
    body = r.json()
    assert body["title"] == "Validation Failed"
    assert body["status"] == 400
    assert body["message"] == "Request validation failed"
    assert {e["path"] for e in body["errors"]} == {"username", "password"}
    assert body.get("requestId")


def test_404_is_problem_json():
    app = create_app()
    client = TestClient(app)

    r = client.get("/this-route-does-not-exist")
    assert r.status_code == 404
    assert r.headers.get("content-type", "").startswith("application/problem+json")
    body = r.json()
    assert body["status"] == 404
    assert body["message"] == "Route not found"
    assert body.get("requestId")


def test_auth_denied_is_problem_json():
    app = create_app()
    client = TestClient(app)

    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.headers.get("content-type", "").startswith("application/problem+json")
    body = r.json()
    assert body["status"] == 401
    assert body.get("requestId")


def test_trailing_slash_is_normalized(client):
    r = client.get("/api/blog/")
    assert r.status_code == 200
    assert r.json()["items"] == []


def test_malformed_inbound_request_id_is_replaced():
    client = TestClient(create_app())

    r = client.get("/", headers={"X-Request-Id": "bad id with spaces"})
    assert r.headers["X-Request-Id"] != "bad id with spaces"
    assert len(r.headers["X-Request-Id"]) == 36


def test_default_problem_titles():
    from portfolio_api.problem_details import default_title

    assert default_title(429) == "Too Many Requests"
    assert default_title(413) == "Payload Too Large"
    assert default_title(502) == "Internal Server Error"
    assert default_title(418) == "Error"
