"""Service info, health and the error envelope for unknown routes."""


def test_root_lists_resources(client):
    body = client.get("/").json()

    assert body["message"] == "Family Finance API"
    assert body["version"] == "1.1.0"
    assert body["endpoints"]["transactions"] == "/transactions"
    assert body["documentation"]["interactive"] == "/docs"


def test_health(client):
    body = client.get("/health").json()

    assert body["status"] == "ok"
    assert "timestamp" in body


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": {"code": "ERR_NOT_FOUND", "message": "Endpoint not found"},
    }


def test_malformed_json_body(client):
    response = client.post(
        "/auth/login",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ERR_VALIDATION"
