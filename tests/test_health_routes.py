"""Health and service information endpoint tests."""


class TestHealth:
    """GET /health"""

    def test_health_ok(self, client, messenger_channel):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["service"] == "messenger-relay"
        assert body["runtime_environment"] == "testing"
        assert body["instances"] == {"messenger": "Ready", "instagram": "Ready"}
        assert messenger_channel.mock_calls == []

    def test_credentials_reported_as_set_or_not_set(self, client):
        environment = client.get("/health").json()["environment"]

        assert environment == {
            "pageId": "Set",
            "pageAccessToken": "Set",
            "verifyToken": "Set",
            "appSecret": "Not Set",
        }

    def test_secret_values_never_returned(self, client):
        assert "test-page-token" not in client.get("/health").text


class TestServiceInfo:
    """GET /"""

    def test_endpoint_map(self, client):
        response = client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["api_version"] == "v18.0"
        assert body["endpoints"]["webhook"] == "/webhook"
        assert body["endpoints"]["sendMessage"] == "/api/send-message"


class TestUnknownRoutes:
    """Unmatched paths and request headers."""

    def test_not_found_envelope(self, client):
        response = client.get("/does-not-exist")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "Endpoint not found"
        assert body["errorType"] == "NotFoundError"

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert "X-Process-Time" in response.headers

    def test_request_id_generated(self, client):
        response = client.get("/health")

        assert response.headers["X-Request-ID"]
