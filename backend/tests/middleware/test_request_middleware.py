"""
Request Middleware Unit Tests
=============================

Tests for middleware components including:
- RequestContextMiddleware
- SecurityHeadersMiddleware
- RateLimitMiddleware
"""

import uuid

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from civil_defence.core.config import settings
from civil_defence.middleware.request_middleware import RateLimitMiddleware


pytestmark = pytest.mark.middleware


class TestRequestContextMiddleware:
    """Tests for RequestContextMiddleware."""

    def test_request_id_generated(self, client: TestClient):
        """Test that a request without an ID gets a fresh UUID."""
        # Act
        response = client.get("/")

        # Assert
        request_id = response.headers["X-Request-ID"]
        assert str(uuid.UUID(request_id)) == request_id

    def test_incoming_request_id_echoed(self, client: TestClient):
        response = client.get("/", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    @pytest.mark.parametrize("incoming", ["bad id!", "x" * 65, "<script>"])
    def test_invalid_request_id_replaced(self, client: TestClient, incoming: str):
        # Act
        response = client.get("/", headers={"X-Request-ID": incoming})

        # Assert
        assert response.headers["X-Request-ID"] != incoming
        assert len(response.headers["X-Request-ID"]) == 36

    def test_process_time_header_added(self, client: TestClient):
        response = client.get("/")
        assert float(response.headers["X-Process-Time"]) >= 0

    def test_headers_on_error_responses(self, client: TestClient):
        """Test that error envelopes still carry the request headers."""
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert "X-Request-ID" in response.headers


class TestSecurityHeadersMiddleware:
    """Tests for SecurityHeadersMiddleware."""

    def test_security_headers_present(self, client: TestClient):
        # Act
        response = client.get("/")

        # Assert
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-XSS-Protection"] == "1; mode=block"
        assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
        assert "frame-ancestors 'none'" in response.headers["Content-Security-Policy"]

    def test_no_hsts_outside_production(self, client: TestClient):
        response = client.get("/")
        assert "Strict-Transport-Security" not in response.headers


class TestRateLimitMiddleware:
    """Tests for RateLimitMiddleware."""

    def test_login_paths(self):
        assert RateLimitMiddleware.LOGIN_PATHS == {"/api/auth/login", "/api/login"}

    def test_limit_reached_after_max_requests(self):
        # Arrange
        limiter = RateLimitMiddleware(FastAPI())

        # Act
        results = [limiter._is_rate_limited("10.0.0.1", 3, 60) for _ in range(4)]

        # Assert
        assert results == [False, False, False, True]

    def test_keys_are_independent(self):
        limiter = RateLimitMiddleware(FastAPI())
        for _ in range(3):
            limiter._is_rate_limited("10.0.0.1", 3, 60)

        assert limiter._is_rate_limited("10.0.0.2", 3, 60) is False

    def test_expired_requests_not_counted(self):
        limiter = RateLimitMiddleware(FastAPI())
        limiter._requests["10.0.0.1"] = [0.0, 1.0, 2.0]

        assert limiter._is_rate_limited("10.0.0.1", 3, 60) is False

    def test_login_returns_429_when_enabled(self, monkeypatch: pytest.MonkeyPatch):
        """Test that the login path is throttled with a Retry-After header."""
        # Arrange
        monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
        monkeypatch.setattr(settings, "LOGIN_RATE_LIMIT", 2)
        app = FastAPI()

        @app.post("/api/auth/login")
        def login():
            return {"ok": True}

        @app.post("/api/volunteers")
        def other():
            return {"ok": True}

        app.add_middleware(RateLimitMiddleware)
        client = TestClient(app)

        # Act
        statuses = [client.post("/api/auth/login").status_code for _ in range(3)]
        throttled = client.post("/api/auth/login")
        unrelated = client.post("/api/volunteers")

        # Assert
        assert statuses == [200, 200, 429]
        assert throttled.headers["Retry-After"] == "60"
        assert throttled.json()["message"] == "Too many requests. Please try again later."
        assert throttled.json()["details"] == {"retry_after_seconds": 60}
        assert unrelated.status_code == 200
