"""Integration tests for service-level endpoints, errors and middleware."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from pizzeria.api.errors import register_exception_handlers
from pizzeria.api.middleware import OriginGuardMiddleware
from pizzeria.order.workflow import OrderWorkflow


class TestServiceEndpoints:
    def test_welcome(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "welcome to JWT Pizza"

    def test_docs_lists_endpoints(self, client):
        data = client.get("/api/docs").json()
        endpoints = {(e["method"], e["path"]): e for e in data["endpoints"]}
        assert endpoints[("POST", "/api/auth")]["requiresAuth"] is False
        assert endpoints[("DELETE", "/api/auth")]["requiresAuth"] is True
        assert endpoints[("POST", "/api/order")]["requiresAuth"] is True
        assert endpoints[("GET", "/api/order/menu")]["description"] == "Get the pizza menu"
        assert endpoints[("DELETE", "/api/franchise/{franchise_id}/store/{store_id}")]["requiresAuth"] is True
        assert endpoints[("GET", "/api/order/menu")]["requiresAuth"] is False
        assert len(endpoints) >= 15
        assert data["config"]["db"] == "memory"

    def test_unknown_endpoint(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"message": "unknown endpoint"}

    def test_request_id_is_echoed(self, client):
        response = client.get("/", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"


class TestUnhandledErrors:
    def test_unexpected_exception_becomes_500(self, monkeypatch, diner_headers):
        from app import app

        def boom(self, caller, page=1):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(OrderWorkflow, "list_orders", boom)
        response = TestClient(app, raise_server_exceptions=False).get("/api/order", headers=diner_headers)

        assert response.status_code == 500
        data = response.json()
        assert data["message"] == "kaboom"
        assert "RuntimeError" in data["stack"]

    def test_failed_request_is_still_counted(self, monkeypatch, diner_headers):
        from app import app

        from pizzeria.telemetry import get_metrics

        def boom(self, caller, page=1):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(OrderWorkflow, "list_orders", boom)
        before = get_metrics().value("http_requests_total", method="GET")

        response = TestClient(app, raise_server_exceptions=False).get("/api/order", headers=diner_headers)

        assert response.status_code == 500
        assert get_metrics().value("http_requests_total", method="GET") == before + 1


class TestOriginGuard:
    def _client(self, allowed):
        app = FastAPI()
        app.add_middleware(OriginGuardMiddleware, allowed_origins=allowed)
        register_exception_handlers(app)

        @app.get("/ping")
        async def ping():
            return {"ok": True}

        return TestClient(app)

    def test_allowed_origin_passes(self):
        client = self._client(["https://pizza.example.com"])
        assert client.get("/ping", headers={"Origin": "https://pizza.example.com"}).status_code == 200

    def test_disallowed_origin_is_rejected(self):
        client = self._client(["https://pizza.example.com"])
        response = client.get("/ping", headers={"Origin": "https://evil.example.com"})
        assert response.status_code == 403
        assert response.json() == {"message": "CORS error: Origin not allowed"}

    def test_requests_without_origin_pass(self):
        assert self._client(["https://pizza.example.com"]).get("/ping").status_code == 200


class TestLifespan:
    def test_telemetry_runs_for_the_life_of_the_app(self):
        from app import app

        from pizzeria.telemetry import get_dispatcher, get_metrics

        with TestClient(app) as client:
            assert client.get("/").status_code == 200
            assert get_dispatcher().running
            assert get_metrics().running

        assert not get_dispatcher().running
        assert not get_metrics().running
