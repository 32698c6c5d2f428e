import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client():
    from app import app

    return TestClient(app)


@pytest.fixture()
def login(client):
    """Log in through the API and return bearer headers."""

    def _login(email, password):
        response = client.put("/api/auth", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture()
def admin_headers(register, login):
    register(name="Root", email="root@example.com", password="admin-pass", admin=True)
    return login("root@example.com", "admin-pass")


@pytest.fixture()
def diner_headers(register, login):
    register(name="Dee", email="dee@example.com", password="diner-pass")
    return login("dee@example.com", "diner-pass")
