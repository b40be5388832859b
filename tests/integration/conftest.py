import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    from app import create_app

    with TestClient(create_app(init_domain=False)) as client:
        yield client


def _login(client, email):
    response = client.post("/auth/login", json={"email": email, "password": "secret123"})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, admin):
    return _login(client, "admin@example.com")


@pytest.fixture
def customer_headers(client, customer):
    return _login(client, "carla@example.com")
