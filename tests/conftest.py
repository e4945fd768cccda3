"""Shared fixtures: an isolated store per test and a TestClient wired to it."""

import pytest
from fastapi.testclient import TestClient

from database import CounterIdGenerator, Database, get_db
from main import app

DISH = {
    "name": "Taco",
    "description": "Spicy",
    "price": 8,
    "image_url": "http://x/y.png",
}


@pytest.fixture
def store():
    return Database(id_generator=CounterIdGenerator())


@pytest.fixture
def client(store):
    """FastAPI test client with the store dependency overridden."""
    app.dependency_overrides[get_db] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def dish_payload():
    return dict(DISH)


@pytest.fixture
def order_payload():
    return {
        "deliverTo": "308 Negra Arroyo Lane",
        "mobileNumber": "(505) 143-3369",
        "dishes": [{"dishId": "1", "quantity": 2}],
    }


@pytest.fixture
def create_dish(client, dish_payload):
    def _create(**overrides):
        response = client.post("/dishes", json={"data": {**dish_payload, **overrides}})
        assert response.status_code == 201, response.json()
        return response.json()["data"]
    return _create


@pytest.fixture
def create_order(client, order_payload):
    def _create(**overrides):
        response = client.post("/orders", json={"data": {**order_payload, **overrides}})
        assert response.status_code == 201, response.json()
        return response.json()["data"]
    return _create
