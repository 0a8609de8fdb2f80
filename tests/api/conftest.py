import pytest
from brewery.api import ROUTERS
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)
    return TestClient(app)


@pytest.fixture()
def shopper_id(client):
    response = client.post(
        "/api/shoppers",
        json={"first_name": "Dana", "last_name": "Hops", "email": "dana@example.com", "state": "VA"},
    )
    return response.json()["shopper_id"]


@pytest.fixture()
def product_id(client):
    response = client.post(
        "/api/products",
        json={"name": "Pale Ale Kit", "price": 12.50, "stock": 10, "category": "Kits", "type": "E"},
    )
    return response.json()["product_id"]


@pytest.fixture()
def basket_id(client, shopper_id):
    return client.post("/api/baskets", json={"shopper_id": shopper_id}).json()["basket_id"]
