import pytest
from fastapi.testclient import TestClient

from order_service.main import create_app
from order_service.service import OrderService
from order_service.store import OrderStore


@pytest.fixture
def store() -> OrderStore:
    return OrderStore()


@pytest.fixture
def service(store: OrderStore) -> OrderService:
    return OrderService(store)


@pytest.fixture
def client():
    """Fresh app (and so a fresh store) per test."""
    with TestClient(create_app()) as c:
        yield c
