import pytest
from unittest.mock import AsyncMock

from workshop.config import Settings
from workshop.services.gateway import BackendGateway
from workshop.services.store import EntityStore


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fake backend and a temp data dir"""
    return Settings(API_URL="http://backend.test", DATA_DIR=tmp_path)


@pytest.fixture
def gateway():
    """Backend gateway mock; list endpoints return empty lists by default"""
    mock = AsyncMock(spec=BackendGateway)
    mock.get_customers.return_value = []
    mock.get_vehicles.return_value = []
    mock.get_orders.return_value = []
    mock.search_customers.return_value = []
    mock.search_vehicles.return_value = []
    mock.get_orders_by_customer.return_value = []
    mock.get_orders_by_vehicle.return_value = []
    return mock


@pytest.fixture
def store(gateway):
    return EntityStore(gateway)
