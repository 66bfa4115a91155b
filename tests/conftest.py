"""Pytest configuration and fixtures"""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from api.index import create_app
from experience.cart import CartContextStore, CartService
from experience.clock import FakeClock
from experience.config import Settings


START = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    """Manually driven clock starting at a fixed instant"""
    return FakeClock(START)


@pytest.fixture
def store(clock):
    """Fresh context store on the fake clock"""
    return CartContextStore(clock=clock)


@pytest.fixture
def service(store):
    """Cart service over the fixture store"""
    return CartService(store)


@pytest.fixture
def settings():
    """Default settings, independent of the environment"""
    return Settings()


@pytest.fixture
def app(clock, settings):
    """Application bound to the fake clock"""
    return create_app(clock=clock, settings=settings)


@pytest.fixture
def client(app):
    """Test client (lifespan not started)"""
    return TestClient(app)


@pytest.fixture
def sample_item():
    """Request body for adding an item"""
    return {
        "sku": "PHONE_X",
        "name": "Phone X",
        "price": 999.99,
        "quantity": 1,
    }
