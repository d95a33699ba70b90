"""
Shared test fixtures: SQLite database, test client, seeded shipping data.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point the app at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test_shipping.db"
os.environ["DEFAULT_SHOP_ID"] = "shop-1"

from flat_rate_shipping import models
from flat_rate_shipping.database import Base, get_db
from flat_rate_shipping.main import app


TEST_DATABASE_URL = "sqlite:///./test_shipping.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sample_cart():
    """A valid single-shop cart."""
    return {
        "_id": "cart-1",
        "shopId": "shop-1",
        "shipping": [
            {"type": "shipping", "shopId": "shop-1", "address": {"city": "Chicago", "postal": "60601"}},
        ],
        "items": [
            {"_id": "item-1", "productId": "prod-1", "quantity": 2},
        ],
    }


@pytest.fixture
def seeded_shop(db):
    """shop-1 with flat rates enabled and an Acme provider with two enabled methods."""
    db.add(models.Package(
        name="reaction-shipping-rates",
        shop_id="shop-1",
        enabled=True,
        settings={"flatRates": {"enabled": True}},
    ))
    db.add(models.ShippingConfig(
        shop_id="shop-1",
        name="Acme Flat Rates",
        provider_name="flatRates",
        provider_label="Acme",
        provider_enabled=True,
        methods=[
            {"name": "ground", "label": "Ground", "rate": 5, "handling": 2, "enabled": True},
            {"name": "pickup", "label": "Pickup", "enabled": True},
            {"name": "overnight", "label": "Overnight", "rate": 40, "enabled": False},
        ],
    ))
    db.commit()
    return "shop-1"
