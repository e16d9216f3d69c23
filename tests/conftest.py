"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cost_analyzer.main import app
from cost_analyzer.auth.jwt import create_access_token
from cost_analyzer.db.database import get_db
from cost_analyzer.db.models import Base, Scenario  # noqa: F401


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")


# Create a shared test database engine
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency globally for all tests
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create database session for test setup."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def user_headers():
    """Authorization header for a caller without roles."""
    token, _ = create_access_token(username="analyst", subject="user-1")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    """Authorization header for a caller with the Admin role."""
    token, _ = create_access_token(username="admin", subject="admin-1", roles=["Admin"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def default_payload():
    """The calculator's default form values as a request body."""
    return {
        "UnitCount": 500,
        "DeclaredUnitValueUsd": 6,
        "FreightCostUsd": 1200,
        "InsuranceRatePercent": 0.003,
        "OriginChargesUsd": 0,
        "DestinationChargesUsd": 300,
        "CustomsBrokerUsd": 120,
        "DutyRatePercent": 0.10,
        "ValueAddedTaxRatePercent": 0.19,
        "OtherTaxesRatePercent": 0,
        "BankForeignExchangeSpreadPercent": 0.01,
        "PaymentFeePercent": 0.009,
        "UsdToCopRate": 4000,
        "SalePriceCop": 69900,
        "CommissionPercent": 0.14,
        "PaymentGatewayPercent": 0.029,
        "FulfillmentFeeCop": 1200,
        "LastMileCop": 300000,
        "MiscellaneousAdminCostCop": 200000,
        "IsCifShipment": False,
    }
