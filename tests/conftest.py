"""Pytest fixtures for testing"""

import pytest
from fastapi.testclient import TestClient

from homeu_scores.api.dependencies import get_engine
from homeu_scores.api.main import create_app
from homeu_scores.domain.models import CreditworthinessInput, TenantRiskInput
from homeu_scores.infrastructure.dispatch import ScoringEngine

LEASE_START = 1_704_067_200_000  # 2024-01-01T00:00:00Z
BALANCE_CHECKED = 1_767_225_600_000  # 2026-01-01T00:00:00Z


@pytest.fixture
def engine() -> ScoringEngine:
    """Python-only engine, independent of any configured native backend"""
    return ScoringEngine()


@pytest.fixture
def client(engine: ScoringEngine) -> TestClient:
    """FastAPI test client wired to the Python-only engine"""
    app = create_app()
    app.dependency_overrides[get_engine] = lambda: engine
    return TestClient(app)


@pytest.fixture
def perfect_tenant() -> TenantRiskInput:
    """24 on-time payments, verified income at 20% rent-to-income, long lease"""
    return TenantRiskInput(
        renter_id="r_perfect",
        renter_name="Pat Perfect",
        property_id="p_1",
        property_address="100 Main St, Unit 1",
        rent_amount=2000.0,
        lease_start_date=LEASE_START,
        on_time_payments=24,
        has_sufficient_balance=True,
        balance_check_date=BALANCE_CHECKED,
        account_status="active",
        verified_income=120000.0,
        employment_verified=True,
        lease_months_remaining=8,
    )


@pytest.fixture
def high_risk_tenant() -> TenantRiskInput:
    """Late and missed payments, failed balance check, month-to-month"""
    return TenantRiskInput(
        renter_id="r_risky",
        renter_name="Riley Risky",
        property_id="p_1",
        property_address="100 Main St, Unit 2",
        rent_amount=1500.0,
        lease_start_date=LEASE_START,
        on_time_payments=6,
        late_payments=4,
        average_days_late=15.0,
        missed_payments=2,
        has_sufficient_balance=False,
        balance_check_date=BALANCE_CHECKED,
        account_status="inactive",
        verified_income=36000.0,
        employment_verified=False,
        is_month_to_month=True,
    )


@pytest.fixture
def strong_renter_credit() -> CreditworthinessInput:
    return CreditworthinessInput(
        renter_id="r_strong",
        on_time_payments=50,
        rental_tenure_months=36,
        employment_months=24,
        employment_verified=True,
        income_consistency=90.0,
    )


@pytest.fixture
def tenant_payload() -> dict:
    """Rent-roll tenant body with only the required fields"""
    return {
        "renter_id": "r_min",
        "renter_name": "Morgan Minimal",
        "property_id": "p_2",
        "property_address": "200 Oak Ave, Unit 5",
        "rent_amount": 1800,
    }
