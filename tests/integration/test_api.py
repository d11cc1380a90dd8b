"""Integration tests for API endpoints"""

import pytest
import uuid
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker
from rent_assist.api.main import create_app
from rent_assist.domain.exceptions import PaymentVerificationError
from rent_assist.infrastructure.clients.payment_gateway import VerifiedPayment
from rent_assist.infrastructure.database import session as database
from rent_assist.infrastructure.database.repositories import PaymentRepository
from rent_assist.infrastructure.database.session import get_db
from rent_assist.infrastructure.realtime import ChangeFeed

VERIFY_PATH = "rent_assist.infrastructure.clients.payment_gateway.PaymentGatewayClient.verify_payment"


@pytest.fixture
def application(client: TestClient) -> dict:
    """Pending application for 3000 rent, landlord paid on 20 June"""
    response = client.post(
        "/v1/applications",
        json={
            "user_id": "user_good",
            "monthly_rent": 3000,
            "payment_term": 12,
            "landlord_payment_date": "2025-06-20",
        },
    )
    assert response.status_code == 201
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "rent_assist_quotes_total" in response.text


def test_request_id_propagated(client: TestClient):
    """Test caller-supplied request id is echoed back"""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_document_review_fee(client: TestClient):
    response = client.post("/v1/fees/document-review", json={"monthly_rent": 1500})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 65
    assert data["total_display"] == "GH₵65.00"
    assert data["service_fee"] == 0


def test_initial_payment_with_proration(client: TestClient):
    """Test landlord payment date after the 15th adds prorated rent"""
    response = client.post(
        "/v1/fees/initial",
        json={"monthly_rent": 3000, "payment_term": 12, "landlord_payment_date": "2025-06-20"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["prorated_rent"] == pytest.approx(1100)
    assert data["total"] == pytest.approx(
        data["refundable_rent_security"] + data["service_fee"] + data["document_upload_fee"]
        + data["property_inspection_fee"] + data["prorated_rent"]
    )


def test_initial_payment_rejects_negative_rent(client: TestClient):
    """Test input validation happens before any calculation"""
    response = client.post("/v1/fees/initial", json={"monthly_rent": -100})
    assert response.status_code == 422


def test_deposit_fee(client: TestClient):
    response = client.post("/v1/fees/deposit", json={"monthly_rent": 1000})

    assert response.status_code == 200
    data = response.json()
    assert data["document_upload_fee"] is None
    assert data["total"] == pytest.approx(3686.6)


def test_late_fee(client: TestClient):
    response = client.post("/v1/fees/late", json={"amount": 1000, "day_of_month": 15})

    assert response.status_code == 200
    assert response.json() == {"late_fee": 150, "rate": 0.15, "late_fee_display": "GH₵150.00"}


def test_late_fee_rejects_invalid_day(client: TestClient):
    response = client.post("/v1/fees/late", json={"amount": 1000, "day_of_month": 32})
    assert response.status_code == 422


def test_schedule_endpoint(client: TestClient):
    """Test schedule generation with a discount on the third payment"""
    response = client.post(
        "/v1/schedule",
        json={
            "total_amount": 12000,
            "interest_rate": 28.08,
            "months": 12,
            "discounts": {"3": 50},
            "start_date": "2025-01-01",
        },
    )

    assert response.status_code == 200
    data = response.json()
    entries = data["schedule"]
    assert len(entries) == 12
    assert entries[0]["payment_date"] == "2025-02-01"
    assert entries[2]["discount"] == 50
    assert entries[2]["payment_amount"] == pytest.approx(data["monthly_payment"] - 50)
    assert entries[-1]["remaining_balance"] == pytest.approx(0, abs=1e-6)


def test_first_payment_date_endpoint(client: TestClient):
    response = client.post("/v1/schedule/first-payment-date", json={"landlord_payment_date": "2025-06-20"})

    assert response.status_code == 200
    assert response.json()["first_payment_date"] == "2025-07-25"


def test_rent_eligibility_endpoint(client: TestClient):
    response = client.post(
        "/v1/eligibility/rent",
        json={
            "employment_status": "cagd-payroll",
            "employment_months": 24,
            "monthly_salary": 4000,
            "monthly_rent": 1000,
            "credit_score": 650,
        },
    )

    assert response.status_code == 200
    assert response.json()["eligible"] is True


def test_bnpl_eligibility_endpoint(client: TestClient):
    response = client.post(
        "/v1/eligibility/bnpl",
        json={"monthly_salary": 1000, "item_price": 1000, "payment_term": 5, "start_date": "2025-03-15"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["eligible"] is True
    assert data["total_amount"] == pytest.approx(1200)
    assert len(data["installments"]) == 5


def test_bnpl_eligibility_rejects_unsupported_term(client: TestClient):
    response = client.post(
        "/v1/eligibility/bnpl",
        json={"monthly_salary": 1000, "item_price": 1000, "payment_term": 12},
    )
    assert response.status_code == 422


def test_create_application(application: dict):
    """Test new applications owe the document review fee"""
    assert application["status"] == "pending"
    assert application["amount_due_now"] == 65
    assert application["first_payment_date"] == "2025-07-25"


def test_get_application(client: TestClient, application: dict):
    response = client.get(f"/v1/applications/{application['application_id']}")

    assert response.status_code == 200
    assert response.json()["user_id"] == "user_good"


def test_get_application_not_found(client: TestClient):
    response = client.get(f"/v1/applications/{uuid.uuid4()}")
    assert response.status_code == 404


def test_get_application_invalid_id(client: TestClient):
    response = client.get("/v1/applications/not-a-uuid")
    assert response.status_code == 400


def test_approve_application(client: TestClient, application: dict, feed: ChangeFeed):
    """Test approval moves the amount due to the deposit bundle and notifies watchers"""
    events = []
    feed.subscribe("applications", {"id": application["application_id"]}, events.append)

    response = client.patch(
        f"/v1/applications/{application['application_id']}/status",
        json={"status": "approved"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "approved"
    assert data["amount_due_now"] == pytest.approx(3000 * 1.2808 * 2 + 3000 + 125)
    assert [e.action for e in events] == ["update"]


def test_invalid_status_change(client: TestClient, application: dict):
    response = client.patch(
        f"/v1/applications/{application['application_id']}/status",
        json={"status": "completed"},
    )
    assert response.status_code == 409


@patch(VERIFY_PATH, new_callable=AsyncMock)
def test_record_payment(mock_verify: AsyncMock, client: TestClient, application: dict):
    """Test verified payment is recorded once per reference"""
    mock_verify.return_value = VerifiedPayment(reference="ref_001", amount=65)
    url = f"/v1/applications/{application['application_id']}/payments"

    response = client.post(url, json={"reference": "ref_001", "amount": 65})
    assert response.status_code == 201
    payment = response.json()
    assert payment["status"] == "completed"
    assert payment["transaction_id"] == "ref_001"

    # Same reference again returns the stored payment without re-verifying
    repeat = client.post(url, json={"reference": "ref_001", "amount": 65})
    assert repeat.status_code == 201
    assert repeat.json()["payment_id"] == payment["payment_id"]
    assert mock_verify.await_count == 1

    listing = client.get(url)
    assert listing.status_code == 200
    assert listing.json()["total_paid"] == 65
    assert len(listing.json()["payments"]) == 1


@patch(VERIFY_PATH, new_callable=AsyncMock)
def test_record_payment_verification_failure(mock_verify: AsyncMock, client: TestClient, application: dict):
    """Test gateway rejection surfaces as 502 and records nothing"""
    mock_verify.side_effect = PaymentVerificationError("Transaction not found")
    url = f"/v1/applications/{application['application_id']}/payments"

    response = client.post(url, json={"reference": "ref_bad", "amount": 65})
    assert response.status_code == 502

    listing = client.get(url)
    assert listing.json()["payments"] == []


def test_record_payment_unknown_application(client: TestClient):
    response = client.post(
        f"/v1/applications/{uuid.uuid4()}/payments",
        json={"reference": "ref_001", "amount": 65},
    )
    assert response.status_code == 404


def test_list_applications_by_user(client: TestClient, application: dict):
    response = client.get("/v1/applications", params={"user_id": "user_good"})

    assert response.status_code == 200
    data = response.json()
    assert [a["application_id"] for a in data["applications"]] == [application["application_id"]]
    assert client.get("/v1/applications", params={"user_id": "nobody"}).json()["applications"] == []


@patch(VERIFY_PATH, new_callable=AsyncMock)
def test_payment_progress(mock_verify: AsyncMock, client: TestClient, application: dict):
    """Test progress is measured against rent plus interest over the term"""
    mock_verify.return_value = VerifiedPayment(reference="ref_month_1", amount=3842.4)
    url = f"/v1/applications/{application['application_id']}/payments"

    client.post(url, json={"reference": "ref_month_1", "amount": 3842.4})

    # 3000 * 1.2808 = 3842.40 a month over 12 months
    assert client.get(url).json()["progress_percent"] == pytest.approx(100 / 12)


def test_upcoming_payment_overdue(client: TestClient):
    response = client.post(
        "/v1/schedule/upcoming-payment",
        json={"amount": 1000, "due_date": "2025-07-01", "today": "2025-07-15"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["is_late"] is True
    assert data["late_fee"] == pytest.approx(150)
    assert data["status_message"] == "14 days overdue"
    assert data["payment_window_end"] == "2025-07-05"


def open_application(client: TestClient, user_id: str) -> str:
    response = client.post(
        "/v1/applications",
        json={
            "user_id": user_id,
            "monthly_rent": 1500,
            "payment_term": 6,
            "landlord_payment_date": "2025-06-10",
        },
    )
    return response.json()["application_id"]


@patch(VERIFY_PATH, new_callable=AsyncMock)
def test_payment_reference_reused_for_other_application(mock_verify: AsyncMock, client: TestClient, application: dict):
    """Test a reference recorded for one application cannot be claimed by another"""
    mock_verify.return_value = VerifiedPayment(reference="ref_x", amount=65)
    other_id = open_application(client, "user_other")

    first = client.post(f"/v1/applications/{application['application_id']}/payments", json={"reference": "ref_x", "amount": 65})
    assert first.status_code == 201

    response = client.post(f"/v1/applications/{other_id}/payments", json={"reference": "ref_x", "amount": 65})

    assert response.status_code == 409
    assert client.get(f"/v1/applications/{other_id}/payments").json()["payments"] == []


@patch(VERIFY_PATH, new_callable=AsyncMock)
def test_concurrent_duplicate_reference(mock_verify: AsyncMock, client: TestClient, db, feed: ChangeFeed, application: dict):
    """Test losing the insert race returns the stored payment and notifies nobody"""
    mock_verify.return_value = VerifiedPayment(reference="ref_race", amount=65)
    app_uuid = uuid.UUID(application["application_id"])

    # Another request commits the same reference between lookup and insert
    stored = PaymentRepository(db).record_payment(app_uuid, 65, "ref_race")
    db.commit()

    events = []
    feed.subscribe("payments", None, events.append)
    original_lookup = PaymentRepository.get_payment_by_transaction
    lookups = []

    def lookup(self, transaction_id):
        lookups.append(transaction_id)
        return None if len(lookups) == 1 else original_lookup(self, transaction_id)

    with patch.object(PaymentRepository, "get_payment_by_transaction", lookup):
        response = client.post(
            f"/v1/applications/{application['application_id']}/payments",
            json={"reference": "ref_race", "amount": 65},
        )

    assert response.status_code == 201
    assert response.json()["payment_id"] == stored.id
    assert events == []
    assert len(client.get(f"/v1/applications/{application['application_id']}/payments").json()["payments"]) == 1


@patch(VERIFY_PATH, new_callable=AsyncMock)
def test_record_payment_amount_mismatch(mock_verify: AsyncMock, client: TestClient, application: dict):
    """Test the gateway-confirmed amount must match the submitted amount"""
    mock_verify.return_value = VerifiedPayment(reference="ref_short", amount=6.5)
    url = f"/v1/applications/{application['application_id']}/payments"

    response = client.post(url, json={"reference": "ref_short", "amount": 65})

    assert response.status_code == 502
    assert client.get(url).json()["payments"] == []


@patch(VERIFY_PATH, new_callable=AsyncMock)
def test_record_payment_closed_application(mock_verify: AsyncMock, client: TestClient, application: dict):
    """Test rejected applications accept no further payments"""
    client.patch(f"/v1/applications/{application['application_id']}/status", json={"status": "rejected"})

    response = client.post(
        f"/v1/applications/{application['application_id']}/payments",
        json={"reference": "ref_late", "amount": 65},
    )

    assert response.status_code == 409
    mock_verify.assert_not_awaited()


def test_tables_created_on_startup(tmp_path, monkeypatch):
    """Test a fresh database is usable without any manual schema setup"""
    engine = create_engine(f"sqlite:///{tmp_path / 'fresh.db'}", connect_args={"check_same_thread": False})
    monkeypatch.setattr(database, "engine", engine)
    FreshSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def fresh_db():
        db = FreshSession()
        try:
            yield db
        finally:
            db.close()

    app = create_app()
    app.dependency_overrides[get_db] = fresh_db

    with TestClient(app) as fresh_client:
        assert {"applications", "payments"} <= set(inspect(engine).get_table_names())
        application_id = open_application(fresh_client, "user_fresh")
        assert fresh_client.get(f"/v1/applications/{application_id}").status_code == 200

    engine.dispose()
