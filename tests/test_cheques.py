from datetime import date

import pytest
from sqlalchemy.orm import Session, sessionmaker

import agency.repositories.cheque as cheque_repo
import agency.services.cheque as cheque_service
from agency.db.models.policy import Payment as PaymentModel
from agency.errors import InvalidTransitionError, NotFoundError
from agency.services.policy import add_payment, create_policy


@pytest.fixture(scope="function")
def cheque_payment(db: Session, policy):
    """A 500 cheque paid into the 1200 policy."""
    return add_payment(
        db,
        policy.id,
        amount=500,
        method="cheque",
        cheque_number="CH-500",
        cheque_date=date(2026, 12, 15),
    )


# ============================================================================
# CREATE / READ TESTS
# ============================================================================


def test_create_standalone_cheque(client, customer):
    response = client.post(
        f"/api/v1/customers/{customer.id}/cheques",
        json={"cheque_number": "S-1", "cheque_date": "2026-11-20", "amount": 750},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["customer_id"] == customer.id
    assert data["policy_id"] is None
    assert data["status"] == "pending"
    assert data["amount"] == 750


def test_create_cheque_customer_not_found(client):
    response = client.post(
        "/api/v1/customers/9999/cheques",
        json={"cheque_number": "S-1", "cheque_date": "2026-11-20", "amount": 750},
    )
    assert response.status_code == 404


def test_create_cheque_invalid_amount(client, customer):
    response = client.post(
        f"/api/v1/customers/{customer.id}/cheques",
        json={"cheque_number": "S-1", "cheque_date": "2026-11-20", "amount": 0},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_AMOUNT"


def test_get_cheque_not_found(client):
    response = client.get("/api/v1/cheques/9999")
    assert response.status_code == 404


def test_list_cheques_newest_first_with_filters(client, customer, other_customer_vehicle):
    """Test listing orders by cheque date descending and filters by status/customer."""
    for number, cheque_date in (("A", "2026-01-10"), ("B", "2026-03-10"), ("C", "2026-02-10")):
        client.post(
            f"/api/v1/customers/{customer.id}/cheques",
            json={"cheque_number": number, "cheque_date": cheque_date, "amount": 100},
        )
    client.post(
        f"/api/v1/customers/{other_customer_vehicle.customer_id}/cheques",
        json={"cheque_number": "D", "cheque_date": "2026-04-10", "amount": 100},
    )

    response = client.get("/api/v1/cheques", params={"customer": customer.id})
    assert response.status_code == 200
    assert [c["cheque_number"] for c in response.json()] == ["B", "C", "A"]

    cleared_id = response.json()[0]["id"]
    client.patch(f"/api/v1/cheques/{cleared_id}/status", json={"status": "cleared"})
    response = client.get("/api/v1/cheques", params={"status": "cleared"})
    assert [c["cheque_number"] for c in response.json()] == ["B"]



def test_list_cheques_by_date_range(client, customer):
    """Test both ends of the cheque date range are inclusive."""
    for number, cheque_date in (("A", "2026-01-10"), ("B", "2026-03-10"), ("C", "2026-02-10")):
        client.post(
            f"/api/v1/customers/{customer.id}/cheques",
            json={"cheque_number": number, "cheque_date": cheque_date, "amount": 100},
        )

    response = client.get(
        "/api/v1/cheques", params={"start_date": "2026-02-10", "end_date": "2026-03-10"}
    )
    assert response.status_code == 200
    assert [c["cheque_number"] for c in response.json()] == ["B", "C"]

    response = client.get("/api/v1/cheques", params={"end_date": "2026-02-01"})
    assert [c["cheque_number"] for c in response.json()] == ["A"]


def test_list_cheques_inverted_date_range(client):
    response = client.get(
        "/api/v1/cheques", params={"start_date": "2026-03-01", "end_date": "2026-02-01"}
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"

# ============================================================================
# STATUS TESTS
# ============================================================================


def test_clear_cheque_sets_cleared_date(client, cheque_payment):
    response = client.patch(
        f"/api/v1/cheques/{cheque_payment.cheque_id}/status", json={"status": "cleared"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "cleared"
    assert data["cleared_date"] is not None
    assert data["amount"] == 500


def test_return_cheque_keeps_reason(client, cheque_payment):
    response = client.patch(
        f"/api/v1/cheques/{cheque_payment.cheque_id}/status",
        json={"status": "returned", "returned_reason": "Insufficient funds"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "returned"
    assert data["returned_date"] is not None
    assert data["returned_reason"] == "Insufficient funds"


def test_cleared_cheque_cannot_change_again(client, cheque_payment):
    """Test terminal statuses reject further transitions."""
    cheque_id = cheque_payment.cheque_id
    client.patch(f"/api/v1/cheques/{cheque_id}/status", json={"status": "cleared"})

    response = client.patch(f"/api/v1/cheques/{cheque_id}/status", json={"status": "returned"})
    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_TRANSITION"


def test_unknown_cheque_status(client, cheque_payment):
    response = client.patch(
        f"/api/v1/cheques/{cheque_payment.cheque_id}/status", json={"status": "bounced"}
    )
    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_TRANSITION"


def test_update_status_cheque_not_found(client):
    response = client.patch("/api/v1/cheques/9999/status", json={"status": "cleared"})
    assert response.status_code == 404



def _change_cheque_elsewhere_after_read(db_session, monkeypatch, change):
    """Run ``change`` in another session right after the locked re-read of the cheque."""
    make_session = sessionmaker(autocommit=False, autoflush=False, bind=db_session.get_bind())
    original_get_cheque = cheque_service.get_cheque
    calls = []

    def get_cheque_then_change(db, cheque_id):
        cheque = original_get_cheque(db, cheque_id)
        calls.append(cheque_id)
        if len(calls) == 2:
            other = make_session()
            try:
                change(other, cheque_id)
                other.commit()
            finally:
                other.close()
        return cheque

    monkeypatch.setattr(cheque_service, "get_cheque", get_cheque_then_change)


def test_status_update_after_concurrent_clear_is_rejected(db_session, cheque_payment, monkeypatch):
    """Test returning a cheque another request cleared in the meantime fails."""

    def clear(other, cheque_id):
        cheque_repo.update_cheque_status(
            other, cheque_id, "pending", status="cleared", cleared_date=date(2026, 10, 1)
        )

    _change_cheque_elsewhere_after_read(db_session, monkeypatch, clear)

    with pytest.raises(InvalidTransitionError):
        cheque_service.update_cheque_status(
            db_session, cheque_payment.cheque_id, "returned", returned_reason="Stopped"
        )

    db_session.expire_all()
    cheque = cheque_repo.get_cheque_by_id(db_session, cheque_payment.cheque_id)
    assert cheque.status == "cleared"
    assert cheque.returned_reason is None


def test_status_update_after_concurrent_delete(db_session, customer, monkeypatch):
    """Test clearing a standalone cheque deleted in the meantime reports it missing."""
    cheque = cheque_service.create_cheque(
        db_session,
        customer_id=customer.id,
        cheque_number="S-9",
        cheque_date=date(2026, 11, 1),
        amount=300,
    )

    def delete(other, cheque_id):
        cheque_repo.delete_cheque(other, cheque_repo.get_cheque_by_id(other, cheque_id))

    _change_cheque_elsewhere_after_read(db_session, monkeypatch, delete)

    with pytest.raises(NotFoundError):
        cheque_service.update_cheque_status(db_session, cheque.id, "cleared")

# ============================================================================
# DELETE TESTS
# ============================================================================


def test_delete_linked_cheque_restores_debt(client, db: Session, policy, cheque_payment):
    """Test deleting a 500 cheque takes 500 off paid and adds it back to the debt."""
    cheque_id = cheque_payment.cheque_id
    before = client.get(f"/api/v1/policies/{policy.id}").json()
    assert before["paid_amount"] == 500
    assert before["remaining_debt"] == 700

    response = client.delete(f"/api/v1/cheques/{cheque_id}")
    assert response.status_code == 204

    after = client.get(f"/api/v1/policies/{policy.id}").json()
    assert after["paid_amount"] == 0
    assert after["remaining_debt"] == 1200
    assert after["payments"] == []
    assert client.get(f"/api/v1/cheques/{cheque_id}").status_code == 404


def test_delete_cheque_keeps_other_payments(client, db: Session, policy, cheque_payment):
    add_payment(db, policy.id, amount=200, method="cash")

    client.delete(f"/api/v1/cheques/{cheque_payment.cheque_id}")

    after = client.get(f"/api/v1/policies/{policy.id}").json()
    assert after["paid_amount"] == 200
    assert after["remaining_debt"] == 1000
    assert [p["method"] for p in after["payments"]] == ["cash"]


def test_delete_standalone_cheque(client, customer):
    cheque = client.post(
        f"/api/v1/customers/{customer.id}/cheques",
        json={"cheque_number": "S-2", "cheque_date": "2026-11-20", "amount": 100},
    ).json()

    response = client.delete(f"/api/v1/cheques/{cheque['id']}")
    assert response.status_code == 204


def test_delete_cheque_not_found(client):
    response = client.delete("/api/v1/cheques/9999")
    assert response.status_code == 404


def test_delete_cheque_rolls_back_on_failure(
    client, db: Session, policy, cheque_payment, monkeypatch
):
    """Test a failure mid-way leaves the cheque, payment and policy untouched."""

    def broken_delete(db, cheque):
        raise RuntimeError("disk full")

    monkeypatch.setattr(cheque_service.cheque_repo, "delete_cheque", broken_delete)

    with pytest.raises(RuntimeError):
        cheque_service.delete_cheque(db, cheque_payment.cheque_id)

    assert db.query(PaymentModel).filter(PaymentModel.id == cheque_payment.id).first()
    after = client.get(f"/api/v1/policies/{policy.id}").json()
    assert after["paid_amount"] == 500
    assert after["remaining_debt"] == 700
    assert client.get(f"/api/v1/cheques/{cheque_payment.cheque_id}").status_code == 200


def test_cheque_payment_on_second_policy(client, db: Session, vehicle, company, policy):
    """Test a cheque only affects the policy it was paid into."""
    other = create_policy(
        db,
        vehicle_id=vehicle.id,
        company_id=company.id,
        insurance_type="Compulsory",
        insurance_amount=400,
    )
    payment = add_payment(
        db,
        other.id,
        amount=400,
        method="cheque",
        cheque_number="X",
        cheque_date=date(2026, 10, 1),
    )

    client.delete(f"/api/v1/cheques/{payment.cheque_id}")

    assert client.get(f"/api/v1/policies/{other.id}").json()["remaining_debt"] == 400
    assert client.get(f"/api/v1/policies/{policy.id}").json()["remaining_debt"] == 1200
