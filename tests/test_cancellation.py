import re

from sqlalchemy.orm import Session

from agency.db.models.ledger import Expense as ExpenseModel
from agency.services.policy import add_payment


def test_cancel_policy_records_refund_expense(client, db: Session, policy, company):
    """Test cancelling sets the status and books the refund as an expense."""
    add_payment(db, policy.id, amount=600, method="cash")

    response = client.post(
        f"/api/v1/policies/{policy.id}/cancel",
        json={"refund_amount": 400, "paid_by": "Front desk", "payment_method": "cash"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "cancelled"
    assert data["refund_amount"] == 400
    assert data["cancelled_at"] is not None
    # The ledger itself is not touched by a cancellation
    assert data["paid_amount"] == 600
    assert data["remaining_debt"] == 600

    expense = db.query(ExpenseModel).one()
    assert expense.amount == 400
    assert expense.paid_by == "Front desk"
    assert company.name in expense.title
    assert re.fullmatch(r"EXP-\d+", expense.receipt_number)


def test_cancel_policy_twice_is_rejected(client, db: Session, policy):
    """Test a second cancellation fails and books no second refund."""
    first = client.post(f"/api/v1/policies/{policy.id}/cancel", json={"refund_amount": 100})
    assert first.status_code == 200

    second = client.post(f"/api/v1/policies/{policy.id}/cancel", json={"refund_amount": 100})
    assert second.status_code == 409
    assert second.json()["code"] == "ALREADY_CANCELLED"

    assert db.query(ExpenseModel).count() == 1


def test_cancel_refund_not_capped_at_paid_amount(client, policy):
    response = client.post(
        f"/api/v1/policies/{policy.id}/cancel", json={"refund_amount": 5000}
    )
    assert response.status_code == 200
    assert response.json()["refund_amount"] == 5000


def test_cancel_negative_refund(client, db: Session, policy):
    response = client.post(f"/api/v1/policies/{policy.id}/cancel", json={"refund_amount": -1})
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_AMOUNT"
    assert client.get(f"/api/v1/policies/{policy.id}").json()["status"] == "active"


def test_cancel_policy_not_found(client):
    response = client.post("/api/v1/policies/9999/cancel", json={"refund_amount": 0})
    assert response.status_code == 404
