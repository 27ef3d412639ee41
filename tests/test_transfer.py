from datetime import date

import pytest
from sqlalchemy.orm import Session

from agency.db.models.agent import AgentTransaction as AgentTransactionModel
from agency.db.models.cheque import Cheque as ChequeModel
from agency.db.models.ledger import Expense as ExpenseModel
from agency.db.models.ledger import Revenue as RevenueModel
from agency.services.policy import add_payment


@pytest.fixture(scope="function")
def paid_policy(db: Session, policy):
    """The 1200 policy with 300 cash and a 200 cheque paid."""
    add_payment(db, policy.id, amount=300, method="cash")
    add_payment(
        db,
        policy.id,
        amount=200,
        method="cheque",
        cheque_number="T-1",
        cheque_date=date(2026, 12, 1),
    )
    return policy


def _transfer(client, policy_id, from_vehicle_id, to_vehicle_id, **extra):
    return client.post(
        "/api/v1/policies/transfer",
        json={
            "policy_id": policy_id,
            "from_vehicle_id": from_vehicle_id,
            "to_vehicle_id": to_vehicle_id,
            **extra,
        },
    )


def test_transfer_moves_policy_and_payments(
    client, db: Session, paid_policy, vehicle, second_vehicle
):
    """Test the policy is re-created on the new vehicle with its payments."""
    old_id = paid_policy.id

    response = _transfer(client, old_id, vehicle.id, second_vehicle.id)
    assert response.status_code == 200
    data = response.json()
    assert data["id"] != old_id
    assert data["transferred_from_id"] == old_id
    assert data["vehicle_id"] == second_vehicle.id
    assert data["insurance_amount"] == 1200
    assert data["paid_amount"] == 500
    assert data["remaining_debt"] == 700
    assert sorted(p["amount"] for p in data["payments"]) == [200, 300]

    # The old row is gone
    assert client.get(f"/api/v1/policies/{old_id}").status_code == 404

    # Linked cheques follow the policy
    cheque = db.query(ChequeModel).one()
    assert cheque.policy_id == data["id"]
    assert cheque.vehicle_id == second_vehicle.id


def test_transfer_round_trip_preserves_figures(client, paid_policy, vehicle, second_vehicle):
    moved = _transfer(client, paid_policy.id, vehicle.id, second_vehicle.id).json()
    back = _transfer(client, moved["id"], second_vehicle.id, vehicle.id).json()

    assert back["vehicle_id"] == vehicle.id
    assert back["insurance_amount"] == 1200
    assert back["paid_amount"] == 500
    assert back["remaining_debt"] == 700
    assert back["start_date"] == moved["start_date"]
    assert back["end_date"] == moved["end_date"]


def test_transfer_records_fees(client, db: Session, policy, vehicle, second_vehicle):
    response = _transfer(
        client,
        policy.id,
        vehicle.id,
        second_vehicle.id,
        customer_fee=50,
        company_fee=30,
        customer_payment_method="card",
    )
    assert response.status_code == 200

    revenue = db.query(RevenueModel).one()
    assert revenue.amount == 50
    assert revenue.payment_method == "card"
    assert revenue.from_vehicle_plate == vehicle.plate_number
    assert revenue.to_vehicle_plate == second_vehicle.plate_number

    expense = db.query(ExpenseModel).one()
    assert expense.amount == 30


def test_transfer_without_fees_records_nothing(client, db: Session, policy, vehicle, second_vehicle):
    _transfer(client, policy.id, vehicle.id, second_vehicle.id)
    assert db.query(RevenueModel).count() == 0
    assert db.query(ExpenseModel).count() == 0


def test_transfer_keeps_commission_entries(
    client, db: Session, vehicle, second_vehicle, company, agent
):
    """Test commission entries still point at the old policy id after a transfer."""
    from agency.services.policy import create_policy

    policy = create_policy(
        db,
        vehicle_id=vehicle.id,
        company_id=company.id,
        insurance_type="Comprehensive",
        insurance_amount=1000,
        agent_id=agent.id,
        agent_flow="from_agent",
        agent_amount=100,
    )
    old_id = policy.id

    response = _transfer(client, old_id, vehicle.id, second_vehicle.id)
    assert response.status_code == 200
    assert response.json()["agent_flow"] == "from_agent"

    entry = db.query(AgentTransactionModel).one()
    assert entry.policy_id == old_id


def test_transfer_same_vehicle(client, policy, vehicle):
    response = _transfer(client, policy.id, vehicle.id, vehicle.id)
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_transfer_to_other_customers_vehicle(client, policy, vehicle, other_customer_vehicle):
    response = _transfer(client, policy.id, vehicle.id, other_customer_vehicle.id)
    assert response.status_code == 404


def test_transfer_policy_not_on_source_vehicle(client, policy, second_vehicle, vehicle):
    response = _transfer(client, policy.id, second_vehicle.id, vehicle.id)
    assert response.status_code == 404


def test_transfer_unknown_policy(client, vehicle, second_vehicle):
    response = _transfer(client, 9999, vehicle.id, second_vehicle.id)
    assert response.status_code == 404


def test_transfer_negative_fee(client, policy, vehicle, second_vehicle):
    response = _transfer(client, policy.id, vehicle.id, second_vehicle.id, company_fee=-1)
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_AMOUNT"
