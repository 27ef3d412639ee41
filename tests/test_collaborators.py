import json
import logging

import httpx
import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import agency.repositories.ledger as ledger_repo
from agency.core.config import settings
from agency.services.collaborators import (
    publish_notification,
    record_expense,
    record_revenue,
    write_audit,
)

WEBHOOK_URL = "http://hooks.test/notify"


def test_write_audit_emits_json_line(caplog):
    with caplog.at_level(logging.INFO, logger="agency.audit"):
        write_audit("cancel", "policy", 7, old_value={"status": "active"}, new_value={"status": "cancelled"})

    records = [r for r in caplog.records if r.name == "agency.audit"]
    assert len(records) == 1
    event = json.loads(records[0].getMessage())
    assert event["action"] == "cancel"
    assert event["entity"] == "policy"
    assert event["entity_id"] == 7
    assert event["new_value"] == {"status": "cancelled"}
    assert "at" in event


def test_policy_cancellation_is_audited(client, policy, caplog):
    with caplog.at_level(logging.INFO, logger="agency.audit"):
        client.post(f"/api/v1/policies/{policy.id}/cancel", json={"refund_amount": 0})

    events = [json.loads(r.getMessage()) for r in caplog.records if r.name == "agency.audit"]
    assert any(e["entity"] == "policy" and e["entity_id"] == policy.id for e in events)


# ============================================================================
# NOTIFICATION TESTS
# ============================================================================


def test_notification_without_webhook_is_logged(monkeypatch, caplog):
    monkeypatch.setattr(settings, "notify_webhook_url", None)

    def fail_post(*args, **kwargs):
        raise AssertionError("webhook must not be called")

    monkeypatch.setattr(httpx, "post", fail_post)

    with caplog.at_level(logging.INFO, logger="agency.services.collaborators"):
        publish_notification("Cheque 100 returned")
    assert "Cheque 100 returned" in caplog.text


def test_notification_posts_to_webhook(monkeypatch):
    monkeypatch.setattr(settings, "notify_webhook_url", WEBHOOK_URL)
    calls = []

    def fake_post(url, json, timeout):
        calls.append((url, json))
        return httpx.Response(200, request=httpx.Request("POST", url))

    monkeypatch.setattr(httpx, "post", fake_post)

    publish_notification("Policy 3 cancelled")
    assert calls == [(WEBHOOK_URL, {"message": "Policy 3 cancelled"})]


def test_notification_request_error_is_swallowed(monkeypatch, caplog):
    monkeypatch.setattr(settings, "notify_webhook_url", WEBHOOK_URL)

    def broken_post(url, **kwargs):
        raise httpx.ConnectError("connection refused", request=httpx.Request("POST", url))

    monkeypatch.setattr(httpx, "post", broken_post)

    with caplog.at_level(logging.ERROR, logger="agency.services.collaborators"):
        publish_notification("Cheque 100 returned")
    assert "Notification webhook request failed" in caplog.text


def test_notification_error_status_is_swallowed(monkeypatch, caplog):
    monkeypatch.setattr(settings, "notify_webhook_url", WEBHOOK_URL)
    monkeypatch.setattr(
        httpx,
        "post",
        lambda url, **kwargs: httpx.Response(503, request=httpx.Request("POST", url)),
    )

    with caplog.at_level(logging.ERROR, logger="agency.services.collaborators"):
        publish_notification("Cheque 100 returned")
    assert "status 503" in caplog.text


def test_returned_cheque_still_saved_when_webhook_down(client, policy, monkeypatch):
    """Test a failing webhook does not undo the status change."""
    monkeypatch.setattr(settings, "notify_webhook_url", WEBHOOK_URL)

    def broken_post(url, **kwargs):
        raise httpx.ConnectError("connection refused", request=httpx.Request("POST", url))

    monkeypatch.setattr(httpx, "post", broken_post)

    payment = client.post(
        f"/api/v1/policies/{policy.id}/payments",
        json={
            "amount": 200,
            "method": "cheque",
            "cheque_number": "W-1",
            "cheque_date": "2026-12-01",
        },
    ).json()

    response = client.patch(
        f"/api/v1/cheques/{payment['cheque_id']}/status",
        json={"status": "returned", "returned_reason": "Insufficient funds"},
    )
    assert response.status_code == 200
    assert response.json()["status"] == "returned"


# ============================================================================
# SIDE LEDGER TESTS
# ============================================================================


def test_record_expense(db: Session):
    expense = record_expense(
        db,
        title="Office rent",
        amount=900,
        paid_by="Agency",
        payment_method="bank_transfer",
        receipt_number="EXP-1",
    )
    assert expense is not None
    assert expense.id is not None


def test_record_expense_failure_returns_none(db: Session, monkeypatch, caplog):
    def broken_create(db, **fields):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(ledger_repo, "create_expense", broken_create)

    with caplog.at_level(logging.ERROR, logger="agency.services.collaborators"):
        assert record_expense(db, title="Office rent", amount=900) is None
    assert "Failed to record expense 'Office rent'" in caplog.text


def test_record_revenue_failure_returns_none(db: Session, monkeypatch):
    def broken_create(db, **fields):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(ledger_repo, "create_revenue", broken_create)
    assert record_revenue(db, title="Transfer fee", amount=50) is None


def test_policy_survives_revenue_failure(client, vehicle, company, monkeypatch):
    """Test a policy paid at creation is kept when its revenue record fails."""

    def broken_create(db, **fields):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(ledger_repo, "create_revenue", broken_create)

    response = client.post(
        f"/api/v1/vehicles/{vehicle.id}/policies",
        json={
            "company_id": company.id,
            "insurance_type": "Comprehensive",
            "insurance_amount": 1000,
            "payments": [{"amount": 250, "method": "cash"}],
        },
    )
    assert response.status_code == 201
    assert response.json()["paid_amount"] == 250


@pytest.mark.parametrize("value", [{"nested": {1, 2}}, object()])
def test_write_audit_serializes_unusual_values(value, caplog):
    with caplog.at_level(logging.INFO, logger="agency.audit"):
        write_audit("update", "thing", 1, new_value=value)
    assert any(r.name == "agency.audit" for r in caplog.records)
