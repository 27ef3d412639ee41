"""Debt-tracking rules for an insurance policy.

A policy's ``paid_amount`` is always the sum of its payments and its
``remaining_debt`` is always ``insurance_amount - paid_amount``. Services never
assign those two fields by hand: they change the payment list and call
:func:`recompute`, then :func:`check_invariant` before committing.

The functions work on any object exposing ``insurance_amount``,
``paid_amount``, ``remaining_debt`` and ``payments`` (items with ``amount``),
so they can be exercised without a database.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone

from agency.errors import (
    AmountExceedsDebtError,
    InvalidAmountError,
    InvalidPaymentMethodError,
    LedgerIntegrityError,
    PolicyFullyPaidError,
)

PAYMENT_METHODS = ("cash", "card", "cheque", "bank_transfer")
CHEQUE_METHOD = "cheque"

POLICY_ACTIVE = "active"
POLICY_CANCELLED = "cancelled"

AGENT_FLOW_NONE = "none"
AGENT_FLOW_TO_AGENT = "to_agent"
AGENT_FLOW_FROM_AGENT = "from_agent"
AGENT_FLOWS = (AGENT_FLOW_NONE, AGENT_FLOW_TO_AGENT, AGENT_FLOW_FROM_AGENT)


def recompute(policy):
    """Derive paid/remaining figures from the payment list and return the policy."""
    policy.paid_amount = sum(payment.amount for payment in policy.payments)
    policy.remaining_debt = policy.insurance_amount - policy.paid_amount
    return policy


def check_invariant(policy) -> None:
    """Raise LedgerIntegrityError if the policy's figures do not add up."""
    paid = sum(payment.amount for payment in policy.payments)
    if policy.paid_amount != paid:
        raise LedgerIntegrityError(
            f"Paid amount {policy.paid_amount} does not match payments total {paid}"
        )
    if policy.remaining_debt != policy.insurance_amount - policy.paid_amount:
        raise LedgerIntegrityError(
            f"Remaining debt {policy.remaining_debt} does not match "
            f"{policy.insurance_amount} - {policy.paid_amount}"
        )
    if policy.paid_amount < 0 or policy.remaining_debt < 0:
        raise LedgerIntegrityError(
            f"Paid amount {policy.paid_amount} must be between 0 and {policy.insurance_amount}"
        )


def validate_amount(amount: int, label: str = "Payment amount") -> None:
    if amount is None or amount <= 0:
        raise InvalidAmountError(f"{label} must be greater than 0")


def validate_method(method: str) -> None:
    if method not in PAYMENT_METHODS:
        raise InvalidPaymentMethodError(
            f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}"
        )


def ensure_payment_fits(remaining_debt: int, amount: int) -> None:
    """Reject a payment that the remaining debt cannot absorb.

    A fully paid policy raises PolicyFullyPaidError, which is itself an
    AmountExceedsDebtError: any positive amount exceeds a debt of zero.
    """
    if remaining_debt <= 0:
        raise PolicyFullyPaidError("Policy is already fully paid")
    if amount > remaining_debt:
        raise AmountExceedsDebtError(
            f"Payment amount {amount} exceeds remaining debt {remaining_debt}"
        )


def commission_entry_type(agent_flow: str) -> str | None:
    """Map a policy's agent flow to the commission entry it produces.

    - from_agent: the company owes the agent -> "credit"
    - to_agent: the agent owes the company -> "debit"
    - none: no entry
    """
    if agent_flow == AGENT_FLOW_FROM_AGENT:
        return "credit"
    if agent_flow == AGENT_FLOW_TO_AGENT:
        return "debit"
    return None


def _epoch_millis(now: datetime | None) -> int:
    now = now or datetime.now(timezone.utc)
    return int(now.timestamp() * 1000)


def generate_receipt_number(now: datetime | None = None, rng=random) -> str:
    return f"REC-{_epoch_millis(now)}-{rng.randint(0, 999):03d}"


def generate_expense_receipt_number(now: datetime | None = None) -> str:
    return f"EXP-{_epoch_millis(now)}"
