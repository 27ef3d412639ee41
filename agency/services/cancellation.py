import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

import agency.repositories.policy as policy_repo
from agency.core.locking import retry_on_conflict
from agency.db.models.policy import Policy as PolicyModel
from agency.db.transaction import atomic
from agency.domain.policy_ledger import (
    POLICY_CANCELLED,
    check_invariant,
    generate_expense_receipt_number,
    validate_method,
)
from agency.errors import AlreadyCancelledError, InvalidAmountError, NotFoundError
from agency.services.aggregate import locked_customer
from agency.services.collaborators import (
    publish_notification,
    record_expense,
    write_audit,
)

logger = logging.getLogger(__name__)


@retry_on_conflict
def cancel_policy(
    db: Session,
    policy_id: int,
    refund_amount: int,
    paid_by: str | None = None,
    payment_method: str = "cash",
    description: str | None = None,
) -> PolicyModel:
    """
    Cancel a policy and book the refund as an expense.

    The refund is not capped at what the customer paid. A policy can only be
    cancelled once; a second attempt fails and books nothing.
    """
    if refund_amount < 0:
        raise InvalidAmountError("Refund amount cannot be negative")
    validate_method(payment_method)

    customer_id = policy_repo.get_customer_id_for_policy(db, policy_id)
    if customer_id is None:
        raise NotFoundError("Policy not found")

    with locked_customer(db, customer_id) as customer:
        policy = policy_repo.get_policy_by_id(db, policy_id)
        if not policy:
            raise NotFoundError("Policy not found")
        if policy.status == POLICY_CANCELLED:
            raise AlreadyCancelledError("Policy is already cancelled")

        with atomic(db):
            policy.status = POLICY_CANCELLED
            policy.refund_amount = refund_amount
            policy.cancelled_at = datetime.now(timezone.utc)
            check_invariant(policy)
            customer.touch()

        customer_name = customer.full_name

    company_name = policy.company.name
    logger.info(f"Cancelled policy {policy_id} with refund {refund_amount}")

    record_expense(
        db,
        title=f"Refund for cancelled {policy.insurance_type} insurance - {company_name}",
        amount=refund_amount,
        paid_by=paid_by or "Agency",
        payment_method=payment_method,
        receipt_number=generate_expense_receipt_number(),
        description=description or f"Refund to {customer_name} for policy {policy_id}",
    )
    write_audit(
        "cancel",
        "policy",
        policy_id,
        old_value={"status": "active"},
        new_value={"status": POLICY_CANCELLED, "refund_amount": refund_amount},
    )
    publish_notification(
        f"Policy {policy_id} of {customer_name} cancelled, refund {refund_amount}"
    )
    return policy
