import logging
from datetime import date

from sqlalchemy.orm import Session

import agency.repositories.cheque as cheque_repo
import agency.repositories.customer as customer_repo
import agency.repositories.policy as policy_repo
from agency.core.locking import retry_on_conflict
from agency.db.models.cheque import Cheque as ChequeModel
from agency.db.transaction import atomic
from agency.domain.policy_ledger import check_invariant, recompute, validate_amount
from agency.domain.status_transitions import CHEQUE_STATUS
from agency.errors import DomainValidationError, InvalidTransitionError, NotFoundError
from agency.services.aggregate import locked_customer
from agency.services.collaborators import publish_notification, write_audit

logger = logging.getLogger(__name__)


def create_cheque(
    db: Session,
    customer_id: int,
    cheque_number: str,
    cheque_date: date,
    amount: int,
    notes: str | None = None,
) -> ChequeModel:
    """Register a standalone cheque from a customer, not tied to any policy."""
    validate_amount(amount, "Cheque amount")

    customer = customer_repo.get_customer_by_id(db, customer_id)
    if not customer:
        raise NotFoundError(f"Customer with id {customer_id} not found")

    with atomic(db):
        cheque = cheque_repo.add_cheque(
            db,
            ChequeModel(
                cheque_number=cheque_number,
                customer_id=customer_id,
                cheque_date=cheque_date,
                amount=amount,
                status="pending",
                notes=notes or "",
            ),
        )

    logger.info(f"Created cheque {cheque.id} ({amount}) for customer {customer_id}")
    write_audit("create", "cheque", cheque.id, new_value={"amount": amount})
    return cheque


def get_cheque(db: Session, cheque_id: int) -> ChequeModel:
    cheque = cheque_repo.get_cheque_by_id(db, cheque_id)
    if not cheque:
        raise NotFoundError("Cheque not found")
    return cheque


def list_cheques(
    db: Session,
    status: str | None = None,
    customer_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[ChequeModel]:
    if status is not None and status not in CHEQUE_STATUS.statuses:
        raise DomainValidationError(f"Unknown cheque status '{status}'")
    if start_date and end_date and end_date < start_date:
        raise DomainValidationError(
            f"End date ({end_date}) cannot precede start date ({start_date})"
        )
    return cheque_repo.get_all_cheques(
        db,
        status=status,
        customer_id=customer_id,
        start_date=start_date,
        end_date=end_date,
    )


@retry_on_conflict
def update_cheque_status(
    db: Session,
    cheque_id: int,
    status: str,
    returned_reason: str | None = None,
    notes: str | None = None,
) -> ChequeModel:
    """
    Move a pending cheque to cleared, returned or cancelled.

    - cleared: stamps cleared_date
    - returned: stamps returned_date and keeps the reason
    - Applies only while the cheque still has the status that was read
    The amount never changes.
    """
    cheque = get_cheque(db, cheque_id)

    # Serialized with cheque deletion through the owning customer
    with locked_customer(db, cheque.customer_id):
        cheque = get_cheque(db, cheque_id)
        previous_status = cheque.status
        CHEQUE_STATUS.ensure_transition(previous_status, status)

        values = {"status": status}
        if status == "cleared":
            values["cleared_date"] = date.today()
        elif status == "returned":
            values["returned_date"] = date.today()
            values["returned_reason"] = returned_reason
        if notes is not None:
            values["notes"] = notes

        with atomic(db):
            changed = cheque_repo.update_cheque_status(
                db, cheque_id, previous_status, **values
            )
            if not changed:
                if not cheque_repo.get_cheque_by_id(db, cheque_id):
                    raise NotFoundError("Cheque not found")
                raise InvalidTransitionError(
                    f"Cheque {cheque_id} is no longer '{previous_status}'"
                )

        db.refresh(cheque)

    logger.info(f"Cheque {cheque_id}: {previous_status} -> {status}")
    write_audit(
        "update_status",
        "cheque",
        cheque_id,
        old_value={"status": previous_status},
        new_value={"status": status},
    )
    if status == "returned":
        publish_notification(
            f"Cheque {cheque.cheque_number} ({cheque.amount}) was returned"
            + (f": {returned_reason}" if returned_reason else "")
        )
    return cheque


@retry_on_conflict
def delete_cheque(db: Session, cheque_id: int) -> None:
    """
    Delete a cheque and every payment made with it.

    Each affected policy is recomputed, so its paid amount drops by the
    cheque amount and its remaining debt grows by the same. Everything
    happens in one transaction.
    """
    cheque = get_cheque(db, cheque_id)

    with locked_customer(db, cheque.customer_id) as customer:
        cheque = get_cheque(db, cheque_id)
        amount = cheque.amount
        payments = policy_repo.get_payments_by_cheque_id(db, cheque_id)

        with atomic(db):
            policies = []
            for payment in payments:
                policy = payment.policy
                policy.payments.remove(payment)
                if policy not in policies:
                    policies.append(policy)
            # Payment rows go before the cheque they reference
            db.flush()
            cheque_repo.delete_cheque(db, cheque)
            for policy in policies:
                recompute(policy)
                check_invariant(policy)
            customer.touch()

        policy_ids = [policy.id for policy in policies]

    logger.info(
        f"Deleted cheque {cheque_id} ({amount}) and {len(payments)} linked payment(s)"
    )
    write_audit(
        "delete",
        "cheque",
        cheque_id,
        old_value={"amount": amount, "policy_ids": policy_ids},
    )
    if policy_ids:
        publish_notification(
            f"Cheque of {amount} deleted; debt restored on policies {policy_ids}"
        )
