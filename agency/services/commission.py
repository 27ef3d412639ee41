import logging
from datetime import date

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

import agency.repositories.agent as agent_repo
from agency.db.models.agent import AgentTransaction as AgentTransactionModel
from agency.db.models.policy import Policy as PolicyModel
from agency.domain.policy_ledger import commission_entry_type
from agency.domain.status_transitions import AGENT_TRANSACTION_STATUS
from agency.errors import (
    ConflictError,
    DomainValidationError,
    InvalidTransitionError,
    NotFoundError,
)
from agency.services.collaborators import write_audit

logger = logging.getLogger(__name__)


def record_commission_for_policy(
    db: Session, policy: PolicyModel
) -> AgentTransactionModel | None:
    """
    Append the commission entry implied by a policy's agent flow.

    Runs after the policy is committed. A failure is logged and the policy
    stays as it is.
    """
    transaction_type = commission_entry_type(policy.agent_flow)
    if transaction_type is None:
        return None

    vehicle = policy.vehicle
    company_name = policy.company.name
    owed = "Company owes agent" if transaction_type == "credit" else "Agent owes company"
    try:
        transaction = agent_repo.create_agent_transaction(
            db,
            agent_id=policy.agent_id,
            transaction_type=transaction_type,
            amount=policy.agent_amount,
            description=(
                f"{owed} for {policy.insurance_type} insurance ({company_name}) "
                f"on vehicle {vehicle.plate_number}"
            ),
            policy_id=policy.id,
            customer_id=vehicle.customer_id,
            vehicle_id=vehicle.id,
            insurance_type=policy.insurance_type,
            company_name=company_name,
            insurance_total_amount=policy.insurance_amount,
            status="pending",
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to record commission for policy {policy.id}")
        return None

    logger.info(
        f"Recorded {transaction_type} of {transaction.amount} for agent "
        f"{transaction.agent_id} on policy {policy.id}"
    )
    return transaction


def _get_transaction(db: Session, transaction_id: int) -> AgentTransactionModel:
    transaction = agent_repo.get_agent_transaction_by_id(db, transaction_id)
    if not transaction:
        raise NotFoundError("Agent transaction not found")
    return transaction


def list_agent_transactions(
    db: Session, agent_id: int, status: str | None = None
) -> list[AgentTransactionModel]:
    """An agent's ledger entries, newest first."""
    if not agent_repo.get_agent_by_id(db, agent_id):
        raise NotFoundError(f"Agent with id {agent_id} not found")
    if status is not None and status not in AGENT_TRANSACTION_STATUS.statuses:
        raise DomainValidationError(f"Unknown agent transaction status '{status}'")
    return agent_repo.get_agent_transactions(db, agent_id, status=status)


def update_agent_transaction_status(
    db: Session,
    transaction_id: int,
    status: str,
    settled_date: date | None = None,
) -> AgentTransactionModel:
    """
    Settle or cancel a pending entry.

    Only ``pending -> settled`` and ``pending -> cancelled`` are allowed.
    Settling stamps the settled date (today unless given).
    """
    transaction = _get_transaction(db, transaction_id)
    previous_status = transaction.status
    AGENT_TRANSACTION_STATUS.ensure_transition(previous_status, status)

    if status == "settled":
        settled_date = settled_date or date.today()
    else:
        settled_date = None

    changed = agent_repo.update_agent_transaction_status(
        db, transaction_id, previous_status, status, settled_date=settled_date
    )
    if not changed:
        raise InvalidTransitionError(
            f"Agent transaction {transaction_id} is no longer '{previous_status}'"
        )
    db.refresh(transaction)
    logger.info(f"Agent transaction {transaction_id}: {previous_status} -> {status}")
    write_audit(
        "update_status",
        "agent_transaction",
        transaction_id,
        old_value={"status": previous_status},
        new_value={"status": status},
    )
    return transaction


def reverse_agent_transaction(
    db: Session, transaction_id: int, notes: str | None = None
) -> AgentTransactionModel:
    """
    Append an entry that cancels out an existing one.

    The reversal has the opposite type, the same amount and references, and
    points back at the entry it reverses. Entries are never edited or
    deleted, so this is the only way to undo one.
    """
    transaction = _get_transaction(db, transaction_id)

    if transaction.reverses_transaction_id is not None:
        raise ConflictError("A reversing entry cannot itself be reversed")
    if transaction.status == "cancelled":
        raise ConflictError("A cancelled entry has nothing to reverse")
    if agent_repo.get_reversal_of(db, transaction_id):
        raise ConflictError(f"Agent transaction {transaction_id} is already reversed")

    try:
        reversal = agent_repo.create_agent_transaction(
            db,
            agent_id=transaction.agent_id,
            transaction_type="debit" if transaction.transaction_type == "credit" else "credit",
            amount=transaction.amount,
            description=f"Reversal of #{transaction.id}: {transaction.description}",
            policy_id=transaction.policy_id,
            customer_id=transaction.customer_id,
            vehicle_id=transaction.vehicle_id,
            insurance_type=transaction.insurance_type,
            company_name=transaction.company_name,
            insurance_total_amount=transaction.insurance_total_amount,
            status="pending",
            notes=notes,
            reverses_transaction_id=transaction.id,
        )
    except IntegrityError:
        # Another request reversed the same entry between the check and the insert
        db.rollback()
        raise ConflictError(f"Agent transaction {transaction_id} is already reversed")

    logger.info(f"Reversed agent transaction {transaction_id} with {reversal.id}")
    write_audit(
        "reverse",
        "agent_transaction",
        transaction_id,
        new_value={"reversal_id": reversal.id},
    )
    return reversal
