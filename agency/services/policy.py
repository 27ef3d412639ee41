import logging
from datetime import date

from sqlalchemy.orm import Session

import agency.repositories.agent as agent_repo
import agency.repositories.cheque as cheque_repo
import agency.repositories.company as company_repo
import agency.repositories.customer as customer_repo
import agency.repositories.policy as policy_repo
from agency.core.config import settings
from agency.core.locking import retry_on_conflict
from agency.db.models.cheque import Cheque as ChequeModel
from agency.db.models.policy import Payment as PaymentModel
from agency.db.models.policy import Policy as PolicyModel
from agency.db.transaction import atomic
from agency.domain.coverage import CoveragePeriod
from agency.domain.policy_ledger import (
    AGENT_FLOW_NONE,
    AGENT_FLOWS,
    CHEQUE_METHOD,
    POLICY_ACTIVE,
    check_invariant,
    ensure_payment_fits,
    generate_receipt_number,
    recompute,
    validate_amount,
    validate_method,
)
from agency.domain.status_transitions import CHEQUE_STATUS
from agency.errors import (
    AmountExceedsDebtError,
    CompanyNotFoundError,
    DomainValidationError,
    NotFoundError,
    TypeNotOfferedError,
)
from agency.services.aggregate import locked_customer
from agency.services.collaborators import (
    publish_notification,
    record_revenue,
    write_audit,
)
from agency.services.commission import record_commission_for_policy

logger = logging.getLogger(__name__)


def _validate_payment_data(data: dict) -> None:
    """Check one payment request before anything is written."""
    validate_method(data.get("method"))
    validate_amount(data.get("amount"))
    if data["method"] != CHEQUE_METHOD:
        return
    if not data.get("cheque_number") or not data.get("cheque_date"):
        raise DomainValidationError(
            "Cheque payments require cheque_number and cheque_date"
        )
    cheque_status = data.get("cheque_status")
    if cheque_status is not None and cheque_status not in CHEQUE_STATUS.statuses:
        raise DomainValidationError(f"Unknown cheque status '{cheque_status}'")


def _new_payment(
    db: Session, policy: PolicyModel, customer_id: int, data: dict
) -> PaymentModel:
    """Build a payment for a policy, creating its cheque first when paid by cheque."""
    cheque_id = None
    if data["method"] == CHEQUE_METHOD:
        cheque_status = data.get("cheque_status") or "pending"
        cheque = ChequeModel(
            cheque_number=data["cheque_number"],
            customer_id=customer_id,
            policy_id=policy.id,
            vehicle_id=policy.vehicle_id,
            cheque_date=data["cheque_date"],
            amount=data["amount"],
            status=cheque_status,
            notes=data.get("notes") or "",
        )
        if cheque_status == "cleared":
            cheque.cleared_date = date.today()
        elif cheque_status == "returned":
            cheque.returned_date = date.today()
        cheque_id = cheque_repo.add_cheque(db, cheque).id

    return PaymentModel(
        amount=data["amount"],
        method=data["method"],
        payment_date=data.get("payment_date") or date.today(),
        receipt_number=data.get("receipt_number") or generate_receipt_number(),
        notes=data.get("notes"),
        cheque_id=cheque_id,
    )


def _record_payment_revenue(
    db: Session,
    payment: PaymentModel,
    customer_name: str,
    company_name: str,
    insurance_type: str,
    plate_number: str,
) -> None:
    record_revenue(
        db,
        title=f"Insurance payment - {company_name}",
        amount=payment.amount,
        received_from=customer_name,
        payment_method=payment.method,
        receipt_number=payment.receipt_number,
        description=f"{insurance_type} insurance payment for vehicle {plate_number}",
        revenue_date=payment.payment_date,
    )


@retry_on_conflict
def create_policy(
    db: Session,
    vehicle_id: int,
    company_id: int,
    insurance_type: str,
    insurance_amount: int,
    payments: list[dict] | None = None,
    is_under_24: bool = False,
    start_date: date | None = None,
    end_date: date | None = None,
    agent_id: int | None = None,
    agent_flow: str = AGENT_FLOW_NONE,
    agent_amount: int = 0,
) -> PolicyModel:
    """
    Create a policy on a vehicle together with its initial payments.

    - Validates vehicle and company exist and the company offers the type
    - Validates the agent/commission fields
    - Validates every initial payment and that they do not exceed the amount
    - Resolves the coverage period (explicit dates, else continues the
      vehicle's previous policy, else starts today)
    - Creates cheques for cheque payments, then the policy and payments,
      in one transaction
    - After commit: one revenue per payment, commission entry, audit, notify
    """
    validate_amount(insurance_amount, "Insurance amount")

    vehicle = customer_repo.get_vehicle_by_id(db, vehicle_id)
    if not vehicle:
        raise NotFoundError(f"Vehicle with id {vehicle_id} not found")

    company = company_repo.get_company_by_id(db, company_id)
    if not company:
        raise CompanyNotFoundError(f"Insurance company with id {company_id} not found")

    if not any(t.name == insurance_type for t in company.insurance_types):
        raise TypeNotOfferedError(
            f"Insurance type '{insurance_type}' is not offered by {company.name}"
        )

    # Commission fields
    if agent_flow not in AGENT_FLOWS:
        raise DomainValidationError(f"Agent flow must be one of: {', '.join(AGENT_FLOWS)}")
    if agent_flow != AGENT_FLOW_NONE:
        if agent_id is None:
            raise DomainValidationError("agent_id is required when agent_flow is set")
        validate_amount(agent_amount, "Agent amount")
    if agent_id is not None and not agent_repo.get_agent_by_id(db, agent_id):
        raise NotFoundError(f"Agent with id {agent_id} not found")

    payments = payments or []
    for data in payments:
        _validate_payment_data(data)
    total = sum(data["amount"] for data in payments)
    if total > insurance_amount:
        raise AmountExceedsDebtError(
            f"Total payments ({total}) exceed the insurance amount ({insurance_amount})"
        )

    with locked_customer(db, vehicle.customer_id) as customer:
        previous = policy_repo.get_latest_policy_for_vehicle(db, vehicle_id)
        period = CoveragePeriod.resolve(
            today=date.today(),
            term_years=settings.policy_term_years,
            previous_end=previous.end_date if previous else None,
            start_date=start_date,
            end_date=end_date,
        )

        with atomic(db):
            policy = policy_repo.add_policy(
                db,
                PolicyModel(
                    vehicle_id=vehicle_id,
                    company_id=company_id,
                    insurance_type=insurance_type,
                    is_under_24=is_under_24,
                    start_date=period.start_date,
                    end_date=period.end_date,
                    agent_id=agent_id,
                    agent_flow=agent_flow,
                    agent_amount=agent_amount if agent_flow != AGENT_FLOW_NONE else 0,
                    insurance_amount=insurance_amount,
                    status=POLICY_ACTIVE,
                ),
            )
            for data in payments:
                policy.payments.append(_new_payment(db, policy, customer.id, data))
            recompute(policy)
            check_invariant(policy)
            customer.touch()

        customer_name = customer.full_name
        plate_number = vehicle.plate_number

    logger.info(
        f"Created policy {policy.id} on vehicle {vehicle_id}: "
        f"amount={policy.insurance_amount} paid={policy.paid_amount}"
    )

    for payment in policy.payments:
        _record_payment_revenue(
            db, payment, customer_name, company.name, insurance_type, plate_number
        )
    record_commission_for_policy(db, policy)
    write_audit(
        "create",
        "policy",
        policy.id,
        new_value={
            "vehicle_id": vehicle_id,
            "company": company.name,
            "insurance_type": insurance_type,
            "insurance_amount": insurance_amount,
            "paid_amount": policy.paid_amount,
        },
    )
    publish_notification(
        f"New {insurance_type} policy for {customer_name} ({plate_number}) "
        f"with {company.name}: {insurance_amount}"
    )
    return policy


@retry_on_conflict
def add_payment(
    db: Session,
    policy_id: int,
    amount: int,
    method: str,
    payment_date: date | None = None,
    receipt_number: str | None = None,
    notes: str | None = None,
    cheque_number: str | None = None,
    cheque_date: date | None = None,
    cheque_status: str | None = None,
) -> PaymentModel:
    """
    Record a payment against a policy.

    - Rejects unknown methods and non-positive amounts
    - Rejects payments on a fully paid policy or above the remaining debt
    - Creates the cheque first for cheque payments
    - After commit: revenue, audit, notify
    """
    data = {
        "amount": amount,
        "method": method,
        "payment_date": payment_date,
        "receipt_number": receipt_number,
        "notes": notes,
        "cheque_number": cheque_number,
        "cheque_date": cheque_date,
        "cheque_status": cheque_status,
    }
    _validate_payment_data(data)

    customer_id = policy_repo.get_customer_id_for_policy(db, policy_id)
    if customer_id is None:
        raise NotFoundError("Policy not found")

    with locked_customer(db, customer_id) as customer:
        policy = policy_repo.get_policy_by_id(db, policy_id)
        # A transfer may have replaced the policy while we waited for the lock
        if not policy:
            raise NotFoundError("Policy not found")
        previous_paid = policy.paid_amount
        ensure_payment_fits(policy.remaining_debt, amount)

        with atomic(db):
            payment = _new_payment(db, policy, customer.id, data)
            policy.payments.append(payment)
            recompute(policy)
            check_invariant(policy)
            customer.touch()

        customer_name = customer.full_name

    logger.info(
        f"Added {method} payment of {amount} to policy {policy_id}, "
        f"remaining debt {policy.remaining_debt}"
    )

    _record_payment_revenue(
        db,
        payment,
        customer_name,
        policy.company.name,
        policy.insurance_type,
        policy.vehicle.plate_number,
    )
    write_audit(
        "add_payment",
        "policy",
        policy_id,
        old_value={"paid_amount": previous_paid},
        new_value={"paid_amount": policy.paid_amount, "payment_id": payment.id},
    )
    publish_notification(
        f"Payment of {amount} ({method}) received from {customer_name} "
        f"for policy {policy_id}"
    )
    return payment


def add_check_to_policy(
    db: Session,
    policy_id: int,
    check_number: str,
    check_due_date: date,
    check_amount: int,
    is_returned: bool = False,
) -> PaymentModel:
    """Attach a cheque to a policy. Same rules as any cheque payment."""
    return add_payment(
        db,
        policy_id,
        amount=check_amount,
        method=CHEQUE_METHOD,
        cheque_number=check_number,
        cheque_date=check_due_date,
        cheque_status="returned" if is_returned else "pending",
    )


@retry_on_conflict
def delete_check_from_policy(db: Session, policy_id: int, payment_id: int) -> PolicyModel:
    """
    Remove a cheque payment from a policy and delete its cheque.

    The policy's paid amount drops and its remaining debt grows by the
    cheque amount.
    """
    customer_id = policy_repo.get_customer_id_for_policy(db, policy_id)
    if customer_id is None:
        raise NotFoundError("Policy not found")

    with locked_customer(db, customer_id) as customer:
        policy = policy_repo.get_policy_by_id(db, policy_id)
        if not policy:
            raise NotFoundError("Policy not found")

        payment = next((p for p in policy.payments if p.id == payment_id), None)
        if not payment:
            raise NotFoundError("Check not found")
        if payment.method != CHEQUE_METHOD:
            raise DomainValidationError("Payment is not a cheque payment")

        amount = payment.amount
        cheque = payment.cheque
        with atomic(db):
            policy.payments.remove(payment)
            # Payment row goes before the cheque it references
            db.flush()
            if cheque:
                cheque_repo.delete_cheque(db, cheque)
            recompute(policy)
            check_invariant(policy)
            customer.touch()

    logger.info(f"Removed cheque payment {payment_id} ({amount}) from policy {policy_id}")

    write_audit(
        "delete_check",
        "policy",
        policy_id,
        old_value={"payment_id": payment_id, "amount": amount},
        new_value={"paid_amount": policy.paid_amount},
    )
    publish_notification(f"Cheque of {amount} removed from policy {policy_id}")
    return policy


@retry_on_conflict
def delete_policy(db: Session, vehicle_id: int, policy_id: int) -> None:
    """
    Remove a policy from a vehicle.

    - Its payments and the cheques linked to it are deleted with it
    - Commission entries are kept; they still name the old policy id
    """
    customer_id = policy_repo.get_customer_id_for_policy(db, policy_id)
    if customer_id is None:
        raise NotFoundError("Policy not found")

    with locked_customer(db, customer_id) as customer:
        policy = policy_repo.get_policy_by_id(db, policy_id)
        if not policy or policy.vehicle_id != vehicle_id:
            raise NotFoundError(f"Policy {policy_id} not found on vehicle {vehicle_id}")

        old_value = {
            "vehicle_id": vehicle_id,
            "insurance_type": policy.insurance_type,
            "insurance_amount": policy.insurance_amount,
            "paid_amount": policy.paid_amount,
        }
        cheques = cheque_repo.get_cheques_by_policy_id(db, policy_id)
        for payment in policy.payments:
            if payment.cheque and payment.cheque not in cheques:
                cheques.append(payment.cheque)

        with atomic(db):
            policy.payments.clear()
            # Payment rows go before the cheques they reference
            db.flush()
            for cheque in cheques:
                cheque_repo.delete_cheque(db, cheque)
            policy_repo.delete_policy(db, policy)
            customer.touch()

    logger.info(
        f"Deleted policy {policy_id} from vehicle {vehicle_id} with {len(cheques)} cheque(s)"
    )
    write_audit("delete", "policy", policy_id, old_value=old_value)
    publish_notification(f"The insurance of vehicle {vehicle_id} has been deleted")


def get_policy(db: Session, policy_id: int) -> PolicyModel:
    policy = policy_repo.get_policy_by_id(db, policy_id)
    if not policy:
        raise NotFoundError("Policy not found")
    return policy


def list_payments(db: Session, policy_id: int) -> list[PaymentModel]:
    """Payments of a policy in the order they were recorded."""
    get_policy(db, policy_id)
    return policy_repo.get_payments_by_policy_id(db, policy_id)


def list_vehicle_policies(db: Session, vehicle_id: int) -> list[PolicyModel]:
    if not customer_repo.get_vehicle_by_id(db, vehicle_id):
        raise NotFoundError(f"Vehicle with id {vehicle_id} not found")
    return policy_repo.get_policies_by_vehicle_id(db, vehicle_id)