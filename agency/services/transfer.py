import logging

from sqlalchemy.orm import Session

import agency.repositories.cheque as cheque_repo
import agency.repositories.customer as customer_repo
import agency.repositories.policy as policy_repo
from agency.core.locking import retry_on_conflict
from agency.db.models.policy import Policy as PolicyModel
from agency.db.transaction import atomic
from agency.domain.policy_ledger import check_invariant, recompute, validate_method
from agency.errors import DomainValidationError, InvalidAmountError, NotFoundError
from agency.services.aggregate import locked_customer
from agency.services.collaborators import (
    publish_notification,
    record_expense,
    record_revenue,
    write_audit,
)

logger = logging.getLogger(__name__)

# Copied as-is from the old policy row to the new one
_CARRIED_FIELDS = (
    "company_id",
    "insurance_type",
    "is_under_24",
    "start_date",
    "end_date",
    "agent_id",
    "agent_flow",
    "agent_amount",
    "insurance_amount",
    "status",
    "refund_amount",
    "cancelled_at",
)


@retry_on_conflict
def transfer_policy(
    db: Session,
    policy_id: int,
    from_vehicle_id: int,
    to_vehicle_id: int,
    customer_fee: int = 0,
    company_fee: int = 0,
    customer_payment_method: str = "cash",
    company_payment_method: str = "cash",
    company_paid_by: str | None = None,
    description: str | None = None,
) -> PolicyModel:
    """
    Move a policy from one of a customer's vehicles to another.

    - Both vehicles must exist and belong to the same customer
    - The policy must be on the source vehicle
    - A new policy row is created on the destination with the same figures
      and ``transferred_from_id`` pointing at the old one; payments move to
      it, linked cheques are repointed, and the old row is deleted
    - After commit: revenue for the customer fee, expense for the company fee
    """
    if from_vehicle_id == to_vehicle_id:
        raise DomainValidationError("Source and destination vehicles must differ")
    if customer_fee < 0 or company_fee < 0:
        raise InvalidAmountError("Transfer fees cannot be negative")
    validate_method(customer_payment_method)
    validate_method(company_payment_method)

    from_vehicle = customer_repo.get_vehicle_by_id(db, from_vehicle_id)
    if not from_vehicle:
        raise NotFoundError(f"Vehicle with id {from_vehicle_id} not found")
    to_vehicle = customer_repo.get_vehicle_by_id(db, to_vehicle_id)
    if not to_vehicle or to_vehicle.customer_id != from_vehicle.customer_id:
        raise NotFoundError(f"Vehicle with id {to_vehicle_id} not found for this customer")

    with locked_customer(db, from_vehicle.customer_id) as customer:
        old_policy = policy_repo.get_policy_by_id(db, policy_id)
        if not old_policy or old_policy.vehicle_id != from_vehicle_id:
            raise NotFoundError("Policy not found on the source vehicle")

        with atomic(db):
            new_policy = PolicyModel(
                vehicle_id=to_vehicle_id,
                transferred_from_id=old_policy.id,
                **{field: getattr(old_policy, field) for field in _CARRIED_FIELDS},
            )
            policy_repo.add_policy(db, new_policy)

            for payment in list(old_policy.payments):
                payment.policy = new_policy
            for cheque in cheque_repo.get_cheques_by_policy_id(db, old_policy.id):
                cheque.policy_id = new_policy.id
                cheque.vehicle_id = to_vehicle_id
            db.flush()

            policy_repo.delete_policy(db, old_policy)
            recompute(new_policy)
            check_invariant(new_policy)
            customer.touch()

        customer_name = customer.full_name
        from_plate = from_vehicle.plate_number
        to_plate = to_vehicle.plate_number

    logger.info(
        f"Transferred policy {policy_id} from vehicle {from_vehicle_id} "
        f"to {to_vehicle_id} as policy {new_policy.id}"
    )

    if customer_fee > 0:
        record_revenue(
            db,
            title=f"Policy transfer fee {from_plate} -> {to_plate}",
            amount=customer_fee,
            received_from=customer_name,
            payment_method=customer_payment_method,
            description=description,
            from_vehicle_plate=from_plate,
            to_vehicle_plate=to_plate,
        )
    if company_fee > 0:
        record_expense(
            db,
            title=f"Policy transfer fee to {new_policy.company.name}",
            amount=company_fee,
            paid_by=company_paid_by or "Agency",
            payment_method=company_payment_method,
            description=description,
        )
    write_audit(
        "transfer",
        "policy",
        new_policy.id,
        old_value={"policy_id": policy_id, "vehicle_id": from_vehicle_id},
        new_value={"policy_id": new_policy.id, "vehicle_id": to_vehicle_id},
    )
    publish_notification(
        f"Policy {policy_id} of {customer_name} moved from {from_plate} to {to_plate}"
    )
    return new_policy
