from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from agency.api.deps import get_db
from agency.services.cancellation import cancel_policy
from agency.services.policy import (
    add_check_to_policy,
    add_payment,
    create_policy,
    delete_check_from_policy,
    delete_policy,
    get_policy,
    list_payments,
    list_vehicle_policies,
)
from agency.services.transfer import transfer_policy
from agency.schemas.policy import (
    CheckCreate,
    Payment,
    PaymentCreate,
    Policy,
    PolicyCancel,
    PolicyCreate,
    PolicyTransfer,
)

router = APIRouter(tags=["policies"])


@router.post(
    "/vehicles/{vehicle_id}/policies",
    response_model=Policy,
    status_code=status.HTTP_201_CREATED,
)
def create_new_policy(
    vehicle_id: int,
    policy_data: PolicyCreate,
    db: Session = Depends(get_db),
):
    """
    Create a policy on a vehicle, optionally with initial payments.
    """
    policy = create_policy(
        db,
        vehicle_id=vehicle_id,
        company_id=policy_data.company_id,
        insurance_type=policy_data.insurance_type,
        insurance_amount=policy_data.insurance_amount,
        payments=[payment.model_dump() for payment in policy_data.payments],
        is_under_24=policy_data.is_under_24,
        start_date=policy_data.start_date,
        end_date=policy_data.end_date,
        agent_id=policy_data.agent_id,
        agent_flow=policy_data.agent_flow,
        agent_amount=policy_data.agent_amount,
    )
    return Policy.model_validate(policy)


@router.get("/vehicles/{vehicle_id}/policies", response_model=list[Policy])
def get_vehicle_policies(vehicle_id: int, db: Session = Depends(get_db)):
    policies = list_vehicle_policies(db, vehicle_id)
    return [Policy.model_validate(policy) for policy in policies]


@router.delete(
    "/vehicles/{vehicle_id}/policies/{policy_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_vehicle_policy(
    vehicle_id: int,
    policy_id: int,
    db: Session = Depends(get_db),
):
    """
    Remove a policy from a vehicle together with its payments and cheques.
    """
    delete_policy(db, vehicle_id=vehicle_id, policy_id=policy_id)


@router.post("/policies/transfer", response_model=Policy)
def transfer_existing_policy(
    transfer_data: PolicyTransfer,
    db: Session = Depends(get_db),
):
    """
    Move a policy to another vehicle of the same customer.

    The policy gets a new id; ``transferred_from_id`` holds the old one.
    """
    policy = transfer_policy(db, **transfer_data.model_dump())
    return Policy.model_validate(policy)


@router.get("/policies/{policy_id}", response_model=Policy)
def get_policy_by_id(policy_id: int, db: Session = Depends(get_db)):
    return Policy.model_validate(get_policy(db, policy_id))


@router.get("/policies/{policy_id}/payments", response_model=list[Payment])
def get_policy_payments(policy_id: int, db: Session = Depends(get_db)):
    payments = list_payments(db, policy_id)
    return [Payment.model_validate(payment) for payment in payments]


@router.post(
    "/policies/{policy_id}/payments",
    response_model=Payment,
    status_code=status.HTTP_201_CREATED,
)
def add_policy_payment(
    policy_id: int,
    payment_data: PaymentCreate,
    db: Session = Depends(get_db),
):
    payment = add_payment(db, policy_id=policy_id, **payment_data.model_dump())
    return Payment.model_validate(payment)


@router.post(
    "/policies/{policy_id}/checks",
    response_model=Payment,
    status_code=status.HTTP_201_CREATED,
)
def add_policy_check(
    policy_id: int,
    check_data: CheckCreate,
    db: Session = Depends(get_db),
):
    payment = add_check_to_policy(db, policy_id=policy_id, **check_data.model_dump())
    return Payment.model_validate(payment)


@router.delete("/policies/{policy_id}/checks/{payment_id}", response_model=Policy)
def delete_policy_check(
    policy_id: int,
    payment_id: int,
    db: Session = Depends(get_db),
):
    """
    Remove a cheque payment from a policy and delete the cheque.
    """
    policy = delete_check_from_policy(db, policy_id=policy_id, payment_id=payment_id)
    return Policy.model_validate(policy)


@router.post("/policies/{policy_id}/cancel", response_model=Policy)
def cancel_existing_policy(
    policy_id: int,
    cancel_data: PolicyCancel,
    db: Session = Depends(get_db),
):
    policy = cancel_policy(db, policy_id=policy_id, **cancel_data.model_dump())
    return Policy.model_validate(policy)
