from sqlalchemy.orm import Session, selectinload

from agency.db.models.customer import Vehicle as VehicleModel
from agency.db.models.policy import Payment as PaymentModel
from agency.db.models.policy import Policy as PolicyModel


def get_policy_by_id(db: Session, policy_id: int) -> PolicyModel | None:
    """Get a policy by ID with its payments loaded."""
    return (
        db.query(PolicyModel)
        .options(selectinload(PolicyModel.payments))
        .filter(PolicyModel.id == policy_id)
        .first()
    )


def get_customer_id_for_policy(db: Session, policy_id: int) -> int | None:
    """Resolve the owning customer of a policy without loading the aggregate."""
    row = (
        db.query(VehicleModel.customer_id)
        .join(PolicyModel, PolicyModel.vehicle_id == VehicleModel.id)
        .filter(PolicyModel.id == policy_id)
        .first()
    )
    return row[0] if row else None


def get_latest_policy_for_vehicle(db: Session, vehicle_id: int) -> PolicyModel | None:
    """Get the most recently created policy of a vehicle."""
    return (
        db.query(PolicyModel)
        .filter(PolicyModel.vehicle_id == vehicle_id)
        .order_by(PolicyModel.id.desc())
        .first()
    )


def get_policies_by_vehicle_id(db: Session, vehicle_id: int) -> list[PolicyModel]:
    return (
        db.query(PolicyModel)
        .filter(PolicyModel.vehicle_id == vehicle_id)
        .order_by(PolicyModel.id)
        .all()
    )


def add_policy(db: Session, policy: PolicyModel) -> PolicyModel:
    """Stage a policy in the current transaction. The caller commits."""
    db.add(policy)
    db.flush()
    return policy


def delete_policy(db: Session, policy: PolicyModel) -> None:
    """Stage a policy deletion in the current transaction. The caller commits."""
    db.delete(policy)
    db.flush()


def get_payments_by_policy_id(db: Session, policy_id: int) -> list[PaymentModel]:
    return (
        db.query(PaymentModel)
        .filter(PaymentModel.policy_id == policy_id)
        .order_by(PaymentModel.id)
        .all()
    )


def get_payments_by_cheque_id(db: Session, cheque_id: int) -> list[PaymentModel]:
    return (
        db.query(PaymentModel)
        .filter(PaymentModel.cheque_id == cheque_id)
        .order_by(PaymentModel.id)
        .all()
    )
