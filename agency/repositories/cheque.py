from datetime import date

from sqlalchemy.orm import Session

from agency.db.models.cheque import Cheque as ChequeModel


def get_cheque_by_id(db: Session, cheque_id: int) -> ChequeModel | None:
    """Get a cheque by ID."""
    return db.query(ChequeModel).filter(ChequeModel.id == cheque_id).first()


def get_cheques_by_policy_id(db: Session, policy_id: int) -> list[ChequeModel]:
    return (
        db.query(ChequeModel)
        .filter(ChequeModel.policy_id == policy_id)
        .order_by(ChequeModel.id)
        .all()
    )


def get_all_cheques(
    db: Session,
    status: str | None = None,
    customer_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[ChequeModel]:
    """
    Get all cheques, newest cheque date first.

    Optional filters: status, customer and an inclusive cheque date range.
    """
    query = db.query(ChequeModel)

    if start_date is not None:
        query = query.filter(ChequeModel.cheque_date >= start_date)

    if end_date is not None:
        query = query.filter(ChequeModel.cheque_date <= end_date)

    if status is not None:
        query = query.filter(ChequeModel.status == status)

    if customer_id is not None:
        query = query.filter(ChequeModel.customer_id == customer_id)

    return query.order_by(ChequeModel.cheque_date.desc(), ChequeModel.id.desc()).all()


def update_cheque_status(
    db: Session, cheque_id: int, current_status: str, **values
) -> int:
    """
    Stage a status change, applied only if the cheque still has ``current_status``.

    Returns the number of rows changed. The caller commits.
    """
    return (
        db.query(ChequeModel)
        .filter(ChequeModel.id == cheque_id, ChequeModel.status == current_status)
        .update(values, synchronize_session=False)
    )


def add_cheque(db: Session, cheque: ChequeModel) -> ChequeModel:
    """Stage a cheque in the current transaction so its id is available. The caller commits."""
    db.add(cheque)
    db.flush()
    return cheque


def delete_cheque(db: Session, cheque: ChequeModel) -> None:
    """Stage a cheque deletion in the current transaction. The caller commits."""
    db.delete(cheque)
    db.flush()
