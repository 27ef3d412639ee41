from sqlalchemy.orm import Session

from agency.db.models.agent import Agent as AgentModel
from agency.db.models.agent import AgentTransaction as AgentTransactionModel


def get_agent_by_id(db: Session, agent_id: int) -> AgentModel | None:
    """Get an agent by ID."""
    return db.query(AgentModel).filter(AgentModel.id == agent_id).first()


def create_agent(db: Session, name: str, phone_number: str | None = None) -> AgentModel:
    """Create a new agent. Pure data access - no business logic."""
    db_agent = AgentModel(name=name, phone_number=phone_number)
    db.add(db_agent)
    db.commit()
    db.refresh(db_agent)
    return db_agent


def get_agent_transaction_by_id(
    db: Session, transaction_id: int
) -> AgentTransactionModel | None:
    return (
        db.query(AgentTransactionModel)
        .filter(AgentTransactionModel.id == transaction_id)
        .first()
    )


def get_reversal_of(db: Session, transaction_id: int) -> AgentTransactionModel | None:
    """Get the entry that reverses the given transaction, if any."""
    return (
        db.query(AgentTransactionModel)
        .filter(AgentTransactionModel.reverses_transaction_id == transaction_id)
        .first()
    )


def get_agent_transactions(
    db: Session,
    agent_id: int,
    status: str | None = None,
) -> list[AgentTransactionModel]:
    """Get an agent's transactions, newest first, optionally filtered by status."""
    query = db.query(AgentTransactionModel).filter(
        AgentTransactionModel.agent_id == agent_id
    )
    if status is not None:
        query = query.filter(AgentTransactionModel.status == status)
    return query.order_by(AgentTransactionModel.id.desc()).all()


def get_agent_transactions_by_policy_id(
    db: Session, policy_id: int
) -> list[AgentTransactionModel]:
    return (
        db.query(AgentTransactionModel)
        .filter(AgentTransactionModel.policy_id == policy_id)
        .order_by(AgentTransactionModel.id)
        .all()
    )


def create_agent_transaction(db: Session, **fields) -> AgentTransactionModel:
    """Insert a new ledger entry. Pure data access - no business logic."""
    db_transaction = AgentTransactionModel(**fields)
    db.add(db_transaction)
    db.commit()
    db.refresh(db_transaction)
    return db_transaction


def update_agent_transaction_status(
    db: Session,
    transaction_id: int,
    current_status: str,
    status: str,
    settled_date=None,
) -> int:
    """
    Update the only mutable fields of a ledger entry, if it still has ``current_status``.

    Returns the number of rows changed (0 when another writer got there first).
    """
    values = {AgentTransactionModel.status: status}
    if settled_date is not None:
        values[AgentTransactionModel.settled_date] = settled_date
    changed = (
        db.query(AgentTransactionModel)
        .filter(
            AgentTransactionModel.id == transaction_id,
            AgentTransactionModel.status == current_status,
        )
        .update(values, synchronize_session=False)
    )
    db.commit()
    return changed
