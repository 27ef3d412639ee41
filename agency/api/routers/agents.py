from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from agency.api.deps import get_db
from agency.services.commission import (
    list_agent_transactions,
    reverse_agent_transaction,
    update_agent_transaction_status,
)
from agency.services.company import create_agent
from agency.schemas.agent_transaction import (
    AgentTransaction,
    AgentTransactionReverse,
    AgentTransactionStatusUpdate,
)
from agency.schemas.company import Agent, AgentCreate

router = APIRouter(tags=["agents"])


@router.post("/agents", response_model=Agent, status_code=status.HTTP_201_CREATED)
def create_new_agent(agent_data: AgentCreate, db: Session = Depends(get_db)):
    agent = create_agent(db, name=agent_data.name, phone_number=agent_data.phone_number)
    return Agent.model_validate(agent)


@router.get("/agents/{agent_id}/transactions", response_model=list[AgentTransaction])
def get_agent_transactions(
    agent_id: int,
    transaction_status: str | None = Query(
        None, alias="status", description="Filter by pending, settled or cancelled"
    ),
    db: Session = Depends(get_db),
):
    """
    Get an agent's commission entries, newest first.
    """
    transactions = list_agent_transactions(db, agent_id, status=transaction_status)
    return [AgentTransaction.model_validate(tx) for tx in transactions]


@router.patch("/agent-transactions/{transaction_id}/status", response_model=AgentTransaction)
def update_agent_transaction(
    transaction_id: int,
    status_data: AgentTransactionStatusUpdate,
    db: Session = Depends(get_db),
):
    """
    Settle or cancel a pending commission entry.
    """
    transaction = update_agent_transaction_status(
        db,
        transaction_id,
        status_data.status,
        settled_date=status_data.settled_date,
    )
    return AgentTransaction.model_validate(transaction)


@router.post(
    "/agent-transactions/{transaction_id}/reverse",
    response_model=AgentTransaction,
    status_code=status.HTTP_201_CREATED,
)
def reverse_agent_transaction_by_id(
    transaction_id: int,
    reverse_data: AgentTransactionReverse,
    db: Session = Depends(get_db),
):
    """
    Append an opposite entry that cancels out an existing one.
    """
    reversal = reverse_agent_transaction(db, transaction_id, notes=reverse_data.notes)
    return AgentTransaction.model_validate(reversal)
