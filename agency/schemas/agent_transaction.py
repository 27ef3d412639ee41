from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class AgentTransaction(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    agent_id: int
    transaction_type: str
    amount: int
    description: str
    policy_id: int | None = None
    customer_id: int | None = None
    vehicle_id: int | None = None
    insurance_type: str | None = None
    company_name: str | None = None
    insurance_total_amount: int | None = None
    status: str
    transaction_date: datetime
    settled_date: date | None = None
    notes: str | None = None
    reverses_transaction_id: int | None = None


class AgentTransactionStatusUpdate(BaseModel):
    status: str = Field(..., description="settled or cancelled")
    settled_date: date | None = None


class AgentTransactionReverse(BaseModel):
    notes: str | None = Field(None, max_length=1000)
