from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class Payment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    policy_id: int
    amount: int
    method: str
    payment_date: date
    receipt_number: str
    notes: str | None = None
    cheque_id: int | None = None


class PaymentCreate(BaseModel):
    # Amount and method are checked by the ledger so errors carry their own codes
    amount: int
    method: str = Field(..., description="cash, card, cheque or bank_transfer")
    payment_date: date | None = None
    receipt_number: str | None = Field(None, max_length=50)
    notes: str | None = Field(None, max_length=500)
    cheque_number: str | None = Field(None, max_length=50, description="Required for cheque payments")
    cheque_date: date | None = Field(None, description="Required for cheque payments")
    cheque_status: str | None = Field(None, description="Initial cheque status (default: pending)")


class CheckCreate(BaseModel):
    check_number: str = Field(..., min_length=1, max_length=50)
    check_due_date: date
    check_amount: int
    is_returned: bool = False


class Policy(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    vehicle_id: int
    company_id: int
    insurance_type: str
    is_under_24: bool
    start_date: date
    end_date: date
    agent_id: int | None = None
    agent_flow: str
    agent_amount: int
    insurance_amount: int
    paid_amount: int
    remaining_debt: int
    status: str
    refund_amount: int
    cancelled_at: datetime | None = None
    transferred_from_id: int | None = None
    created_at: datetime
    payments: list[Payment] = []


class PolicyCreate(BaseModel):
    company_id: int
    insurance_type: str = Field(..., min_length=1, max_length=100)
    insurance_amount: int
    is_under_24: bool = False
    start_date: date | None = None
    end_date: date | None = None
    agent_id: int | None = None
    agent_flow: str = Field("none", description="none, to_agent or from_agent")
    agent_amount: int = Field(0, ge=0)
    payments: list[PaymentCreate] = []


class PolicyTransfer(BaseModel):
    policy_id: int
    from_vehicle_id: int
    to_vehicle_id: int
    customer_fee: int = Field(0, description="Fee charged to the customer")
    company_fee: int = Field(0, description="Fee paid to the insurance company")
    customer_payment_method: str = "cash"
    company_payment_method: str = "cash"
    company_paid_by: str | None = None
    description: str | None = Field(None, max_length=500)


class PolicyCancel(BaseModel):
    refund_amount: int = Field(..., description="Amount refunded to the customer (must be >= 0)")
    paid_by: str | None = Field(None, max_length=150)
    payment_method: str = "cash"
    description: str | None = Field(None, max_length=500)
