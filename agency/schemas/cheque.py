from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class Cheque(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cheque_number: str
    customer_id: int
    policy_id: int | None = None
    vehicle_id: int | None = None
    cheque_date: date
    amount: int
    status: str
    notes: str
    cleared_date: date | None = None
    returned_date: date | None = None
    returned_reason: str | None = None
    created_at: datetime


class ChequeCreate(BaseModel):
    cheque_number: str = Field(..., min_length=1, max_length=50)
    cheque_date: date
    amount: int
    notes: str | None = Field(None, max_length=500)


class ChequeStatusUpdate(BaseModel):
    status: str = Field(..., description="cleared, returned or cancelled")
    returned_reason: str | None = Field(None, max_length=255)
    notes: str | None = Field(None, max_length=500)
