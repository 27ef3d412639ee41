from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Vehicle(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    plate_number: str
    model: str
    vehicle_type: str
    manufacture_year: int | None = None


class VehicleCreate(BaseModel):
    plate_number: str = Field(..., min_length=1, max_length=20)
    model: str = Field(..., min_length=1, max_length=100)
    vehicle_type: str = Field(..., min_length=1, max_length=50, description="e.g. car, truck, motorcycle")
    manufacture_year: int | None = Field(None, ge=1900, le=2100)


class Customer(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    id_number: str
    phone_number: str
    email: str | None = None
    city: str | None = None
    agent_id: int | None = None
    joined_at: datetime
    vehicles: list[Vehicle] = []


class CustomerCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    id_number: str = Field(..., min_length=1, max_length=30)
    phone_number: str = Field(..., min_length=1, max_length=30)
    email: EmailStr | None = None
    city: str | None = Field(None, max_length=100)
    agent_id: int | None = None
