from pydantic import BaseModel, ConfigDict, Field


class PricingType(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    requires_pricing_table: bool


class InsuranceType(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    pricing_type_id: str
    description: str


class InsuranceTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    pricing_type_id: str = Field(..., description="One of the seeded pricing types")
    description: str = ""


class Company(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    insurance_types: list[InsuranceType] = []


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: str = ""


class Agent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone_number: str | None = None


class AgentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    phone_number: str | None = Field(None, max_length=30)
