from pydantic import BaseModel, ConfigDict, Field


class RoadService(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    service_name: str
    normal_price: int
    old_car_price: int
    cutoff_year: int
    description: str
    is_active: bool


class RoadServiceCreate(BaseModel):
    service_name: str = Field(..., min_length=1, max_length=150)
    normal_price: int = Field(..., ge=0, description="Price for vehicles from the cutoff year on (must be >= 0)")
    old_car_price: int = Field(..., ge=0, description="Price for vehicles older than the cutoff year (must be >= 0)")
    cutoff_year: int = Field(2007, ge=1900, le=2100)
    description: str = ""


class RoadServiceUpdate(BaseModel):
    service_name: str | None = Field(None, min_length=1, max_length=150)
    normal_price: int | None = Field(None, ge=0)
    old_car_price: int | None = Field(None, ge=0)
    cutoff_year: int | None = Field(None, ge=1900, le=2100)
    description: str | None = None
    is_active: bool | None = None


class RoadServicePriceRequest(BaseModel):
    service_id: int
    vehicle_year: int = Field(..., ge=1900, le=2100)


class RoadServicePrice(BaseModel):
    service_id: int
    service_name: str
    vehicle_year: int
    cutoff_year: int
    is_old_car: bool
    price: int
