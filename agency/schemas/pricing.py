from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PricingRule(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    pricing_type_id: str
    rules: dict[str, Any]


class PricingRuleUpsert(BaseModel):
    rules: dict[str, Any] = Field(
        default_factory=dict,
        description=(
            'Matrix types: {"matrix": [{vehicle_type, driver_age_group, offer_amount_min, '
            'offer_amount_max, price}]}; accident_fee_waiver: {"fixed_amount": n}; '
            "ignored for compulsory and road_service"
        ),
    )


class PriceCalculationRequest(BaseModel):
    company_id: int
    pricing_type_id: str
    vehicle_type: str | None = None
    driver_age_group: str | None = Field(None, description="e.g. under_24, above_24")
    offer_amount: int | None = Field(None, ge=0)


class MatrixRow(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    vehicle_type: str
    driver_age_group: str
    offer_amount_min: int
    offer_amount_max: int | None = None
    price: int


class PriceQuote(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    price: int
    matched_row: MatrixRow | None = None
