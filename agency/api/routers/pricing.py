from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from agency.api.deps import get_db
from agency.services.pricing import (
    calculate_price,
    delete_pricing,
    get_pricing,
    list_company_pricing,
    list_pricing,
    upsert_pricing,
)
from agency.schemas.pagination import PaginatedResponse
from agency.schemas.pricing import (
    PriceCalculationRequest,
    PriceQuote,
    PricingRule,
    PricingRuleUpsert,
)

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.get("", response_model=PaginatedResponse[PricingRule])
def get_all_pricing_paginated(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    company_id: int | None = Query(None, description="Filter by insurance company"),
    pricing_type_id: str | None = Query(None, description="Filter by pricing type"),
    db: Session = Depends(get_db),
):
    """
    Get pricing rules of every company, newest first.
    """
    rules, total = list_pricing(
        db,
        page=page,
        page_size=page_size,
        company_id=company_id,
        pricing_type_id=pricing_type_id,
    )
    return PaginatedResponse(
        items=[PricingRule.model_validate(rule) for rule in rules],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("/calculate", response_model=PriceQuote)
def calculate_pricing(
    request_data: PriceCalculationRequest,
    db: Session = Depends(get_db),
):
    """
    Quote a price from a company's pricing rules.

    Matrix rows are checked in stored order and the first match wins.
    """
    quote = calculate_price(db, **request_data.model_dump())
    return PriceQuote.model_validate(quote)


@router.get("/{company_id}", response_model=list[PricingRule])
def get_company_pricing(company_id: int, db: Session = Depends(get_db)):
    rules = list_company_pricing(db, company_id)
    return [PricingRule.model_validate(rule) for rule in rules]


@router.put("/{company_id}/{pricing_type_id}", response_model=PricingRule)
def upsert_company_pricing(
    company_id: int,
    pricing_type_id: str,
    pricing_data: PricingRuleUpsert,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Create or replace a company's pricing rules for one pricing type.
    Returns 201 when created, 200 when replaced.
    """
    rule, created = upsert_pricing(db, company_id, pricing_type_id, pricing_data.rules)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return PricingRule.model_validate(rule)


@router.get("/{company_id}/{pricing_type_id}", response_model=PricingRule)
def get_company_pricing_for_type(
    company_id: int,
    pricing_type_id: str,
    db: Session = Depends(get_db),
):
    return PricingRule.model_validate(get_pricing(db, company_id, pricing_type_id))


@router.delete("/{company_id}/{pricing_type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company_pricing(
    company_id: int,
    pricing_type_id: str,
    db: Session = Depends(get_db),
):
    delete_pricing(db, company_id, pricing_type_id)
