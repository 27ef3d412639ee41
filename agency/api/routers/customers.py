from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import agency.repositories.customer as customer_repo
from agency.api.deps import get_db
from agency.services.customer import create_customer, create_vehicle, get_customer
from agency.schemas.customer import Customer, CustomerCreate, Vehicle, VehicleCreate
from agency.schemas.pagination import PaginatedResponse

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("", response_model=Customer, status_code=status.HTTP_201_CREATED)
def create_new_customer(customer_data: CustomerCreate, db: Session = Depends(get_db)):
    customer = create_customer(db, **customer_data.model_dump())
    return Customer.model_validate(customer)


@router.get("", response_model=PaginatedResponse[Customer])
def get_all_customers_paginated(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    search: str | None = Query(None, description="Match name, ID number or phone"),
    db: Session = Depends(get_db),
):
    """
    Get customers with pagination.

    Optional search: case-insensitive partial match on name, ID number or phone.
    """
    customers, total = customer_repo.get_all_customers(
        db, page=page, page_size=page_size, search=search
    )
    return PaginatedResponse(
        items=[Customer.model_validate(customer) for customer in customers],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{customer_id}", response_model=Customer)
def get_customer_by_id(customer_id: int, db: Session = Depends(get_db)):
    return Customer.model_validate(get_customer(db, customer_id))


@router.post(
    "/{customer_id}/vehicles",
    response_model=Vehicle,
    status_code=status.HTTP_201_CREATED,
)
def add_customer_vehicle(
    customer_id: int,
    vehicle_data: VehicleCreate,
    db: Session = Depends(get_db),
):
    vehicle = create_vehicle(db, customer_id=customer_id, **vehicle_data.model_dump())
    return Vehicle.model_validate(vehicle)
