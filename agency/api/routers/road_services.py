from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from agency.api.deps import get_db
from agency.services.road_service import (
    calculate_road_service_price,
    create_road_service,
    delete_road_service,
    get_road_service,
    list_company_road_services,
    list_road_services,
    update_road_service,
)
from agency.schemas.pagination import PaginatedResponse
from agency.schemas.road_service import (
    RoadService,
    RoadServiceCreate,
    RoadServicePrice,
    RoadServicePriceRequest,
    RoadServiceUpdate,
)

router = APIRouter(tags=["road-services"])


@router.post(
    "/companies/{company_id}/road-services",
    response_model=RoadService,
    status_code=status.HTTP_201_CREATED,
)
def create_new_road_service(
    company_id: int,
    service_data: RoadServiceCreate,
    db: Session = Depends(get_db),
):
    service = create_road_service(db, company_id=company_id, **service_data.model_dump())
    return RoadService.model_validate(service)


@router.get("/companies/{company_id}/road-services", response_model=list[RoadService])
def get_company_road_services(
    company_id: int,
    is_active: bool | None = Query(None, description="Filter by active flag"),
    db: Session = Depends(get_db),
):
    services = list_company_road_services(db, company_id, is_active=is_active)
    return [RoadService.model_validate(service) for service in services]


@router.get("/road-services", response_model=PaginatedResponse[RoadService])
def get_all_road_services_paginated(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    company_id: int | None = Query(None, description="Filter by insurance company"),
    is_active: bool | None = Query(None, description="Filter by active flag"),
    db: Session = Depends(get_db),
):
    """
    Get road services of every company, newest first.
    """
    services, total = list_road_services(
        db, page=page, page_size=page_size, company_id=company_id, is_active=is_active
    )
    return PaginatedResponse(
        items=[RoadService.model_validate(service) for service in services],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("/road-services/calculate-price", response_model=RoadServicePrice)
def calculate_price_for_road_service(
    request_data: RoadServicePriceRequest,
    db: Session = Depends(get_db),
):
    """
    Price a road service by vehicle age: vehicles built before the cutoff
    year pay the old car price.
    """
    return calculate_road_service_price(
        db, request_data.service_id, request_data.vehicle_year
    )


@router.get("/road-services/{service_id}", response_model=RoadService)
def get_road_service_by_id(service_id: int, db: Session = Depends(get_db)):
    return RoadService.model_validate(get_road_service(db, service_id))


@router.patch("/road-services/{service_id}", response_model=RoadService)
def update_road_service_by_id(
    service_id: int,
    service_data: RoadServiceUpdate,
    db: Session = Depends(get_db),
):
    """
    Update a road service. Fields not included in the request are not updated.
    """
    update_data = service_data.model_dump(exclude_unset=True)
    service = update_road_service(db, service_id, **update_data)
    return RoadService.model_validate(service)


@router.delete("/road-services/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_road_service_by_id(service_id: int, db: Session = Depends(get_db)):
    delete_road_service(db, service_id)
