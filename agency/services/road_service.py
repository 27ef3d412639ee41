import logging

from sqlalchemy.orm import Session

import agency.repositories.company as company_repo
import agency.repositories.pricing as pricing_repo
from agency.db.models.pricing import RoadService as RoadServiceModel
from agency.domain.pricing import DEFAULT_ROAD_SERVICE_CUTOFF_YEAR, road_service_price
from agency.errors import (
    CompanyNotFoundError,
    DuplicateResourceError,
    NotFoundError,
    ServiceInactiveError,
)
from agency.services.collaborators import publish_notification, write_audit

logger = logging.getLogger(__name__)


def create_road_service(
    db: Session,
    company_id: int,
    service_name: str,
    normal_price: int,
    old_car_price: int,
    cutoff_year: int = DEFAULT_ROAD_SERVICE_CUTOFF_YEAR,
    description: str = "",
) -> RoadServiceModel:
    """
    Create a road service for a company.

    - Validates company exists
    - Validates no other service of the company has the same name
    """
    if not company_repo.get_company_by_id(db, company_id):
        raise CompanyNotFoundError(f"Insurance company with id {company_id} not found")

    if pricing_repo.get_road_service_by_company_and_name(db, company_id, service_name):
        raise DuplicateResourceError(
            f"Road service '{service_name}' already exists for this company"
        )

    service = pricing_repo.create_road_service(
        db,
        company_id=company_id,
        service_name=service_name,
        normal_price=normal_price,
        old_car_price=old_car_price,
        cutoff_year=cutoff_year,
        description=description,
    )
    logger.info(f"Created road service {service.id} '{service_name}' for company {company_id}")
    write_audit("create", "road_service", service.id, new_value={"name": service_name})
    return service


def get_road_service(db: Session, service_id: int) -> RoadServiceModel:
    service = pricing_repo.get_road_service_by_id(db, service_id)
    if not service:
        raise NotFoundError("Road service not found")
    return service


def list_company_road_services(
    db: Session, company_id: int, is_active: bool | None = None
) -> list[RoadServiceModel]:
    if not company_repo.get_company_by_id(db, company_id):
        raise CompanyNotFoundError(f"Insurance company with id {company_id} not found")
    return pricing_repo.get_road_services_by_company_id(db, company_id, is_active=is_active)


def list_road_services(
    db: Session,
    page: int = 1,
    page_size: int = 100,
    company_id: int | None = None,
    is_active: bool | None = None,
) -> tuple[list[RoadServiceModel], int]:
    """Road services across companies, newest first. Returns ``(items, total)``."""
    return pricing_repo.get_all_road_services(
        db, page=page, page_size=page_size, company_id=company_id, is_active=is_active
    )


def update_road_service(db: Session, service_id: int, **update_fields) -> RoadServiceModel:
    """
    Update a road service. Only fields explicitly provided are changed.

    Renaming checks for a clash with the company's other services.
    """
    service = get_road_service(db, service_id)

    service_name = update_fields.get("service_name")
    if service_name is not None and service_name != service.service_name:
        clash = pricing_repo.get_road_service_by_company_and_name(
            db, service.company_id, service_name, exclude_id=service_id
        )
        if clash:
            raise DuplicateResourceError(
                f"Road service '{service_name}' already exists for this company"
            )

    service = pricing_repo.update_road_service(db, service_id, **update_fields)
    logger.info(f"Updated road service {service_id}: {sorted(update_fields)}")
    write_audit("update", "road_service", service_id, new_value=update_fields)
    return service


def delete_road_service(db: Session, service_id: int) -> None:
    """Remove a road service. Quotes already given are not affected."""
    service = get_road_service(db, service_id)
    company_id = service.company_id
    service_name = service.service_name

    pricing_repo.delete_road_service(db, service)
    logger.info(f"Deleted road service {service_id} '{service_name}' of company {company_id}")
    write_audit(
        "delete",
        "road_service",
        service_id,
        old_value={"name": service_name, "company_id": company_id},
    )
    publish_notification(f"Road service '{service_name}' was removed")


def calculate_road_service_price(db: Session, service_id: int, vehicle_year: int) -> dict:
    """Price a road service for a vehicle of the given manufacture year. Read-only."""
    service = get_road_service(db, service_id)
    if not service.is_active:
        raise ServiceInactiveError("This road service is currently inactive")

    price, is_old_car = road_service_price(
        normal_price=service.normal_price,
        old_car_price=service.old_car_price,
        cutoff_year=service.cutoff_year,
        vehicle_year=vehicle_year,
    )
    return {
        "service_id": service.id,
        "service_name": service.service_name,
        "vehicle_year": vehicle_year,
        "cutoff_year": service.cutoff_year,
        "is_old_car": is_old_car,
        "price": price,
    }
