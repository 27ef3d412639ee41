from sqlalchemy.orm import Session

from agency.db.models.pricing import PricingRule as PricingRuleModel
from agency.db.models.pricing import RoadService as RoadServiceModel
from agency.errors import NotFoundError


def get_pricing_rule(
    db: Session, company_id: int, pricing_type_id: str
) -> PricingRuleModel | None:
    """Get the pricing rule of a company for a pricing type."""
    return (
        db.query(PricingRuleModel)
        .filter(
            PricingRuleModel.company_id == company_id,
            PricingRuleModel.pricing_type_id == pricing_type_id,
        )
        .first()
    )


def get_pricing_rules_by_company_id(db: Session, company_id: int) -> list[PricingRuleModel]:
    return (
        db.query(PricingRuleModel)
        .filter(PricingRuleModel.company_id == company_id)
        .order_by(PricingRuleModel.pricing_type_id)
        .all()
    )


def get_all_pricing_rules(
    db: Session,
    page: int = 1,
    page_size: int = 100,
    company_id: int | None = None,
    pricing_type_id: str | None = None,
) -> tuple[list[PricingRuleModel], int]:
    """
    Get pricing rules across companies with pagination, newest first.

    Returns:
        Tuple of (list of pricing rules, total count)
    """
    query = db.query(PricingRuleModel)
    if company_id is not None:
        query = query.filter(PricingRuleModel.company_id == company_id)
    if pricing_type_id is not None:
        query = query.filter(PricingRuleModel.pricing_type_id == pricing_type_id)
    total = query.count()
    skip = (page - 1) * page_size
    rules = query.order_by(PricingRuleModel.id.desc()).offset(skip).limit(page_size).all()
    return rules, total


def upsert_pricing_rule(
    db: Session, company_id: int, pricing_type_id: str, rules: dict
) -> tuple[PricingRuleModel, bool]:
    """Create or replace a pricing rule. Returns ``(rule, created)``."""
    rule = get_pricing_rule(db, company_id, pricing_type_id)
    created = rule is None
    if created:
        rule = PricingRuleModel(company_id=company_id, pricing_type_id=pricing_type_id)
        db.add(rule)
    rule.rules = rules
    db.commit()
    db.refresh(rule)
    return rule, created


def delete_pricing_rule(db: Session, company_id: int, pricing_type_id: str) -> None:
    rule = get_pricing_rule(db, company_id, pricing_type_id)
    if not rule:
        raise NotFoundError("Pricing configuration not found")
    db.delete(rule)
    db.commit()


def get_road_service_by_id(db: Session, service_id: int) -> RoadServiceModel | None:
    """Get a road service by ID."""
    return db.query(RoadServiceModel).filter(RoadServiceModel.id == service_id).first()


def get_road_service_by_company_and_name(
    db: Session, company_id: int, service_name: str, exclude_id: int | None = None
) -> RoadServiceModel | None:
    query = db.query(RoadServiceModel).filter(
        RoadServiceModel.company_id == company_id,
        RoadServiceModel.service_name == service_name,
    )
    if exclude_id is not None:
        query = query.filter(RoadServiceModel.id != exclude_id)
    return query.first()


def get_road_services_by_company_id(
    db: Session, company_id: int, is_active: bool | None = None
) -> list[RoadServiceModel]:
    query = db.query(RoadServiceModel).filter(RoadServiceModel.company_id == company_id)
    if is_active is not None:
        query = query.filter(RoadServiceModel.is_active == is_active)
    return query.order_by(RoadServiceModel.service_name).all()


def create_road_service(
    db: Session,
    company_id: int,
    service_name: str,
    normal_price: int,
    old_car_price: int,
    cutoff_year: int,
    description: str = "",
) -> RoadServiceModel:
    """Create a new road service. Pure data access - no business logic."""
    db_service = RoadServiceModel(
        company_id=company_id,
        service_name=service_name,
        normal_price=normal_price,
        old_car_price=old_car_price,
        cutoff_year=cutoff_year,
        description=description,
        is_active=True,
    )
    db.add(db_service)
    db.commit()
    db.refresh(db_service)
    return db_service


def update_road_service(db: Session, service_id: int, **kwargs) -> RoadServiceModel:
    """
    Update a road service. Only updates fields that are explicitly provided.

    Fields not provided are not updated.
    """
    service = get_road_service_by_id(db, service_id)
    if not service:
        raise NotFoundError("Road service not found")

    for field in (
        "service_name",
        "normal_price",
        "old_car_price",
        "cutoff_year",
        "description",
        "is_active",
    ):
        if field in kwargs:
            setattr(service, field, kwargs[field])

    db.commit()
    db.refresh(service)
    return service


def delete_road_service(db: Session, service: RoadServiceModel) -> None:
    db.delete(service)
    db.commit()


def get_all_road_services(
    db: Session,
    page: int = 1,
    page_size: int = 100,
    company_id: int | None = None,
    is_active: bool | None = None,
) -> tuple[list[RoadServiceModel], int]:
    """
    Get road services across companies with pagination, newest first.

    Returns:
        Tuple of (list of road services, total count)
    """
    query = db.query(RoadServiceModel)
    if company_id is not None:
        query = query.filter(RoadServiceModel.company_id == company_id)
    if is_active is not None:
        query = query.filter(RoadServiceModel.is_active == is_active)
    total = query.count()
    skip = (page - 1) * page_size
    services = query.order_by(RoadServiceModel.id.desc()).offset(skip).limit(page_size).all()
    return services, total
