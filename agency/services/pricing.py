import logging

from sqlalchemy.orm import Session

import agency.domain.pricing as pricing_rules
import agency.repositories.company as company_repo
import agency.repositories.pricing as pricing_repo
from agency.db.models.pricing import PricingRule as PricingRuleModel
from agency.errors import (
    CompanyNotFoundError,
    NotFoundError,
    PricingTypeNotApplicableError,
    PricingTypeNotOfferedError,
)
from agency.services.collaborators import write_audit

logger = logging.getLogger(__name__)


def _get_company(db: Session, company_id: int):
    company = company_repo.get_company_by_id(db, company_id)
    if not company:
        raise CompanyNotFoundError(f"Insurance company with id {company_id} not found")
    return company


def upsert_pricing(
    db: Session, company_id: int, pricing_type_id: str, rules: dict | None
) -> tuple[PricingRuleModel, bool]:
    """
    Create or replace a company's pricing rules for one pricing type.

    - Validates company and pricing type exist
    - Validates the company offers an insurance type priced this way
    - Parses the payload into its typed form and stores the normalized
      version (rows in submitted order)

    Returns ``(rule, created)``.
    """
    company = _get_company(db, company_id)

    pricing_type = company_repo.get_pricing_type_by_id(db, pricing_type_id)
    if not pricing_type:
        raise NotFoundError(f"Pricing type '{pricing_type_id}' not found")

    if not any(t.pricing_type_id == pricing_type_id for t in company.insurance_types):
        offered = ", ".join(t.name for t in company.insurance_types) or "nothing"
        raise PricingTypeNotOfferedError(
            f"{company.name} does not offer any insurance type priced as "
            f"'{pricing_type_id}'. Company offers: {offered}"
        )

    rule = pricing_rules.parse_rules(pricing_type_id, rules)
    pricing_rule, created = pricing_repo.upsert_pricing_rule(
        db, company_id, pricing_type_id, rule.to_payload()
    )

    logger.info(
        f"{'Created' if created else 'Replaced'} {pricing_type_id} pricing "
        f"for company {company_id}"
    )
    write_audit(
        "create" if created else "update",
        "pricing_rule",
        pricing_rule.id,
        new_value=pricing_rule.rules,
    )
    return pricing_rule, created


def get_pricing(db: Session, company_id: int, pricing_type_id: str) -> PricingRuleModel:
    _get_company(db, company_id)
    pricing_rule = pricing_repo.get_pricing_rule(db, company_id, pricing_type_id)
    if not pricing_rule:
        raise NotFoundError("Pricing configuration not found")
    return pricing_rule


def list_company_pricing(db: Session, company_id: int) -> list[PricingRuleModel]:
    _get_company(db, company_id)
    return pricing_repo.get_pricing_rules_by_company_id(db, company_id)


def list_pricing(
    db: Session,
    page: int = 1,
    page_size: int = 100,
    company_id: int | None = None,
    pricing_type_id: str | None = None,
) -> tuple[list[PricingRuleModel], int]:
    """Pricing rules across companies, newest first. Returns ``(items, total)``."""
    return pricing_repo.get_all_pricing_rules(
        db,
        page=page,
        page_size=page_size,
        company_id=company_id,
        pricing_type_id=pricing_type_id,
    )


def delete_pricing(db: Session, company_id: int, pricing_type_id: str) -> None:
    _get_company(db, company_id)
    pricing_repo.delete_pricing_rule(db, company_id, pricing_type_id)
    logger.info(f"Deleted {pricing_type_id} pricing for company {company_id}")
    write_audit(
        "delete",
        "pricing_rule",
        None,
        old_value={"company_id": company_id, "pricing_type": pricing_type_id},
    )


def calculate_price(
    db: Session,
    company_id: int,
    pricing_type_id: str,
    vehicle_type: str | None = None,
    driver_age_group: str | None = None,
    offer_amount: int | None = None,
) -> pricing_rules.Quote:
    """
    Quote a price from a company's stored rules. Read-only.

    Compulsory and road service pricing are rejected before any lookup:
    the first is entered by hand, the second comes from road services.
    """
    if pricing_type_id in pricing_rules.NOT_APPLICABLE_MESSAGES:
        raise PricingTypeNotApplicableError(
            pricing_rules.NOT_APPLICABLE_MESSAGES[pricing_type_id]
        )

    pricing_rule = get_pricing(db, company_id, pricing_type_id)
    rule = pricing_rules.parse_rules(pricing_type_id, pricing_rule.rules)
    return pricing_rules.calculate_price(
        rule,
        pricing_rules.QuoteParams(
            vehicle_type=vehicle_type,
            driver_age_group=driver_age_group,
            offer_amount=offer_amount,
        ),
    )
