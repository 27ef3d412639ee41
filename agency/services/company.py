import logging

from sqlalchemy.orm import Session

import agency.repositories.agent as agent_repo
import agency.repositories.company as company_repo
from agency.db.models.agent import Agent as AgentModel
from agency.db.models.company import InsuranceCompany as CompanyModel
from agency.db.models.company import InsuranceType as InsuranceTypeModel
from agency.errors import CompanyNotFoundError, DuplicateResourceError, NotFoundError

logger = logging.getLogger(__name__)


def create_company(db: Session, name: str, description: str = "") -> CompanyModel:
    if company_repo.get_company_by_name(db, name):
        raise DuplicateResourceError(f"Insurance company '{name}' already exists")
    company = company_repo.create_company(db, name=name, description=description)
    logger.info(f"Created insurance company {company.id} '{name}'")
    return company


def get_company(db: Session, company_id: int) -> CompanyModel:
    company = company_repo.get_company_by_id(db, company_id)
    if not company:
        raise CompanyNotFoundError(f"Insurance company with id {company_id} not found")
    return company


def create_insurance_type(
    db: Session, name: str, pricing_type_id: str, description: str = ""
) -> InsuranceTypeModel:
    """
    Create an insurance type.

    - Validates the pricing type exists
    - Validates the name is not taken
    """
    if not company_repo.get_pricing_type_by_id(db, pricing_type_id):
        raise NotFoundError(f"Pricing type '{pricing_type_id}' not found")

    if company_repo.get_insurance_type_by_name(db, name):
        raise DuplicateResourceError(f"Insurance type '{name}' already exists")

    return company_repo.create_insurance_type(
        db, name=name, pricing_type_id=pricing_type_id, description=description
    )


def offer_insurance_type(db: Session, company_id: int, insurance_type_id: int) -> CompanyModel:
    """Add an insurance type to the ones a company sells."""
    company = get_company(db, company_id)

    insurance_type = company_repo.get_insurance_type_by_id(db, insurance_type_id)
    if not insurance_type:
        raise NotFoundError(f"Insurance type with id {insurance_type_id} not found")

    if insurance_type in company.insurance_types:
        raise DuplicateResourceError(
            f"{company.name} already offers '{insurance_type.name}'"
        )

    company = company_repo.add_insurance_type_to_company(db, company, insurance_type)
    logger.info(f"Company {company_id} now offers '{insurance_type.name}'")
    return company


def create_agent(db: Session, name: str, phone_number: str | None = None) -> AgentModel:
    return agent_repo.create_agent(db, name=name, phone_number=phone_number)
