from sqlalchemy.orm import Session

from agency.db.models.company import InsuranceCompany as CompanyModel
from agency.db.models.company import InsuranceType as InsuranceTypeModel
from agency.db.models.company import PricingType as PricingTypeModel


def get_company_by_id(db: Session, company_id: int) -> CompanyModel | None:
    """Get an insurance company by ID."""
    return db.query(CompanyModel).filter(CompanyModel.id == company_id).first()


def get_company_by_name(db: Session, name: str) -> CompanyModel | None:
    return db.query(CompanyModel).filter(CompanyModel.name == name).first()


def get_all_companies(db: Session) -> list[CompanyModel]:
    return db.query(CompanyModel).order_by(CompanyModel.name).all()


def create_company(db: Session, name: str, description: str = "") -> CompanyModel:
    """Create a new insurance company. Pure data access - no business logic."""
    db_company = CompanyModel(name=name, description=description)
    db.add(db_company)
    db.commit()
    db.refresh(db_company)
    return db_company


def add_insurance_type_to_company(
    db: Session, company: CompanyModel, insurance_type: InsuranceTypeModel
) -> CompanyModel:
    company.insurance_types.append(insurance_type)
    db.commit()
    db.refresh(company)
    return company


def get_pricing_type_by_id(db: Session, pricing_type_id: str) -> PricingTypeModel | None:
    return db.query(PricingTypeModel).filter(PricingTypeModel.id == pricing_type_id).first()


def get_insurance_type_by_id(db: Session, insurance_type_id: int) -> InsuranceTypeModel | None:
    return (
        db.query(InsuranceTypeModel)
        .filter(InsuranceTypeModel.id == insurance_type_id)
        .first()
    )


def get_insurance_type_by_name(db: Session, name: str) -> InsuranceTypeModel | None:
    return db.query(InsuranceTypeModel).filter(InsuranceTypeModel.name == name).first()


def create_insurance_type(
    db: Session, name: str, pricing_type_id: str, description: str = ""
) -> InsuranceTypeModel:
    """Create a new insurance type. Pure data access - no business logic."""
    db_type = InsuranceTypeModel(
        name=name, pricing_type_id=pricing_type_id, description=description
    )
    db.add(db_type)
    db.commit()
    db.refresh(db_type)
    return db_type
