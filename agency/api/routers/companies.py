from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import agency.repositories.company as company_repo
from agency.api.deps import get_db
from agency.services.company import (
    create_company,
    create_insurance_type,
    get_company,
    offer_insurance_type,
)
from agency.schemas.company import (
    Company,
    CompanyCreate,
    InsuranceType,
    InsuranceTypeCreate,
)

router = APIRouter(tags=["companies"])


@router.post("/companies", response_model=Company, status_code=status.HTTP_201_CREATED)
def create_new_company(company_data: CompanyCreate, db: Session = Depends(get_db)):
    company = create_company(db, name=company_data.name, description=company_data.description)
    return Company.model_validate(company)


@router.get("/companies", response_model=list[Company])
def get_all_companies(db: Session = Depends(get_db)):
    return [Company.model_validate(company) for company in company_repo.get_all_companies(db)]


@router.get("/companies/{company_id}", response_model=Company)
def get_company_by_id(company_id: int, db: Session = Depends(get_db)):
    return Company.model_validate(get_company(db, company_id))


@router.post(
    "/companies/{company_id}/insurance-types/{insurance_type_id}",
    response_model=Company,
)
def add_company_insurance_type(
    company_id: int,
    insurance_type_id: int,
    db: Session = Depends(get_db),
):
    """
    Add an insurance type to the ones a company sells.
    """
    company = offer_insurance_type(db, company_id, insurance_type_id)
    return Company.model_validate(company)


@router.post(
    "/insurance-types",
    response_model=InsuranceType,
    status_code=status.HTTP_201_CREATED,
)
def create_new_insurance_type(
    type_data: InsuranceTypeCreate,
    db: Session = Depends(get_db),
):
    insurance_type = create_insurance_type(
        db,
        name=type_data.name,
        pricing_type_id=type_data.pricing_type_id,
        description=type_data.description,
    )
    return InsuranceType.model_validate(insurance_type)
