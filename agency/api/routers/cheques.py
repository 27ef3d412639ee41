from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from agency.api.deps import get_db
from agency.services.cheque import (
    create_cheque,
    delete_cheque,
    get_cheque,
    list_cheques,
    update_cheque_status,
)
from agency.schemas.cheque import Cheque, ChequeCreate, ChequeStatusUpdate

router = APIRouter(tags=["cheques"])


@router.post(
    "/customers/{customer_id}/cheques",
    response_model=Cheque,
    status_code=status.HTTP_201_CREATED,
)
def create_new_cheque(
    customer_id: int,
    cheque_data: ChequeCreate,
    db: Session = Depends(get_db),
):
    """
    Register a standalone cheque, not linked to any policy.
    """
    cheque = create_cheque(db, customer_id=customer_id, **cheque_data.model_dump())
    return Cheque.model_validate(cheque)


@router.get("/cheques", response_model=list[Cheque])
def get_all_cheques(
    cheque_status: str | None = Query(None, alias="status", description="Filter by cheque status"),
    customer: int | None = Query(None, description="Filter cheques by customer ID"),
    start_date: date | None = Query(None, description="Cheques dated on or after this day"),
    end_date: date | None = Query(None, description="Cheques dated on or before this day"),
    db: Session = Depends(get_db),
):
    """
    Get all cheques, newest cheque date first.
    """
    cheques = list_cheques(
        db,
        status=cheque_status,
        customer_id=customer,
        start_date=start_date,
        end_date=end_date,
    )
    return [Cheque.model_validate(cheque) for cheque in cheques]


@router.get("/cheques/{cheque_id}", response_model=Cheque)
def get_cheque_by_id(cheque_id: int, db: Session = Depends(get_db)):
    return Cheque.model_validate(get_cheque(db, cheque_id))


@router.patch("/cheques/{cheque_id}/status", response_model=Cheque)
def update_cheque_status_by_id(
    cheque_id: int,
    status_data: ChequeStatusUpdate,
    db: Session = Depends(get_db),
):
    """
    Move a pending cheque to cleared, returned or cancelled.
    """
    cheque = update_cheque_status(db, cheque_id=cheque_id, **status_data.model_dump())
    return Cheque.model_validate(cheque)


@router.delete("/cheques/{cheque_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_cheque_by_id(cheque_id: int, db: Session = Depends(get_db)):
    """
    Delete a cheque. Payments made with it are removed and their policies'
    debt is restored.
    """
    delete_cheque(db, cheque_id)
