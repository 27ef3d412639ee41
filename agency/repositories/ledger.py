from datetime import date

from sqlalchemy.orm import Session

from agency.db.models.ledger import Expense as ExpenseModel
from agency.db.models.ledger import Revenue as RevenueModel


def create_expense(
    db: Session,
    title: str,
    amount: int,
    paid_by: str,
    payment_method: str = "cash",
    receipt_number: str | None = None,
    description: str | None = None,
    expense_date: date | None = None,
) -> ExpenseModel:
    """Create a new expense. Pure data access - no business logic."""
    db_expense = ExpenseModel(
        title=title,
        amount=amount,
        paid_by=paid_by,
        payment_method=payment_method,
        receipt_number=receipt_number,
        description=description,
        date=expense_date or date.today(),
    )
    db.add(db_expense)
    db.commit()
    db.refresh(db_expense)
    return db_expense


def create_revenue(
    db: Session,
    title: str,
    amount: int,
    received_from: str,
    payment_method: str = "cash",
    receipt_number: str | None = None,
    description: str | None = None,
    revenue_date: date | None = None,
    from_vehicle_plate: str | None = None,
    to_vehicle_plate: str | None = None,
) -> RevenueModel:
    """Create a new revenue. Pure data access - no business logic."""
    db_revenue = RevenueModel(
        title=title,
        amount=amount,
        received_from=received_from,
        payment_method=payment_method,
        receipt_number=receipt_number,
        description=description,
        date=revenue_date or date.today(),
        from_vehicle_plate=from_vehicle_plate,
        to_vehicle_plate=to_vehicle_plate,
    )
    db.add(db_revenue)
    db.commit()
    db.refresh(db_revenue)
    return db_revenue


def get_all_expenses(db: Session) -> list[ExpenseModel]:
    return db.query(ExpenseModel).order_by(ExpenseModel.id).all()


def get_all_revenues(db: Session) -> list[RevenueModel]:
    return db.query(RevenueModel).order_by(RevenueModel.id).all()
