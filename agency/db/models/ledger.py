from datetime import date

from sqlalchemy import Column, Date, Integer, String

from agency.db.base import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    amount = Column(Integer, nullable=False)
    paid_by = Column(String(150), nullable=False)
    payment_method = Column(String(20), nullable=False, default="cash")
    date = Column(Date, nullable=False, default=date.today)
    receipt_number = Column(String(50), nullable=True)
    description = Column(String(500), nullable=True)


class Revenue(Base):
    __tablename__ = "revenues"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    amount = Column(Integer, nullable=False)
    received_from = Column(String(150), nullable=False)
    payment_method = Column(String(20), nullable=False, default="cash")
    date = Column(Date, nullable=False, default=date.today)
    receipt_number = Column(String(50), nullable=True)
    description = Column(String(500), nullable=True)
    from_vehicle_plate = Column(String(20), nullable=True)
    to_vehicle_plate = Column(String(20), nullable=True)
