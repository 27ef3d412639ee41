from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from agency.db.base import Base


class Cheque(Base):
    __tablename__ = "cheques"

    id = Column(Integer, primary_key=True, index=True)
    cheque_number = Column(String(50), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    # Weak references kept in sync by the services. No FK because policies
    # are re-created on transfer.
    policy_id = Column(Integer, nullable=True, index=True)
    vehicle_id = Column(Integer, nullable=True)
    cheque_date = Column(Date, nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    notes = Column(String(500), nullable=False, default="")
    cleared_date = Column(Date, nullable=True)
    returned_date = Column(Date, nullable=True)
    returned_reason = Column(String(255), nullable=True)
    created_at = Column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    customer = relationship("Customer")
