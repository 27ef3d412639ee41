from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from agency.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Policy(Base):
    __tablename__ = "policies"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    company_id = Column(
        Integer, ForeignKey("insurance_companies.id"), nullable=False, index=True
    )
    insurance_type = Column(String(100), nullable=False)
    is_under_24 = Column(Boolean, nullable=False, default=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    agent_id = Column(Integer, ForeignKey("agents.id"), nullable=True)
    agent_flow = Column(String(20), nullable=False, default="none")
    agent_amount = Column(Integer, nullable=False, default=0)
    insurance_amount = Column(Integer, nullable=False)
    paid_amount = Column(Integer, nullable=False, default=0)
    remaining_debt = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="active", index=True)
    refund_amount = Column(Integer, nullable=False, default=0)
    cancelled_at = Column(DateTime, nullable=True)
    # Weak reference: the policy this one was created from by a transfer.
    transferred_from_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow)

    vehicle = relationship("Vehicle", back_populates="policies")
    company = relationship("InsuranceCompany")
    agent = relationship("Agent")
    payments = relationship(
        "Payment",
        back_populates="policy",
        order_by="Payment.id",
        cascade="all, delete-orphan",
    )


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    policy_id = Column(Integer, ForeignKey("policies.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    method = Column(String(20), nullable=False)
    payment_date = Column(Date, nullable=False)
    receipt_number = Column(String(50), nullable=False)
    notes = Column(String(500), nullable=True)
    cheque_id = Column(Integer, ForeignKey("cheques.id"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow)

    policy = relationship("Policy", back_populates="payments")
    cheque = relationship("Cheque")
