from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship

from agency.db.base import Base


class Agent(Base):
    __tablename__ = "agents"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    phone_number = Column(String(30), nullable=True)


class AgentTransaction(Base):
    """Append-only commission entry. Only ``status``/``settled_date`` change after insert."""

    __tablename__ = "agent_transactions"

    id = Column(Integer, primary_key=True, index=True)
    agent_id = Column(Integer, ForeignKey("agents.id"), nullable=False, index=True)
    transaction_type = Column(String(10), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    description = Column(String(500), nullable=False)
    policy_id = Column(Integer, nullable=True, index=True)
    customer_id = Column(Integer, nullable=True, index=True)
    vehicle_id = Column(Integer, nullable=True)
    insurance_type = Column(String(100), nullable=True)
    company_name = Column(String(150), nullable=True)
    insurance_total_amount = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    transaction_date = Column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    settled_date = Column(Date, nullable=True)
    notes = Column(String(1000), nullable=True)
    reverses_transaction_id = Column(
        Integer, ForeignKey("agent_transactions.id"), nullable=True
    )

    agent = relationship("Agent")

    # An entry can be reversed at most once
    __table_args__ = (
        Index(
            "uq_agent_transactions_reverses_transaction_id",
            "reverses_transaction_id",
            unique=True,
            postgresql_where=text("reverses_transaction_id IS NOT NULL"),
            sqlite_where=text("reverses_transaction_id IS NOT NULL"),
        ),
    )
