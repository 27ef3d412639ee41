from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from agency.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Customer(Base):
    """Aggregate root: every policy/payment mutation bumps ``version``."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    id_number = Column(String(30), unique=True, nullable=False, index=True)
    phone_number = Column(String(30), nullable=False)
    email = Column(String(320), nullable=True)
    city = Column(String(100), nullable=True)
    agent_id = Column(Integer, ForeignKey("agents.id"), nullable=True)
    joined_at = Column(DateTime, nullable=False, default=_utcnow)
    updated_at = Column(DateTime, nullable=False, default=_utcnow)
    version = Column(Integer, nullable=False)

    vehicles = relationship("Vehicle", back_populates="customer", order_by="Vehicle.id")
    agent = relationship("Agent")

    __mapper_args__ = {"version_id_col": version}

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def touch(self) -> None:
        """Mark the aggregate as changed so the version token is checked and bumped."""
        self.updated_at = _utcnow()


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    plate_number = Column(String(20), nullable=False, index=True)
    model = Column(String(100), nullable=False)
    vehicle_type = Column(String(50), nullable=False)
    manufacture_year = Column(Integer, nullable=True)

    customer = relationship("Customer", back_populates="vehicles")
    policies = relationship("Policy", back_populates="vehicle", order_by="Policy.id")
