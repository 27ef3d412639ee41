from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from agency.db.base import Base


class PricingRule(Base):
    __tablename__ = "pricing_rules"
    __table_args__ = (
        UniqueConstraint(
            "company_id", "pricing_type_id", name="uq_pricing_rules_company_type"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(
        Integer, ForeignKey("insurance_companies.id"), nullable=False, index=True
    )
    pricing_type_id = Column(String(32), ForeignKey("pricing_types.id"), nullable=False)
    rules = Column(JSON, nullable=False, default=dict)

    company = relationship("InsuranceCompany")


class RoadService(Base):
    __tablename__ = "road_services"
    __table_args__ = (
        UniqueConstraint(
            "company_id", "service_name", name="uq_road_services_company_name"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(
        Integer, ForeignKey("insurance_companies.id"), nullable=False, index=True
    )
    service_name = Column(String(150), nullable=False)
    normal_price = Column(Integer, nullable=False)
    old_car_price = Column(Integer, nullable=False)
    cutoff_year = Column(Integer, nullable=False, default=2007)
    description = Column(String(255), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)

    company = relationship("InsuranceCompany")
