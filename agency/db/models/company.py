from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from agency.db.base import Base

company_insurance_types = Table(
    "company_insurance_types",
    Base.metadata,
    Column("company_id", Integer, ForeignKey("insurance_companies.id"), primary_key=True),
    Column(
        "insurance_type_id", Integer, ForeignKey("insurance_types.id"), primary_key=True
    ),
)


class PricingType(Base):
    __tablename__ = "pricing_types"

    id = Column(String(32), primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(String(255), nullable=False, default="")
    requires_pricing_table = Column(Boolean, nullable=False, default=False)


class InsuranceType(Base):
    __tablename__ = "insurance_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    pricing_type_id = Column(String(32), ForeignKey("pricing_types.id"), nullable=False)
    description = Column(String(255), nullable=False, default="")

    pricing_type = relationship("PricingType")


class InsuranceCompany(Base):
    __tablename__ = "insurance_companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), unique=True, nullable=False)
    description = Column(String(255), nullable=False, default="")

    insurance_types = relationship(
        "InsuranceType",
        secondary=company_insurance_types,
        order_by="InsuranceType.id",
    )
