"""create pricing types, insurance types, companies and agents tables

Revision ID: 001
Revises:
Create Date: 2026-09-28 10:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create pricing_types table (fixed catalog, seeded below)
    pricing_types = op.create_table(
        "pricing_types",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("requires_pricing_table", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "insurance_types",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("pricing_type_id", sa.String(length=32), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False, server_default=""),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["pricing_type_id"], ["pricing_types.id"]),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_insurance_types_id", "insurance_types", ["id"], unique=False)

    op.create_table(
        "insurance_companies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False, server_default=""),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_insurance_companies_id", "insurance_companies", ["id"], unique=False)

    # Which insurance types each company sells
    op.create_table(
        "company_insurance_types",
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("insurance_type_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("company_id", "insurance_type_id"),
        sa.ForeignKeyConstraint(["company_id"], ["insurance_companies.id"]),
        sa.ForeignKeyConstraint(["insurance_type_id"], ["insurance_types.id"]),
    )

    op.create_table(
        "agents",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("phone_number", sa.String(length=30), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_agents_id", "agents", ["id"], unique=False)

    # Insert the five pricing types
    op.bulk_insert(
        pricing_types,
        [
            {
                "id": "compulsory",
                "name": "Compulsory Insurance",
                "description": "Mandatory insurance, value entered manually",
                "requires_pricing_table": False,
            },
            {
                "id": "third_party",
                "name": "Third Party Insurance",
                "description": "Priced by vehicle type, driver age and offer amount",
                "requires_pricing_table": True,
            },
            {
                "id": "comprehensive",
                "name": "Comprehensive Insurance",
                "description": "Priced by vehicle type, driver age and offer amount",
                "requires_pricing_table": True,
            },
            {
                "id": "road_service",
                "name": "Road Services",
                "description": "Priced per road service by vehicle manufacture year",
                "requires_pricing_table": False,
            },
            {
                "id": "accident_fee_waiver",
                "name": "Accident Fee Waiver",
                "description": "Fixed amount per company",
                "requires_pricing_table": True,
            },
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_agents_id", table_name="agents")
    op.drop_table("agents")
    op.drop_table("company_insurance_types")
    op.drop_index("ix_insurance_companies_id", table_name="insurance_companies")
    op.drop_table("insurance_companies")
    op.drop_index("ix_insurance_types_id", table_name="insurance_types")
    op.drop_table("insurance_types")
    op.drop_table("pricing_types")
