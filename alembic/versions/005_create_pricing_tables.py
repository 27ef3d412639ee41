"""create pricing rules and road services tables

Revision ID: 005
Revises: 004
Create Date: 2026-09-28 10:40:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "pricing_rules",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("pricing_type_id", sa.String(length=32), nullable=False),
        sa.Column("rules", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["company_id"], ["insurance_companies.id"]),
        sa.ForeignKeyConstraint(["pricing_type_id"], ["pricing_types.id"]),
        # One rule set per company and pricing type
        sa.UniqueConstraint(
            "company_id", "pricing_type_id", name="uq_pricing_rules_company_type"
        ),
    )
    op.create_index("ix_pricing_rules_id", "pricing_rules", ["id"], unique=False)
    op.create_index("ix_pricing_rules_company_id", "pricing_rules", ["company_id"], unique=False)

    op.create_table(
        "road_services",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("service_name", sa.String(length=150), nullable=False),
        sa.Column("normal_price", sa.Integer(), nullable=False),
        sa.Column("old_car_price", sa.Integer(), nullable=False),
        sa.Column("cutoff_year", sa.Integer(), nullable=False, server_default="2007"),
        sa.Column("description", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["company_id"], ["insurance_companies.id"]),
        sa.UniqueConstraint(
            "company_id", "service_name", name="uq_road_services_company_name"
        ),
        sa.CheckConstraint("normal_price >= 0", name="ck_road_services_normal_price_non_negative"),
        sa.CheckConstraint("old_car_price >= 0", name="ck_road_services_old_car_price_non_negative"),
    )
    op.create_index("ix_road_services_id", "road_services", ["id"], unique=False)
    op.create_index("ix_road_services_company_id", "road_services", ["company_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_road_services_company_id", table_name="road_services")
    op.drop_index("ix_road_services_id", table_name="road_services")
    op.drop_table("road_services")
    op.drop_index("ix_pricing_rules_company_id", table_name="pricing_rules")
    op.drop_index("ix_pricing_rules_id", table_name="pricing_rules")
    op.drop_table("pricing_rules")
