"""create expenses and revenues tables

Revision ID: 006
Revises: 005
Create Date: 2026-09-28 10:50:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("paid_by", sa.String(length=150), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=False, server_default="cash"),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("receipt_number", sa.String(length=50), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("amount >= 0", name="ck_expenses_amount_non_negative"),
    )
    op.create_index("ix_expenses_id", "expenses", ["id"], unique=False)

    op.create_table(
        "revenues",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("received_from", sa.String(length=150), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=False, server_default="cash"),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("receipt_number", sa.String(length=50), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("from_vehicle_plate", sa.String(length=20), nullable=True),
        sa.Column("to_vehicle_plate", sa.String(length=20), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("amount >= 0", name="ck_revenues_amount_non_negative"),
    )
    op.create_index("ix_revenues_id", "revenues", ["id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_revenues_id", table_name="revenues")
    op.drop_table("revenues")
    op.drop_index("ix_expenses_id", table_name="expenses")
    op.drop_table("expenses")
