"""create cheques, policies and payments tables

Revision ID: 003
Revises: 002
Create Date: 2026-09-28 10:20:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "cheques",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("cheque_number", sa.String(length=50), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        # Weak references: policies are re-created on transfer
        sa.Column("policy_id", sa.Integer(), nullable=True),
        sa.Column("vehicle_id", sa.Integer(), nullable=True),
        sa.Column("cheque_date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("notes", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("cleared_date", sa.Date(), nullable=True),
        sa.Column("returned_date", sa.Date(), nullable=True),
        sa.Column("returned_reason", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        sa.CheckConstraint("amount > 0", name="ck_cheques_amount_positive"),
        sa.CheckConstraint(
            "status IN ('pending', 'cleared', 'returned', 'cancelled')",
            name="ck_cheques_status",
        ),
    )
    op.create_index("ix_cheques_id", "cheques", ["id"], unique=False)
    op.create_index("ix_cheques_cheque_number", "cheques", ["cheque_number"], unique=False)
    op.create_index("ix_cheques_customer_id", "cheques", ["customer_id"], unique=False)
    op.create_index("ix_cheques_policy_id", "cheques", ["policy_id"], unique=False)
    op.create_index("ix_cheques_cheque_date", "cheques", ["cheque_date"], unique=False)
    op.create_index("ix_cheques_status", "cheques", ["status"], unique=False)

    op.create_table(
        "policies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("vehicle_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("insurance_type", sa.String(length=100), nullable=False),
        sa.Column("is_under_24", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("agent_id", sa.Integer(), nullable=True),
        sa.Column("agent_flow", sa.String(length=20), nullable=False, server_default="none"),
        sa.Column("agent_amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("insurance_amount", sa.Integer(), nullable=False),
        sa.Column("paid_amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("remaining_debt", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("refund_amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cancelled_at", sa.DateTime(), nullable=True),
        sa.Column("transferred_from_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"]),
        sa.ForeignKeyConstraint(["company_id"], ["insurance_companies.id"]),
        sa.ForeignKeyConstraint(["agent_id"], ["agents.id"]),
        # CHECK constraints: the debt figures can never go negative
        sa.CheckConstraint("insurance_amount > 0", name="ck_policies_insurance_amount_positive"),
        sa.CheckConstraint("paid_amount >= 0", name="ck_policies_paid_amount_non_negative"),
        sa.CheckConstraint("remaining_debt >= 0", name="ck_policies_remaining_debt_non_negative"),
        sa.CheckConstraint("agent_amount >= 0", name="ck_policies_agent_amount_non_negative"),
        sa.CheckConstraint("refund_amount >= 0", name="ck_policies_refund_amount_non_negative"),
        sa.CheckConstraint(
            "agent_flow IN ('none', 'to_agent', 'from_agent')",
            name="ck_policies_agent_flow",
        ),
        sa.CheckConstraint("status IN ('active', 'cancelled')", name="ck_policies_status"),
    )
    op.create_index("ix_policies_id", "policies", ["id"], unique=False)
    op.create_index("ix_policies_vehicle_id", "policies", ["vehicle_id"], unique=False)
    op.create_index("ix_policies_company_id", "policies", ["company_id"], unique=False)
    op.create_index("ix_policies_status", "policies", ["status"], unique=False)

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("policy_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("method", sa.String(length=20), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("receipt_number", sa.String(length=50), nullable=False),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("cheque_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["policy_id"], ["policies.id"]),
        sa.ForeignKeyConstraint(["cheque_id"], ["cheques.id"]),
        sa.CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
        sa.CheckConstraint(
            "method IN ('cash', 'card', 'cheque', 'bank_transfer')",
            name="ck_payments_method",
        ),
    )
    op.create_index("ix_payments_id", "payments", ["id"], unique=False)
    op.create_index("ix_payments_policy_id", "payments", ["policy_id"], unique=False)
    op.create_index("ix_payments_cheque_id", "payments", ["cheque_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_payments_cheque_id", table_name="payments")
    op.drop_index("ix_payments_policy_id", table_name="payments")
    op.drop_index("ix_payments_id", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_policies_status", table_name="policies")
    op.drop_index("ix_policies_company_id", table_name="policies")
    op.drop_index("ix_policies_vehicle_id", table_name="policies")
    op.drop_index("ix_policies_id", table_name="policies")
    op.drop_table("policies")
    op.drop_index("ix_cheques_status", table_name="cheques")
    op.drop_index("ix_cheques_cheque_date", table_name="cheques")
    op.drop_index("ix_cheques_policy_id", table_name="cheques")
    op.drop_index("ix_cheques_customer_id", table_name="cheques")
    op.drop_index("ix_cheques_cheque_number", table_name="cheques")
    op.drop_index("ix_cheques_id", table_name="cheques")
    op.drop_table("cheques")
