"""create agent transactions table

Revision ID: 004
Revises: 003
Create Date: 2026-09-28 10:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "agent_transactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("agent_id", sa.Integer(), nullable=False),
        sa.Column("transaction_type", sa.String(length=10), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        # Weak references so entries survive policy transfers
        sa.Column("policy_id", sa.Integer(), nullable=True),
        sa.Column("customer_id", sa.Integer(), nullable=True),
        sa.Column("vehicle_id", sa.Integer(), nullable=True),
        sa.Column("insurance_type", sa.String(length=100), nullable=True),
        sa.Column("company_name", sa.String(length=150), nullable=True),
        sa.Column("insurance_total_amount", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("transaction_date", sa.DateTime(), nullable=False),
        sa.Column("settled_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        sa.Column("reverses_transaction_id", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["agent_id"], ["agents.id"]),
        sa.ForeignKeyConstraint(["reverses_transaction_id"], ["agent_transactions.id"]),
        sa.CheckConstraint("amount > 0", name="ck_agent_transactions_amount_positive"),
        sa.CheckConstraint(
            "transaction_type IN ('credit', 'debit')",
            name="ck_agent_transactions_type",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'settled', 'cancelled')",
            name="ck_agent_transactions_status",
        ),
    )
    op.create_index("ix_agent_transactions_id", "agent_transactions", ["id"], unique=False)
    op.create_index("ix_agent_transactions_agent_id", "agent_transactions", ["agent_id"], unique=False)
    op.create_index(
        "ix_agent_transactions_transaction_type",
        "agent_transactions",
        ["transaction_type"],
        unique=False,
    )
    op.create_index("ix_agent_transactions_policy_id", "agent_transactions", ["policy_id"], unique=False)
    op.create_index(
        "ix_agent_transactions_customer_id", "agent_transactions", ["customer_id"], unique=False
    )
    op.create_index("ix_agent_transactions_status", "agent_transactions", ["status"], unique=False)
    op.create_index(
        "uq_agent_transactions_reverses_transaction_id",
        "agent_transactions",
        ["reverses_transaction_id"],
        unique=True,
        postgresql_where=sa.text("reverses_transaction_id IS NOT NULL"),
        sqlite_where=sa.text("reverses_transaction_id IS NOT NULL"),
    )


def downgrade() -> None:
    op.drop_index(
        "uq_agent_transactions_reverses_transaction_id", table_name="agent_transactions"
    )
    op.drop_index("ix_agent_transactions_status", table_name="agent_transactions")
    op.drop_index("ix_agent_transactions_customer_id", table_name="agent_transactions")
    op.drop_index("ix_agent_transactions_policy_id", table_name="agent_transactions")
    op.drop_index("ix_agent_transactions_transaction_type", table_name="agent_transactions")
    op.drop_index("ix_agent_transactions_agent_id", table_name="agent_transactions")
    op.drop_index("ix_agent_transactions_id", table_name="agent_transactions")
    op.drop_table("agent_transactions")
