"""create payout_attempts table

Revision ID: 005
Revises: 004
Create Date: 2026-09-14 10:20:00.000000

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
        "payout_attempts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("claim_id", sa.Integer(), nullable=False),
        sa.Column("recipient", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("transfer_reference", sa.String(length=255), nullable=True),
        sa.Column("failure_reason", sa.Text(), nullable=True),
        sa.Column("started_at", sa.BigInteger(), nullable=False),
        sa.Column("completed_at", sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["claim_id"], ["claims.id"]),
        sa.CheckConstraint(
            "status IN ('IN_FLIGHT', 'SUCCEEDED', 'FAILED')",
            name="ck_payout_attempts_status",
        ),
    )
    op.create_index("ix_payout_attempts_id", "payout_attempts", ["id"], unique=False)
    op.create_index(
        "ix_payout_attempts_claim_id", "payout_attempts", ["claim_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_payout_attempts_claim_id", table_name="payout_attempts")
    op.drop_index("ix_payout_attempts_id", table_name="payout_attempts")
    op.drop_table("payout_attempts")
