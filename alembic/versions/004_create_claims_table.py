"""create claims table

Revision ID: 004
Revises: 003
Create Date: 2026-09-14 10:15:00.000000

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
        "claims",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("policy_id", sa.Integer(), nullable=False),
        sa.Column("claimant", sa.String(length=255), nullable=False),
        sa.Column("claim_amount", sa.BigInteger(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("submitted_at", sa.BigInteger(), nullable=False),
        sa.Column("decided_by", sa.String(length=255), nullable=True),
        sa.Column("decided_at", sa.BigInteger(), nullable=True),
        sa.Column("paid_at", sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["policy_id"], ["policies.id"]),
        sa.CheckConstraint("claim_amount > 0", name="ck_claims_claim_amount_positive"),
        sa.CheckConstraint(
            "status IN ('SUBMITTED', 'APPROVED', 'REJECTED', "
            "'PAYOUT_IN_FLIGHT', 'PAYOUT_FAILED', 'PAID_OUT')",
            name="ck_claims_status",
        ),
    )
    op.create_index("ix_claims_id", "claims", ["id"], unique=False)
    op.create_index("ix_claims_policy_id", "claims", ["policy_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_claims_policy_id", table_name="claims")
    op.drop_index("ix_claims_id", table_name="claims")
    op.drop_table("claims")
