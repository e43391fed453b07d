"""create policies table

Revision ID: 003
Revises: 002
Create Date: 2026-09-14 10:10:00.000000

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
        "policies",
        # Ids come from id_sequences, not from the database
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("policyholder", sa.String(length=255), nullable=False),
        sa.Column("premium", sa.BigInteger(), nullable=False),
        sa.Column("coverage_amount", sa.BigInteger(), nullable=False),
        sa.Column("expiration", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("issued_by", sa.String(length=255), nullable=False),
        sa.Column("issued_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("premium > 0", name="ck_policies_premium_positive"),
        sa.CheckConstraint(
            "coverage_amount > 0", name="ck_policies_coverage_amount_positive"
        ),
        sa.CheckConstraint(
            "status IN ('ACTIVE', 'INACTIVE')", name="ck_policies_status"
        ),
    )
    op.create_index("ix_policies_id", "policies", ["id"], unique=False)
    op.create_index("ix_policies_policyholder", "policies", ["policyholder"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_policies_policyholder", table_name="policies")
    op.drop_index("ix_policies_id", table_name="policies")
    op.drop_table("policies")
