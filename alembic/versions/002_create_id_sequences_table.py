"""create id_sequences table

Revision ID: 002
Revises: 001
Create Date: 2026-09-14 10:05:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # One counter row per entity kind; ids start at 1
    op.create_table(
        "id_sequences",
        sa.Column("kind", sa.String(length=32), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("kind"),
        sa.CheckConstraint("value >= 0", name="ck_id_sequences_value_non_negative"),
    )

    op.execute(
        sa.text("INSERT INTO id_sequences (kind, value) VALUES ('policy', 0), ('claim', 0)")
    )


def downgrade() -> None:
    op.drop_table("id_sequences")
