"""create registry and insurers tables

Revision ID: 001
Revises:
Create Date: 2026-09-14 10:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from app.core.config import settings


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Single-row table holding the administrator principal
    op.create_table(
        "registry",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("administrator", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("id = 1", name="ck_registry_single_row"),
    )

    op.create_table(
        "insurers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("principal", sa.String(length=255), nullable=False),
        sa.Column("granted_by", sa.String(length=255), nullable=False),
        sa.Column("granted_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("principal", name="uq_insurers_principal"),
    )
    op.create_index("ix_insurers_id", "insurers", ["id"], unique=False)
    op.create_index("ix_insurers_principal", "insurers", ["principal"], unique=False)

    # Seed the administrator from configuration
    op.execute(
        sa.text("INSERT INTO registry (id, administrator) VALUES (1, :administrator)")
        .bindparams(administrator=settings.administrator_principal)
    )


def downgrade() -> None:
    op.drop_index("ix_insurers_principal", table_name="insurers")
    op.drop_index("ix_insurers_id", table_name="insurers")
    op.drop_table("insurers")
    op.drop_table("registry")
