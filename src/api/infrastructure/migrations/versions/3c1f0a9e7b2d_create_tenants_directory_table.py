"""create tenants directory table

Revision ID: 3c1f0a9e7b2d
Revises:
Create Date: 2026-10-18 10:04:51.218730

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3c1f0a9e7b2d"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(length=26), nullable=False),  # ULID
        sa.Column("identifier", sa.String(length=30), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("company_email", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("plan", sa.String(length=20), nullable=False),
        sa.Column("database_name", sa.String(length=63), nullable=False),
        sa.Column("connection_url", sa.String(length=1024), nullable=True),
        sa.Column("is_shared", sa.Boolean(), nullable=False),
        sa.Column("trial_ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("limits", sa.JSON(), nullable=False),
        sa.Column("features", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    # Tenant identifiers are globally unique
    op.create_index(
        "ix_tenants_identifier", "tenants", ["identifier"], unique=True
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_tenants_identifier", table_name="tenants")
    op.drop_table("tenants")
