"""Create pharmacy_leads table

Revision ID: 002
Revises: 001
Create Date: 2025-10-31 00:00:01.000000

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "pharmacy_leads",
        sa.Column("phone_number", sa.String(), nullable=False),
        sa.Column("pharmacy_name", sa.String(), nullable=True),
        sa.Column("contact_person", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("estimated_rx_volume", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("phone_number"),
    )
    op.create_index(
        op.f("ix_pharmacy_leads_phone_number"),
        "pharmacy_leads",
        ["phone_number"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_pharmacy_leads_phone_number"), table_name="pharmacy_leads")
    op.drop_table("pharmacy_leads")
