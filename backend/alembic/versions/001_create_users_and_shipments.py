"""Create users and shipments tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema: `users` accounts and the `shipments` they own.
How:   Integer identity keys, TIMESTAMP WITH TIME ZONE, UNIQUE constraints on
       users.email and shipments.tracking_number.

Rollback: downgrade() drops both tables (shipments first, it references users).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "email",
            sa.String(255),
            nullable=False,
            comment="Login identifier, unique and case-sensitive",
        ),
        sa.Column(
            "password",
            sa.String(255),
            nullable=False,
            comment="bcrypt hash of the user's password",
        ),
        sa.Column("company_name", sa.String(255), nullable=True),
        sa.Column("contact_name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column(
            "is_admin",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "shipments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "tracking_number",
            sa.String(64),
            nullable=False,
            comment="Public identifier: TRK + epoch millis + random suffix",
        ),
        sa.Column(
            "user_id",
            sa.Integer(),
            nullable=False,
            comment="Owner of the shipment",
        ),
        sa.Column("sender_name", sa.String(255), nullable=False),
        sa.Column("sender_address", sa.String(500), nullable=False),
        sa.Column("recipient_name", sa.String(255), nullable=False),
        sa.Column("recipient_address", sa.String(500), nullable=False),
        sa.Column("package_description", sa.Text(), nullable=True),
        sa.Column("package_weight", sa.Float(), nullable=True),
        sa.Column("package_dimensions", sa.String(100), nullable=True),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'Pending'"),
            comment="Pending, InTransit, Delivered, Cancelled",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tracking_number"),
    )

    op.create_index("idx_shipments_user_id", "shipments", ["user_id"])
    op.create_index(
        "idx_shipments_created_at",
        "shipments",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    """Destructive: every account and shipment is lost."""
    op.drop_index("idx_shipments_created_at", table_name="shipments")
    op.drop_index("idx_shipments_user_id", table_name="shipments")
    op.drop_table("shipments")
    op.drop_table("users")
