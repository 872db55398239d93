"""socks stock lots

Revision ID: 0001_socks
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_socks"
down_revision = None
branch_labels = None
depends_on = None


class GUID(sa.TypeDecorator):
    impl = sa.CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(sa.CHAR(36))


def upgrade() -> None:
    op.create_table(
        "socks",
        sa.Column("id", GUID(), primary_key=True, nullable=False),
        sa.Column("color", sa.String(length=100), nullable=False),
        sa.Column("cotton_percentage", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("color", "cotton_percentage", name="uq_socks_color_cotton"),
        sa.CheckConstraint("quantity >= 0", name="ck_socks_quantity_non_negative"),
        sa.CheckConstraint(
            "cotton_percentage >= 0 AND cotton_percentage <= 100",
            name="ck_socks_cotton_percentage_range",
        ),
    )
    op.create_index("ix_socks_color", "socks", ["color"])


def downgrade() -> None:
    op.drop_index("ix_socks_color", table_name="socks")
    op.drop_table("socks")
