"""Create steam_links table.

Revision ID: 0001_create_steam_links
Revises:
Create Date: 2026-03-02 00:00:00
"""

import sqlalchemy as sa

from alembic import op  # type: ignore

# revision identifiers, used by Alembic.
revision = "0001_create_steam_links"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "steam_links",
        sa.Column("id", sa.Uuid(), nullable=False, comment="主键 (UUID v7)"),
        sa.Column(
            "wallet_address",
            sa.String(length=42),
            nullable=False,
            comment="钱包地址 (0x + 40 hex)",
        ),
        sa.Column("steam_id", sa.String(length=17), nullable=True, comment="SteamID64"),
        sa.Column("steam_username", sa.String(length=255), nullable=True),
        sa.Column("steam_avatar", sa.String(length=512), nullable=True),
        sa.Column("steam_profile_url", sa.String(length=512), nullable=True),
        sa.Column("trade_url", sa.String(length=512), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_steam_links"),
        sa.UniqueConstraint("wallet_address", name="uq_steam_links_wallet_address"),
        sa.UniqueConstraint("steam_id", name="uq_steam_links_steam_id"),
        sa.CheckConstraint(
            "length(wallet_address) = 42", name="ck_steam_links_wallet_length"
        ),
        sa.CheckConstraint(
            "steam_id IS NULL OR length(steam_id) = 17",
            name="ck_steam_links_steam_id_length",
        ),
    )


def downgrade() -> None:
    op.drop_table("steam_links")
