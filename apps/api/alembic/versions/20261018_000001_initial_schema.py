"""create initial schema

Revision ID: 20261018_000001
Revises:
Create Date: 2026-10-18 00:00:01.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _item_columns() -> list:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("image_url", sa.String(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("google_id", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("avatar", sa.String(length=500), nullable=True),
        sa.Column("display_name", sa.String(length=100), nullable=True),
        sa.Column("discoverable", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("profile_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_google_id"), "users", ["google_id"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_display_name"), "users", ["display_name"], unique=True)

    op.create_table(
        "cheeses",
        *_item_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=255), nullable=False),
        sa.Column("origin", sa.String(length=255), nullable=True),
        sa.Column("producer", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "gins",
        *_item_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("producer", sa.String(length=255), nullable=False),
        sa.Column("origin", sa.String(length=255), nullable=True),
        sa.Column("profile", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", "producer", name="uq_gins_name_producer"),
    )

    op.create_table(
        "wines",
        *_item_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("producer", sa.String(length=255), nullable=True),
        sa.Column("country", sa.String(length=255), nullable=False),
        sa.Column("region", sa.String(length=255), nullable=True),
        sa.Column("color", sa.String(length=50), nullable=False),
        sa.Column("grape", sa.String(length=255), nullable=True),
        sa.Column("alcohol", sa.Float(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("designation", sa.String(length=255), nullable=True),
        sa.Column("sugar", sa.Float(), nullable=True),
        sa.Column("organic", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", "color", name="uq_wines_name_color"),
    )

    op.create_table(
        "coffees",
        *_item_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("roaster", sa.String(length=255), nullable=False),
        sa.Column("country", sa.String(length=255), nullable=True),
        sa.Column("region", sa.String(length=255), nullable=True),
        sa.Column("farm", sa.String(length=255), nullable=True),
        sa.Column("altitude", sa.String(length=50), nullable=True),
        sa.Column("species", sa.String(length=50), nullable=True),
        sa.Column("variety", sa.String(length=100), nullable=True),
        sa.Column("processing_method", sa.String(length=100), nullable=True),
        sa.Column("decaffeinated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("roast_level", sa.String(length=50), nullable=True),
        sa.Column("tasting_notes", sa.JSON(), nullable=True),
        sa.Column("acidity", sa.String(length=50), nullable=True),
        sa.Column("body", sa.String(length=50), nullable=True),
        sa.Column("sweetness", sa.String(length=50), nullable=True),
        sa.Column("organic", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("fair_trade", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", "roaster", name="uq_coffees_name_roaster"),
    )

    op.create_table(
        "chili_sauces",
        *_item_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("brand", sa.String(length=255), nullable=False),
        sa.Column("spice_level", sa.String(length=50), nullable=False),
        sa.Column("chilis", sa.String(length=500), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", "brand", name="uq_chili_sauces_name_brand"),
    )

    op.create_table(
        "ratings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("grade", sa.Float(), nullable=False),
        sa.Column("note", sa.Text(), nullable=False, server_default=""),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("item_type", sa.String(length=50), nullable=False),
        sa.Column("item_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_ratings_user_id"), "ratings", ["user_id"], unique=False)
    op.create_index(op.f("ix_ratings_item_type"), "ratings", ["item_type"], unique=False)
    op.create_index(op.f("ix_ratings_item_id"), "ratings", ["item_id"], unique=False)

    op.create_table(
        "rating_viewers",
        sa.Column("rating_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["rating_id"], ["ratings.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("rating_id", "user_id"),
    )
    op.create_index(op.f("ix_rating_viewers_user_id"), "rating_viewers", ["user_id"], unique=False)

    op.create_table(
        "sharing_relationships",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("viewer_id", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("last_shared_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["viewer_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("owner_id", "viewer_id", name="uq_sharing_relationship"),
    )
    op.create_index(op.f("ix_sharing_relationships_owner_id"), "sharing_relationships", ["owner_id"], unique=False)
    op.create_index(op.f("ix_sharing_relationships_viewer_id"), "sharing_relationships", ["viewer_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_sharing_relationships_viewer_id"), table_name="sharing_relationships")
    op.drop_index(op.f("ix_sharing_relationships_owner_id"), table_name="sharing_relationships")
    op.drop_table("sharing_relationships")
    op.drop_index(op.f("ix_rating_viewers_user_id"), table_name="rating_viewers")
    op.drop_table("rating_viewers")
    op.drop_index(op.f("ix_ratings_item_id"), table_name="ratings")
    op.drop_index(op.f("ix_ratings_item_type"), table_name="ratings")
    op.drop_index(op.f("ix_ratings_user_id"), table_name="ratings")
    op.drop_table("ratings")
    op.drop_table("chili_sauces")
    op.drop_table("coffees")
    op.drop_table("wines")
    op.drop_table("gins")
    op.drop_table("cheeses")
    op.drop_index(op.f("ix_users_display_name"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_google_id"), table_name="users")
    op.drop_table("users")
