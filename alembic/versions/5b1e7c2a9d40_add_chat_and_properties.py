"""add chat sessions, messages and properties

Revision ID: 5b1e7c2a9d40
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5b1e7c2a9d40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "chatsession",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_name", sa.String(length=120), nullable=False),
        sa.Column("user_email", sa.String(length=255), nullable=False),
        sa.Column("user_phone", sa.String(length=32), nullable=False),
        sa.Column("locale", sa.String(length=8), nullable=False),
        sa.Column(
            "status",
            sa.Enum("bot", "live_waiting", "live_active", name="chatstatus"),
            nullable=False,
        ),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("admin_typing", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_chatsession_status", "chatsession", ["status"])

    op.create_table(
        "message",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.String(length=36), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "sender",
            sa.Enum("user", "bot", "operator", name="messagesender"),
            nullable=False,
        ),
        sa.Column("sender_name", sa.String(length=120), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["session_id"], ["chatsession.id"], ondelete="CASCADE"
        ),
    )
    op.create_index("ix_message_session_id", "message", ["session_id"])
    op.create_index("ix_message_created_at", "message", ["created_at"])

    op.create_table(
        "property",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=256), nullable=False),
        sa.Column("type", sa.String(length=64), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("sub_category", sa.String(length=64), nullable=True),
        sa.Column("price", sa.String(length=64), nullable=False),
        sa.Column("currency", sa.String(length=8), nullable=False),
        sa.Column("location", sa.String(length=256), nullable=False),
        sa.Column("area", sa.Integer(), nullable=False),
        sa.Column("area_net", sa.Integer(), nullable=True),
        sa.Column("rooms", sa.String(length=16), nullable=False),
        sa.Column("bathrooms", sa.Integer(), nullable=False),
        sa.Column("heating", sa.String(length=64), nullable=True),
        sa.Column("kitchen", sa.String(length=64), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_property_is_active", "property", ["is_active"])
    op.create_index("ix_property_created_at", "property", ["created_at"])

    op.create_table(
        "photo",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("property_id", sa.String(length=36), nullable=False),
        sa.Column("url", sa.String(length=1056), nullable=False),
        sa.Column("is_main", sa.Boolean(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(
            ["property_id"], ["property.id"], ondelete="CASCADE"
        ),
    )
    op.create_index("ix_photo_property_id", "photo", ["property_id"])


def downgrade() -> None:
    op.drop_index("ix_photo_property_id", table_name="photo")
    op.drop_table("photo")
    op.drop_index("ix_property_created_at", table_name="property")
    op.drop_index("ix_property_is_active", table_name="property")
    op.drop_table("property")
    op.drop_index("ix_message_created_at", table_name="message")
    op.drop_index("ix_message_session_id", table_name="message")
    op.drop_table("message")
    op.drop_index("ix_chatsession_status", table_name="chatsession")
    op.drop_table("chatsession")
    op.execute("DROP TYPE IF EXISTS messagesender")
    op.execute("DROP TYPE IF EXISTS chatstatus")
