"""create invitations, guests and rsvp_responses

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 12:00:00

"""
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9b7d10"
down_revision: Union[str, None] = None
branch_labels: Union[str, None] = None
depends_on: Union[str, None] = None


def upgrade() -> None:
    op.create_table(
        "invitations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("address2", sa.String(255), nullable=True),
        sa.Column("city", sa.String(255), nullable=True),
        sa.Column("state", sa.String(255), nullable=True),
        sa.Column("zip", sa.String(50), nullable=True),
        sa.Column("country", sa.String(255), nullable=True),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("save_the_date_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("invite_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("table_number", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("plus_one", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
    )

    op.create_table(
        "guests",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("last_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("dietary_restrictions", sa.Text(), nullable=True),
        sa.Column("menu_choice", sa.String(255), nullable=True),
        sa.Column(
            "invitation_id",
            sa.Integer(),
            sa.ForeignKey("invitations.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
    )
    op.create_index("ix_guests_first_name", "guests", ["first_name"])
    op.create_index("ix_guests_last_name", "guests", ["last_name"])
    op.create_index("ix_guests_invitation_id", "guests", ["invitation_id"])

    op.create_table(
        "rsvp_responses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "guest_id",
            sa.Integer(),
            sa.ForeignKey("guests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "invitation_id",
            sa.Integer(),
            sa.ForeignKey("invitations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("is_attending", sa.Boolean(), nullable=False),
        sa.Column(
            "responded_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
    )
    op.create_index("ix_rsvp_responses_guest_id", "rsvp_responses", ["guest_id"], unique=True)
    op.create_index("ix_rsvp_responses_invitation_id", "rsvp_responses", ["invitation_id"])


def downgrade() -> None:
    op.drop_index("ix_rsvp_responses_invitation_id", table_name="rsvp_responses")
    op.drop_index("ix_rsvp_responses_guest_id", table_name="rsvp_responses")
    op.drop_table("rsvp_responses")
    op.drop_index("ix_guests_invitation_id", table_name="guests")
    op.drop_index("ix_guests_last_name", table_name="guests")
    op.drop_index("ix_guests_first_name", table_name="guests")
    op.drop_table("guests")
    op.drop_table("invitations")
