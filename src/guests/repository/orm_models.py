from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp


class Invitation(Base, TimeStamp):
    __tablename__ = TableNames.INVITATIONS.value

    # Mailing address
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address2: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    state: Mapped[str | None] = mapped_column(String(255), nullable=True)
    zip: Mapped[str | None] = mapped_column(String(50), nullable=True)
    country: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Mailing progress
    save_the_date_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    invite_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Reception logistics
    table_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    plus_one: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    guests: Mapped[list["Guest"]] = relationship(
        "Guest",
        back_populates="invitation",
        cascade="all, delete",
        passive_deletes=True,
    )
    rsvp_responses: Mapped[list["RsvpResponse"]] = relationship(
        "RsvpResponse",
        back_populates="invitation",
        cascade="all, delete",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Invitation {self.id} {self.address or ''}>"


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value

    first_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, default="", index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)
    menu_choice: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Nullable: a guest without an invitation is "unassigned"
    invitation_id: Mapped[int | None] = mapped_column(
        ForeignKey(f"{TableNames.INVITATIONS.value}.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    invitation: Mapped["Invitation | None"] = relationship("Invitation", back_populates="guests")
    rsvp_response: Mapped["RsvpResponse | None"] = relationship(
        "RsvpResponse",
        back_populates="guest",
        uselist=False,
        cascade="all, delete",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Guest {self.first_name} {self.last_name}>"


class RsvpResponse(Base):
    __tablename__ = TableNames.RSVP_RESPONSES.value

    guest_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    # Denormalized copy of the guest's invitation, used for response counts
    invitation_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.INVITATIONS.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_attending: Mapped[bool] = mapped_column(Boolean, nullable=False)
    responded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=sa.func.current_timestamp(),
        nullable=False,
    )

    guest: Mapped["Guest"] = relationship("Guest", back_populates="rsvp_response")
    invitation: Mapped["Invitation"] = relationship("Invitation", back_populates="rsvp_responses")

    def __repr__(self) -> str:
        return f"<RsvpResponse guest={self.guest_id} attending={self.is_attending}>"
