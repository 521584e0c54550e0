from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from src.guests.repository.orm_models import Guest, Invitation, RsvpResponse


@dataclass(frozen=True)
class RsvpResponseDTO:
    """DTO for a guest's attendance answer."""

    id: int
    guest_id: int
    invitation_id: int
    is_attending: bool
    responded_at: datetime | None = None

    @classmethod
    def from_rsvp_response(cls, response: "RsvpResponse") -> "RsvpResponseDTO":
        return cls(
            id=response.id,
            guest_id=response.guest_id,
            invitation_id=response.invitation_id,
            is_attending=response.is_attending,
            responded_at=response.responded_at,
        )


@dataclass(frozen=True)
class InvitationDTO:
    """DTO for a household invitation.

    `guests` and `rsvp_responses` are only populated when the read model
    loaded those relations.
    """

    id: int
    address: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    phone_number: str | None = None
    save_the_date_sent: bool = False
    invite_sent: bool = False
    table_number: int | None = None
    notes: str | None = None
    plus_one: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    guests: list["GuestDTO"] = field(default_factory=list)
    rsvp_responses: list[RsvpResponseDTO] = field(default_factory=list)

    @classmethod
    def from_invitation(
        cls,
        invitation: "Invitation",
        include_guests: bool = False,
        include_rsvp_responses: bool = False,
    ) -> "InvitationDTO":
        """Create InvitationDTO from the ORM model.

        Only touch relations the caller asked for, lazy loads are not
        available on async sessions. Guests are expected to come with their
        RSVP response loaded.
        """
        guests = []
        if include_guests:
            guests = [
                GuestDTO.from_guest(guest, include_rsvp_response=True)
                for guest in sorted(invitation.guests, key=lambda g: g.id)
            ]
        rsvp_responses = []
        if include_rsvp_responses:
            rsvp_responses = [
                RsvpResponseDTO.from_rsvp_response(response)
                for response in invitation.rsvp_responses
            ]
        return cls(
            id=invitation.id,
            address=invitation.address,
            address2=invitation.address2,
            city=invitation.city,
            state=invitation.state,
            zip=invitation.zip,
            country=invitation.country,
            phone_number=invitation.phone_number,
            save_the_date_sent=invitation.save_the_date_sent,
            invite_sent=invitation.invite_sent,
            table_number=invitation.table_number,
            notes=invitation.notes,
            plus_one=invitation.plus_one,
            created_at=invitation.created_at,
            updated_at=invitation.updated_at,
            guests=guests,
            rsvp_responses=rsvp_responses,
        )


@dataclass(frozen=True)
class GuestDTO:
    """DTO for guest data."""

    id: int
    first_name: str
    last_name: str = ""
    email: str | None = None
    dietary_restrictions: str | None = None
    menu_choice: str | None = None
    invitation_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    invitation: InvitationDTO | None = None
    rsvp_response: RsvpResponseDTO | None = None

    @classmethod
    def from_guest(
        cls,
        guest: "Guest",
        include_invitation: bool = False,
        include_rsvp_response: bool = False,
    ) -> "GuestDTO":
        """Create GuestDTO from the ORM model."""
        invitation = None
        if include_invitation and guest.invitation is not None:
            invitation = InvitationDTO.from_invitation(guest.invitation)
        rsvp_response = None
        if include_rsvp_response and guest.rsvp_response is not None:
            rsvp_response = RsvpResponseDTO.from_rsvp_response(guest.rsvp_response)
        return cls(
            id=guest.id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            email=guest.email,
            dietary_restrictions=guest.dietary_restrictions,
            menu_choice=guest.menu_choice,
            invitation_id=guest.invitation_id,
            created_at=guest.created_at,
            updated_at=guest.updated_at,
            invitation=invitation,
            rsvp_response=rsvp_response,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class InvitationStatsDTO:
    """Dashboard counters, recomputed on every read."""

    total_invitations: int
    total_guests: int
    responded_invitations: int
    attending_count: int
    not_attending_count: int

    @property
    def pending_invitations(self) -> int:
        return self.total_invitations - self.responded_invitations


@dataclass(frozen=True)
class ImportRowSuccessDTO:
    row_number: int
    guest_id: int
    invitation_id: int | None
    name: str


@dataclass(frozen=True)
class ImportRowErrorDTO:
    row: int
    error: str
    data: Any


@dataclass(frozen=True)
class ImportResultDTO:
    """Outcome of one import call: every processed row lands in exactly one list."""

    success: list[ImportRowSuccessDTO] = field(default_factory=list)
    errors: list[ImportRowErrorDTO] = field(default_factory=list)
    invitations_created: int = 0
