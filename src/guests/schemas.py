"""Request and response bodies shared by the guest, invitation and import routes."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    data: T
    message: str | None = None


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class RsvpResponseResponse(CamelModel):
    id: int
    guest_id: int
    invitation_id: int
    is_attending: bool
    responded_at: datetime | None = None


class InvitationResponse(CamelModel):
    id: int
    address: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    phone_number: str | None = None
    save_the_date_sent: bool
    invite_sent: bool
    table_number: int | None = None
    notes: str | None = None
    plus_one: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    guests: list["GuestResponse"] = []
    rsvp_responses: list[RsvpResponseResponse] = []


class GuestResponse(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str | None = None
    dietary_restrictions: str | None = None
    menu_choice: str | None = None
    invitation_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    invitation: InvitationResponse | None = None
    rsvp_response: RsvpResponseResponse | None = None


InvitationResponse.model_rebuild()


class InvitationStatsResponse(CamelModel):
    total_invitations: int
    total_guests: int
    responded_invitations: int
    attending_count: int
    not_attending_count: int
    pending_invitations: int


class GuestFields(CamelModel):
    """Optional guest text fields; the admin form sends "" for an empty input."""

    email: str | None = None
    dietary_restrictions: str | None = None
    menu_choice: str | None = None

    @field_validator("email", "dietary_restrictions", "menu_choice", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class GuestCreate(GuestFields):
    first_name: str = Field(min_length=1)
    last_name: str = ""
    invitation_id: int | None = None


class GuestUpdate(GuestFields):
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = None
    invitation_id: int | None = None

    def to_fields(self) -> dict:
        fields = self.model_dump(exclude_unset=True)
        # names are required columns, null means "leave as is"
        for name in ("first_name", "last_name"):
            if fields.get(name) is None:
                fields.pop(name, None)
        return fields


class InvitationFields(CamelModel):
    """Editable invitation fields, shared by create and update."""

    address: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    phone_number: str | None = None
    save_the_date_sent: bool | None = None
    invite_sent: bool | None = None
    table_number: int | None = None
    notes: str | None = None
    plus_one: bool | None = None

    def to_fields(self) -> dict:
        """Only the fields the client actually sent, flags left out when null."""
        fields = self.model_dump(exclude_unset=True)
        for flag in ("save_the_date_sent", "invite_sent", "plus_one"):
            if fields.get(flag) is None:
                fields.pop(flag, None)
        return fields
