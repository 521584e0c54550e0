from fastapi import APIRouter, Depends, Query

from src.errors import ValidationError
from src.guests.dtos import GuestDTO, InvitationDTO
from src.guests.repository.read_models import GuestReadModel, SqlGuestReadModel
from src.guests.repository.write_models import GuestWriteModel, SqlGuestWriteModel
from src.guests.schemas import (
    ApiResponse,
    CamelModel,
    GuestCreate,
    GuestResponse,
    GuestUpdate,
    InvitationResponse,
    MessageResponse,
)
from src.guests.urls import (
    GUEST_SEARCH_URL,
    GUEST_URL,
    GUESTS_BULK_DELETE_URL,
    GUESTS_BY_INVITATION_URL,
    GUESTS_URL,
)

router = APIRouter()


class BulkDeleteRequest(CamelModel):
    guest_ids: list[int] | None = None


def get_guest_read_model() -> GuestReadModel:
    """Dependency to get guest read model instance."""
    return SqlGuestReadModel()


def get_guest_write_model() -> GuestWriteModel:
    """Dependency to get guest write model instance."""
    return SqlGuestWriteModel()


def unique_invitations(guests: list[GuestDTO]) -> list[InvitationDTO]:
    """Invitations of the given guests, first encounter wins, unassigned guests skipped."""
    invitations: dict[int, InvitationDTO] = {}
    for guest in guests:
        if guest.invitation is not None and guest.invitation.id not in invitations:
            invitations[guest.invitation.id] = guest.invitation
    return list(invitations.values())


@router.get(GUESTS_URL, response_model=ApiResponse[list[GuestResponse]])
async def list_guests(
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> ApiResponse[list[GuestResponse]]:
    """All guests by last name, with their invitation and RSVP response."""
    guests = await read_model.list_guests()
    return ApiResponse(data=[GuestResponse.model_validate(guest) for guest in guests])


@router.get(GUEST_SEARCH_URL, response_model=ApiResponse[list[InvitationResponse]])
async def search_guests(
    q: str | None = Query(None, description="Part of a first or last name"),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> ApiResponse[list[InvitationResponse]]:
    """
    Find the invitations of guests whose name contains the search term.
    Used by the RSVP lookup, so each invitation is returned once.
    """
    if not q:
        raise ValidationError("Search term is required")
    guests = await read_model.search_guests_by_name(q)
    return ApiResponse(
        data=[InvitationResponse.model_validate(inv) for inv in unique_invitations(guests)]
    )


@router.get(GUESTS_BY_INVITATION_URL, response_model=ApiResponse[list[GuestResponse]])
async def list_guests_by_invitation(
    invitation_id: int,
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> ApiResponse[list[GuestResponse]]:
    guests = await read_model.list_guests_by_invitation(invitation_id)
    return ApiResponse(data=[GuestResponse.model_validate(guest) for guest in guests])


@router.get(GUEST_URL, response_model=ApiResponse[GuestResponse])
async def get_guest(
    guest_id: int,
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> ApiResponse[GuestResponse]:
    guest = await read_model.get_guest(guest_id)
    return ApiResponse(data=GuestResponse.model_validate(guest))


@router.post(GUESTS_URL, response_model=ApiResponse[GuestResponse], status_code=201)
async def create_guest(
    guest_data: GuestCreate,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> ApiResponse[GuestResponse]:
    guest = await write_model.create_guest(guest_data.model_dump())
    return ApiResponse(data=GuestResponse.model_validate(guest))


@router.post(GUESTS_BULK_DELETE_URL, response_model=MessageResponse)
async def bulk_delete_guests(
    request: BulkDeleteRequest,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> MessageResponse:
    if not request.guest_ids:
        raise ValidationError("Guest IDs array is required")
    await write_model.bulk_delete_guests(request.guest_ids)
    return MessageResponse(message=f"{len(request.guest_ids)} guest(s) deleted successfully")


@router.put(GUEST_URL, response_model=ApiResponse[GuestResponse])
async def update_guest(
    guest_id: int,
    guest_data: GuestUpdate,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> ApiResponse[GuestResponse]:
    """Update a guest. Sending `invitationId: null` unassigns the guest."""
    guest = await write_model.update_guest(guest_id, guest_data.to_fields())
    return ApiResponse(data=GuestResponse.model_validate(guest))


@router.delete(GUEST_URL, response_model=MessageResponse)
async def delete_guest(
    guest_id: int,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> MessageResponse:
    await write_model.delete_guest(guest_id)
    return MessageResponse(message="Guest deleted successfully")
