from fastapi import APIRouter, Depends

from src.errors import ValidationError
from src.guests.repository.read_models import GuestReadModel, SqlGuestReadModel
from src.guests.repository.write_models import InvitationWriteModel, SqlInvitationWriteModel
from src.guests.schemas import (
    ApiResponse,
    CamelModel,
    GuestResponse,
    InvitationFields,
    InvitationResponse,
)
from src.guests.urls import ASSIGN_INVITATION_URL, UNASSIGNED_GUESTS_URL

router = APIRouter()


class AssignInvitationRequest(CamelModel):
    guest_ids: list[int] | None = None
    invitation_data: InvitationFields | None = None


def get_unassigned_read_model() -> GuestReadModel:
    """Dependency to get guest read model instance."""
    return SqlGuestReadModel()


def get_assign_invitation_write_model() -> InvitationWriteModel:
    """Dependency to get invitation write model instance."""
    return SqlInvitationWriteModel()


@router.get(UNASSIGNED_GUESTS_URL, response_model=ApiResponse[list[GuestResponse]])
async def list_unassigned_guests(
    read_model: GuestReadModel = Depends(get_unassigned_read_model),
) -> ApiResponse[list[GuestResponse]]:
    """Guests without an invitation, by last name then first name."""
    guests = await read_model.list_unassigned_guests()
    return ApiResponse(data=[GuestResponse.model_validate(guest) for guest in guests])


@router.post(ASSIGN_INVITATION_URL, response_model=ApiResponse[InvitationResponse])
async def assign_guests_to_new_invitation(
    request: AssignInvitationRequest,
    write_model: InvitationWriteModel = Depends(get_assign_invitation_write_model),
) -> ApiResponse[InvitationResponse]:
    """Create an invitation and move the selected guests onto it."""
    if not request.guest_ids:
        raise ValidationError("Guest IDs array is required")
    if request.invitation_data is None:
        raise ValidationError("Invitation data is required")

    invitation = await write_model.create_invitation_with_guests(
        request.invitation_data.to_fields(), request.guest_ids
    )
    return ApiResponse(
        data=InvitationResponse.model_validate(invitation),
        message=f"Created invitation and assigned {len(request.guest_ids)} guests",
    )
