from typing import Any

from fastapi import APIRouter, Depends

from src.errors import ValidationError
from src.guests.features.import_guests.write_model import (
    GuestImportWriteModel,
    SqlGuestImportWriteModel,
)
from src.guests.schemas import ApiResponse, CamelModel
from src.guests.urls import IMPORT_GUESTS_URL

router = APIRouter()


class ImportGuestsRequest(CamelModel):
    # rows are validated one by one during the import
    rows: list[Any] | None = None


class ImportRowSuccessResponse(CamelModel):
    row_number: int
    guest_id: int
    invitation_id: int | None = None
    name: str


class ImportRowErrorResponse(CamelModel):
    row: int
    error: str
    data: Any = None


class ImportResultResponse(CamelModel):
    success: list[ImportRowSuccessResponse]
    errors: list[ImportRowErrorResponse]
    invitations_created: int


def get_guest_import_write_model() -> GuestImportWriteModel:
    """Dependency to get guest import write model instance."""
    return SqlGuestImportWriteModel()


@router.post(IMPORT_GUESTS_URL, response_model=ApiResponse[ImportResultResponse])
async def import_guests(
    request: ImportGuestsRequest,
    write_model: GuestImportWriteModel = Depends(get_guest_import_write_model),
) -> ApiResponse[ImportResultResponse]:
    """
    Import guests from spreadsheet rows.

    Guests sharing an address are grouped into one invitation; guests without
    an address stay unassigned. Failing rows are reported individually and do
    not stop the import.
    """
    if request.rows is None:
        raise ValidationError("Invalid request: rows array is required")

    result = await write_model.import_guests(request.rows)
    return ApiResponse(
        data=ImportResultResponse.model_validate(result),
        message=f"Imported {len(result.success)} guests, {len(result.errors)} errors",
    )
