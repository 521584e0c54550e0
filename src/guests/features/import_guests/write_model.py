"""Write model for the guest import feature.

Rows are processed strictly in order. Guests sharing an address are grouped
into one invitation; the address -> invitation map lives only for the
duration of a single import call.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from functools import partial
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import ImportResultDTO, ImportRowErrorDTO, ImportRowSuccessDTO
from src.guests.features.import_guests.dtos import CsvRow
from src.guests.features.import_guests.importer import (
    build_address_key,
    invitation_fields_from_row,
    parse_guest_name,
    parse_row,
)
from src.guests.repository.orm_models import Guest, Invitation

logger = logging.getLogger(__name__)


class GuestImportWriteModel(ABC):
    """Abstract base class for guest import operations."""

    @abstractmethod
    async def import_guests(self, rows: Sequence[Any]) -> ImportResultDTO:
        """Import guest rows, creating invitations for unique addresses.

        Args:
            rows: Rows in spreadsheet order, either CsvRow instances or the
                raw objects a client submitted

        Returns:
            ImportResultDTO with a success or error entry for every row that
            carried a guest name or failed validation, plus the number of
            invitations created
        """
        raise NotImplementedError


def submitted_data(raw: Any) -> Any:
    """The row as the client sent it, for the error ledger."""
    if isinstance(raw, CsvRow):
        return raw.as_submitted()
    return raw


class SqlGuestImportWriteModel(GuestImportWriteModel):
    """SQL implementation of guest import.

    Each row is written in its own transaction: a failing row leaves nothing
    behind and rows committed before it stay committed. With
    `session_overwrite` every row runs in the given session and the caller
    owns the transaction.
    """

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def import_guests(self, rows: Sequence[Any]) -> ImportResultDTO:
        success: list[ImportRowSuccessDTO] = []
        errors: list[ImportRowErrorDTO] = []
        invitations_created = 0
        invitation_ids: dict[str, int] = {}

        for row_number, raw in enumerate(rows, start=1):
            try:
                row = parse_row(raw)
                if not row.guest_name or not row.guest_name.strip():
                    continue
                first_name, last_name = parse_guest_name(row.guest_name)
                address_key = build_address_key(row)
                guest_id, invitation_id, created = await self._import_row(
                    row, first_name, last_name, address_key, invitation_ids.get(address_key)
                )
            except Exception as e:
                logger.warning("Import row %d failed: %s", row_number, e)
                errors.append(
                    ImportRowErrorDTO(
                        row=row_number,
                        error=str(e) or type(e).__name__,
                        data=submitted_data(raw),
                    )
                )
                continue

            if created:
                invitation_ids[address_key] = invitation_id
                invitations_created += 1

            success.append(
                ImportRowSuccessDTO(
                    row_number=row_number,
                    guest_id=guest_id,
                    invitation_id=invitation_id,
                    name=f"{first_name} {last_name}",
                )
            )

        logger.info(
            "Imported %d of %d rows, %d errors, %d invitations created",
            len(success),
            len(rows),
            len(errors),
            invitations_created,
        )
        return ImportResultDTO(
            success=success,
            errors=errors,
            invitations_created=invitations_created,
        )

    async def _import_row(
        self,
        row: CsvRow,
        first_name: str,
        last_name: str,
        address_key: str,
        known_invitation_id: int | None,
    ) -> tuple[int, int | None, bool]:
        """Write one row. Returns (guest_id, invitation_id, invitation_created)."""
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            invitation_id = known_invitation_id
            created = False
            if address_key and invitation_id is None:
                invitation = Invitation(**invitation_fields_from_row(row))
                session.add(invitation)
                await session.flush()
                invitation_id = invitation.id
                created = True

            guest = Guest(
                first_name=first_name,
                last_name=last_name,
                email=row.email or None,
                dietary_restrictions=row.dietary_restrictions or None,
                menu_choice=None,
                invitation_id=invitation_id,
            )
            session.add(guest)
            await session.flush()
            return guest.id, invitation_id, created
