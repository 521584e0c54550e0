"""DTOs for the guest import feature."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CsvRow(BaseModel):
    """One spreadsheet row, already mapped from column headers to field names.

    Every field is optional; rows without a guest name are skipped by the
    importer rather than rejected here.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    guest_name: str | None = None
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    zip_code: str | None = None
    email: str | None = None
    phone_number: str | None = None
    save_the_date_sent: str | None = None
    invite_sent: str | None = None
    table_number: str | None = None
    dietary_restrictions: str | None = None
    notes: str | None = None

    def as_submitted(self) -> dict[str, str]:
        """The row as the client sent it, in wire field names."""
        return self.model_dump(by_alias=True, exclude_none=True)
