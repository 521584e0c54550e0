"""Parsing and grouping rules for imported guest rows."""

import re
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from src.guests.features.import_guests.dtos import CsvRow

ADDRESS_KEY_SEPARATOR = "|"
TRUTHY_VALUES = frozenset({"yes", "true", "y", "1"})

_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


def parse_row(raw: Any) -> CsvRow:
    """Validate one submitted row, reporting the first problem in wire field names."""
    try:
        return CsvRow.model_validate(raw)
    except ValidationError as e:
        error = e.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        if location:
            raise ValueError(f"Invalid row: {location} {error['msg']}") from e
        raise ValueError(f"Invalid row: {error['msg']}") from e


def parse_guest_name(full_name: str) -> tuple[str, str]:
    """Split "First Rest Of Name" into (first_name, last_name).

    The first whitespace-delimited token is the first name, the remaining
    tokens joined by a single space are the last name.
    """
    parts = full_name.split()
    if not parts:
        raise ValueError("Guest name is empty.")
    return parts[0], " ".join(parts[1:])


def parse_boolean(value: str | None) -> bool:
    if not value:
        return False
    return value.strip().lower() in TRUTHY_VALUES


def parse_table_number(value: str | None) -> int | None:
    """Read the leading integer of a table number cell, "7b" -> 7."""
    if not value or not value.strip():
        return None
    match = _LEADING_INTEGER.match(value)
    if match is None:
        raise ValueError(f"Invalid table number: {value!r}")
    return int(match.group(1))


def build_address_key(row: CsvRow) -> str:
    """Normalized household identity used to group rows into one invitation.

    Street, city and state compare case-insensitively; the zip code only has
    surrounding whitespace removed. Empty components are left out, so a row
    without any address yields an empty key.
    """
    components = [
        (row.address1 or "").strip().lower(),
        (row.address2 or "").strip().lower(),
        (row.city or "").strip().lower(),
        (row.state or "").strip().lower(),
        (row.zip_code or "").strip(),
    ]
    return ADDRESS_KEY_SEPARATOR.join(component for component in components if component)


def invitation_fields_from_row(row: CsvRow) -> dict:
    """Column values for a new invitation created from the first row at an address."""
    return {
        "address": row.address1 or None,
        "address2": row.address2 or None,
        "city": row.city or None,
        "state": row.state or None,
        "zip": row.zip_code or None,
        "country": row.country or None,
        "phone_number": row.phone_number or None,
        "save_the_date_sent": parse_boolean(row.save_the_date_sent),
        "invite_sent": parse_boolean(row.invite_sent),
        "table_number": parse_table_number(row.table_number),
        "notes": row.notes or None,
        "plus_one": False,
    }


_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")

# checked in order, the first matching rule wins
_HEADER_RULES: list[tuple[tuple[str, ...], str]] = [
    (("weddingguestname", "guestname"), "guest_name"),
    (("address1",), "address1"),
    (("address2",), "address2"),
    (("city",), "city"),
    (("state", "province"), "state"),
    (("country",), "country"),
    (("zip", "postal"), "zip_code"),
    (("email",), "email"),
    (("phone",), "phone_number"),
    (("savethedatesent", "savedatesent"), "save_the_date_sent"),
    (("invitesent",), "invite_sent"),
    (("table",), "table_number"),
    (("dietary", "restriction"), "dietary_restrictions"),
    (("notes",), "notes"),
]


def map_header(header: str) -> str | None:
    """Row field for a spreadsheet column header, None for unknown columns.

    Headers compare case-insensitively with punctuation and spaces removed,
    so "WEDDING GUEST NAME(S)" and "Address 1" are both recognized.
    """
    normalized = _NON_ALPHANUMERIC.sub("", header.lower())
    if normalized == "address":
        return "address1"
    for needles, field_name in _HEADER_RULES:
        if any(needle in normalized for needle in needles):
            return field_name
    return None


def rows_from_csv(records: Iterable[list[str]]) -> list[CsvRow]:
    """Build import rows from parsed CSV records, the first record being the header.

    Blank cells are dropped and records without a guest name are left out.
    """
    records = iter(records)
    header = next(records, None)
    if header is None:
        return []
    fields = [map_header(column) for column in header]

    rows = []
    for record in records:
        values = {}
        for field_name, value in zip(fields, record):
            if field_name and value.strip():
                values[field_name] = value.strip()
        if values.get("guest_name"):
            rows.append(CsvRow(**values))
    return rows
