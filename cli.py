"""CLI commands for wedding guest list management."""

import asyncio
import csv
from pathlib import Path

import typer
import uvicorn

from src.config.logging import setup_logging
from src.config.settings import settings
from src.errors import NotFoundError
from src.guests.features.import_guests.importer import rows_from_csv
from src.guests.features.import_guests.write_model import SqlGuestImportWriteModel
from src.guests.repository.read_models import SqlGuestReadModel, SqlInvitationReadModel
from src.guests.repository.write_models import SqlGuestWriteModel

app = typer.Typer(help="CLI commands for wedding guest list management")


@app.callback()
def main():
    setup_logging()


@app.command()
def import_csv(
    path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Spreadsheet export in CSV format, header row first",
    ),
):
    """Import guests from a CSV file, grouping guests that share an address."""
    with path.open(newline="", encoding="utf-8-sig") as f:
        rows = rows_from_csv(csv.reader(f))

    if not rows:
        typer.secho("No rows with a guest name found.", fg=typer.colors.YELLOW)
        raise typer.Exit(1)

    result = asyncio.run(SqlGuestImportWriteModel().import_guests(rows))

    typer.secho(
        f"Imported {len(result.success)} guests, {len(result.errors)} errors",
        fg=typer.colors.GREEN,
    )
    typer.secho(f"  Invitations created: {result.invitations_created}", fg=typer.colors.CYAN)
    for entry in result.success:
        invitation = entry.invitation_id if entry.invitation_id is not None else "-"
        typer.secho(
            f"  Row {entry.row_number}: {entry.name} (guest {entry.guest_id}, invitation {invitation})",
            fg=typer.colors.BLUE,
        )
    for error in result.errors:
        typer.secho(f"  Row {error.row}: {error.error}", fg=typer.colors.RED)


@app.command()
def stats():
    """Show invitation response counters."""
    result = asyncio.run(SqlInvitationReadModel().get_stats())

    typer.secho("Invitation stats", fg=typer.colors.GREEN)
    typer.secho(f"  Invitations: {result.total_invitations}", fg=typer.colors.BLUE)
    typer.secho(f"  Guests: {result.total_guests}", fg=typer.colors.BLUE)
    typer.secho(f"  Responded: {result.responded_invitations}", fg=typer.colors.BLUE)
    typer.secho(f"  Pending: {result.pending_invitations}", fg=typer.colors.YELLOW)
    typer.secho(f"  Attending: {result.attending_count}", fg=typer.colors.CYAN)
    typer.secho(f"  Not attending: {result.not_attending_count}", fg=typer.colors.CYAN)


@app.command()
def unassigned():
    """List guests that are not on any invitation."""
    guests = asyncio.run(SqlGuestReadModel().list_unassigned_guests())

    if not guests:
        typer.secho("Every guest has an invitation.", fg=typer.colors.GREEN)
        return

    typer.secho(f"{len(guests)} unassigned guest(s):", fg=typer.colors.YELLOW)
    for guest in guests:
        typer.secho(f"  {guest.id}: {guest.full_name}", fg=typer.colors.BLUE)


@app.command()
def assign(
    invitation_id: int = typer.Argument(
        ...,
        help="Invitation ID",
    ),
    guest_ids: list[int] = typer.Argument(
        ...,
        help="Guest IDs to move onto the invitation",
    ),
):
    """Move existing guests onto an existing invitation."""
    write_model = SqlGuestWriteModel()
    try:
        updated = asyncio.run(write_model.bulk_assign_guests_to_invitation(guest_ids, invitation_id))
    except NotFoundError as e:
        typer.secho(e.message, fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"Assigned {updated} guest(s) to invitation {invitation_id}", fg=typer.colors.GREEN)
    if updated < len(guest_ids):
        typer.secho(f"  {len(guest_ids) - updated} guest ID(s) not found", fg=typer.colors.YELLOW)


@app.command()
def serve(
    reload: bool = typer.Option(
        False,
        "--reload",
        help="Restart the server when source files change",
    ),
):
    """Run the API server on the configured host and port."""
    uvicorn.run("src.main:app", host=settings.app_host, port=settings.app_port, reload=reload)


if __name__ == "__main__":
    app()
