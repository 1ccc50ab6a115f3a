"""CLI commands for wedding RSVP management."""

import asyncio
import json
from pathlib import Path

import typer

from src.config.logging import setup_logging
from src.config.settings import settings
from src.rsvp.errors import RSVPError
from src.rsvp.rows import build_sheet_rows, utc_now
from src.rsvp.service import RSVPSubmissionService, parse_body
from src.rsvp.sheets import GoogleSheetsClient
from src.rsvp.validation import InvalidSubmission, validate_submission

app = typer.Typer(help="CLI commands for wedding RSVP management")


@app.command()
def check_config():
    """Check that the Google Sheets settings are present."""
    missing = settings.missing_google_settings()
    if missing:
        typer.secho("Google Sheets is not configured.", fg=typer.colors.RED)
        for name in missing:
            typer.secho(f"  Missing: {name}", fg=typer.colors.YELLOW)
        raise typer.Exit(1)

    typer.secho("Google Sheets is configured!", fg=typer.colors.GREEN)
    typer.secho(f"  Spreadsheet: {settings.google_spreadsheet_id}", fg=typer.colors.BLUE)
    typer.secho(f"  Range: {settings.google_sheet_range}", fg=typer.colors.BLUE)
    typer.secho(f"  Service account: {settings.google_service_account_email}", fg=typer.colors.CYAN)


@app.command()
def preview(
    payload_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="JSON file with the RSVP payload",
    ),
):
    """Validate an RSVP payload and print the rows it would append."""
    try:
        payload = parse_body(payload_file.read_bytes())
    except RSVPError as e:
        typer.secho(e.public_message, fg=typer.colors.RED)
        raise typer.Exit(1)

    result = validate_submission(payload)
    if isinstance(result, InvalidSubmission):
        typer.secho("Invalid form data:", fg=typer.colors.RED)
        for violation in result.violations:
            typer.secho(f"  - {violation}", fg=typer.colors.YELLOW)
        raise typer.Exit(1)

    rows = build_sheet_rows(result.guests, utc_now())
    if not rows:
        typer.secho("No guests to record.", fg=typer.colors.YELLOW)
        return

    typer.secho(f"{len(rows)} row(s) would be appended:", fg=typer.colors.GREEN)
    for row in rows:
        typer.echo(json.dumps(row.as_values()))


@app.command()
def submit(
    payload_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="JSON file with the RSVP payload",
    ),
):
    """Submit an RSVP payload to the configured spreadsheet."""
    setup_logging()
    service = RSVPSubmissionService(
        spreadsheet_client=GoogleSheetsClient(config=settings),
        spreadsheet_id=settings.google_spreadsheet_id,
        sheet_range=settings.google_sheet_range,
    )

    try:
        # Typer doesn't support async directly, so use asyncio.run
        result = asyncio.run(service.submit(payload_file.read_bytes()))
    except RSVPError as e:
        typer.secho(e.public_message, fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(result.message, fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
