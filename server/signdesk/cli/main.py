"""
Operator CLI: stamp a PDF locally, or check a provider credential end to end.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

import click
import httpx

from signdesk.core.config import get_settings
from signdesk.core.exceptions import SignDeskError
from signdesk.core.logging import configure_logging
from signdesk.integrations.mail import EmailDispatcher
from signdesk.services.notification_service import send_test_message
from signdesk.services.stamping_service import format_signing_date, stamp_document


@click.group()
@click.option("--verbose", is_flag=True, help="Log at DEBUG level")
def cli(verbose: bool):
    """SignDesk operator tools"""
    configure_logging(level=logging.DEBUG if verbose else logging.INFO, json_output=False)


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, writable=True, path_type=Path))
@click.option("--signature", "signature_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Signature image (PNG/JPEG); omit to stamp only the date")
@click.option("--signature-position", default=None, help='Position JSON, e.g. {"page":0,"xRatio":0.5,"yRatio":0.8}')
@click.option("--date-position", default=None, help="Position JSON for the date")
@click.option("--date", "date_text", default=None, help="Date text to stamp (default: today)")
def stamp(
    source: Path,
    output: Path,
    signature_path: Optional[Path],
    signature_position: Optional[str],
    date_position: Optional[str],
    date_text: Optional[str],
):
    """Stamp SOURCE with a signature and date and write the result to OUTPUT"""
    settings = get_settings()
    if date_text is None:
        date_text = format_signing_date(datetime.now(ZoneInfo(settings.signature_timezone)))
    try:
        stamped = stamp_document(
            source.read_bytes(),
            signature_position=signature_position,
            date_position=date_position,
            signature_image=signature_path.read_bytes() if signature_path else None,
            date_text=date_text,
        )
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    output.write_bytes(stamped)
    click.echo(f"Wrote {output} ({len(stamped)} bytes)")


@cli.command("test-email")
@click.option("--provider", required=True, help="Provider tag, e.g. sendgrid or gmail-api-oauth2")
@click.option("--credential", default=None, help="Credential blob (API key, app password or JSON)")
@click.option("--credential-file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Read the credential blob from a file instead")
@click.option("--sender", required=True, help="From address")
@click.option("--to", "receiver", required=True, help="Receiver address")
def test_email(
    provider: str,
    credential: Optional[str],
    credential_file: Optional[Path],
    sender: str,
    receiver: str,
):
    """Send one check message through a provider"""
    if credential_file is not None:
        credential = credential_file.read_text(encoding="utf-8")
    if not credential:
        raise click.UsageError("one of --credential or --credential-file is required")

    settings = get_settings()

    async def _send() -> None:
        async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
            await send_test_message(
                EmailDispatcher(client, settings),
                provider=provider,
                credential_blob=credential,
                sender_email=sender,
                receiver_email=receiver,
            )

    try:
        asyncio.run(_send())
    except SignDeskError as exc:
        raise click.ClickException(exc.message) from exc
    click.echo(f"Test email sent to {receiver} via {provider}")


if __name__ == "__main__":
    cli()
