"""CLI commands for HiPay notifications."""

import json
from dataclasses import asdict
from pathlib import Path

import click

from hipay_professional.cli.context import get_client
from hipay_professional.soap.notification import extract_notification_xml
from hipay_professional.utils.exceptions import NotificationError


@click.group(name="notification")
def notification_group() -> None:
    """Notification (callback) commands."""
    pass


@notification_group.command(name="verify")
@click.argument("notification_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--check-digest/--no-check-digest",
    default=True,
    help="Verify md5content, accepting the legacy digest or the signature (default: on)",
)
@click.option(
    "--check-signature",
    is_flag=True,
    help="Verify md5content as a signature (digest + password) only",
)
@click.option(
    "--form",
    is_flag=True,
    help="The file holds the raw url-encoded POST body instead of the XML",
)
@click.pass_context
def verify(
    ctx: click.Context,
    notification_file: Path,
    check_digest: bool,
    check_signature: bool,
    form: bool,
) -> None:
    """Decode NOTIFICATION_FILE and verify its digest.
    
    Prints the decoded notification as JSON. The configured password is used
    as signing secret.
    
    Example:
        hipay-professional notification verify notification.xml --check-signature
    """
    content = notification_file.read_text(encoding="utf-8")
    client = get_client(ctx)
    
    try:
        xml_str = extract_notification_xml(content) if form else content
        notification = client.parse_notification(
            xml_str,
            check_digest=check_digest,
            check_signature=check_signature,
        )
    except NotificationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + f" Notification rejected: {e}", err=True)
        raise click.exceptions.Exit(1)
    
    click.echo(json.dumps(asdict(notification), indent=2))
