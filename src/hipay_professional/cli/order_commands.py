"""CLI commands for order maintenance operations (capture, cancel, refund)."""

from dataclasses import asdict
from typing import Optional

import click

from hipay_professional.cli.context import get_client
from hipay_professional.models.requests import (
    CancelOrderRequest,
    CaptureOrderRequest,
    RefundOrderRequest,
)
from hipay_professional.models.responses import HipayResponse
from hipay_professional.utils.exceptions import HipayException


@click.group(name="order")
def order_group() -> None:
    """Order maintenance commands."""
    pass


def _report(response: HipayResponse) -> None:
    """Print a result, or the protocol error and exit with status 2."""
    if response.error is not None:
        click.echo(
            click.style("✗", fg="red", bold=True)
            + f" HiPay error {response.error.code}: {response.error.description}",
            err=True,
        )
        raise click.exceptions.Exit(2)
    
    click.echo(click.style("✓", fg="green", bold=True) + " Success")
    for name, value in asdict(response.result).items():
        if value is not None:
            click.echo(f"  {name}: {value}")


def _call(operation, request) -> None:
    try:
        response = operation(request)
    except HipayException as e:
        click.echo(click.style("✗", fg="red", bold=True) + f" {e}", err=True)
        raise click.exceptions.Exit(1)
    _report(response)


@order_group.command()
@click.argument("transaction_id")
@click.option("--amount", default=None, help="Amount to capture (default: full amount)")
@click.option("--currency", default=None, help="Currency of the amount")
@click.pass_context
def capture(
    ctx: click.Context,
    transaction_id: str,
    amount: Optional[str],
    currency: Optional[str],
) -> None:
    """Capture the authorized transaction TRANSACTION_ID."""
    client = get_client(ctx)
    _call(
        client.capture_order,
        CaptureOrderRequest(transaction_public_id=transaction_id, amount=amount, currency=currency),
    )


@order_group.command()
@click.argument("transaction_id")
@click.pass_context
def cancel(ctx: click.Context, transaction_id: str) -> None:
    """Cancel the authorized transaction TRANSACTION_ID."""
    client = get_client(ctx)
    _call(client.cancel_order, CancelOrderRequest(transaction_public_id=transaction_id))


@order_group.command()
@click.argument("transaction_id")
@click.argument("amount")
@click.pass_context
def refund(ctx: click.Context, transaction_id: str, amount: str) -> None:
    """Refund AMOUNT of the captured transaction TRANSACTION_ID."""
    client = get_client(ctx)
    _call(client.refund_order, RefundOrderRequest(transaction_public_id=transaction_id, amount=amount))
