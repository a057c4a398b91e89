"""Main CLI entry point for the HiPay Professional SDK.

This module provides the main Click command group for the hipay-professional CLI.
"""

from pathlib import Path
from typing import Optional

import click

from hipay_professional.cli.context import get_client, get_config
from hipay_professional.cli.notification_commands import notification_group
from hipay_professional.cli.order_commands import order_group
from hipay_professional.config import load_config, resolve_endpoint
from hipay_professional.listener import run_listener
from hipay_professional.logging_audit import configure_logging
from hipay_professional.utils.exceptions import ConfigurationError
from hipay_professional.utils.version import get_package_version


@click.group()
@click.version_option(version=get_package_version(), prog_name="hipay-professional")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/config.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to log file (default: logs/hipay-professional.log)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
) -> None:
    """HiPay Professional - SOAP API client and notification tools.
    
    Credentials are read from the configuration file or, preferably, from
    the HIPAY_LOGIN and HIPAY_PASSWORD environment variables (.env supported).
    
    Common usage:
    
        # Show the endpoint of an environment
        hipay-professional endpoint stage
        
        # Verify a notification saved to a file
        hipay-professional notification verify notification.xml
        
        # Capture an authorized transaction
        hipay-professional order capture 5CF68C1301DC7655
    
    Use --help with any command for more information.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["config"] = None
    
    configure_logging(level="DEBUG" if verbose else "WARNING", log_file=log_file)


cli.add_command(notification_group)
cli.add_command(order_group)


@cli.command()
@click.argument("env")
def endpoint(env: str) -> None:
    """Show the API base URL of ENV (production, stage or an http(s) URL)."""
    try:
        click.echo(resolve_endpoint(env))
    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + f" {e}", err=True)
        raise click.exceptions.Exit(1)


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate(config_file: Path) -> None:
    """Validate a configuration file.
    
    Example:
        hipay-professional config validate config/config.json
    """
    try:
        config_obj = load_config(config_file)
    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Configuration validation failed")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(1)
    
    client = config_obj.client
    click.echo(click.style("✓", fg="green", bold=True) + " Configuration is valid")
    click.echo(f"\nConfiguration file: {config_file}")
    click.echo("\nClient:")
    click.echo(f"  Environment: {client.env}")
    click.echo(f"  Endpoint:    {client.endpoint}")
    click.echo(f"  Login:       {'configured' if client.login else 'Not configured'}")
    click.echo(f"  Sub-account: {client.sub_account_login or client.sub_account_id or 'None'}")
    click.echo(f"  Timeout:     {client.request.timeout}s")
    click.echo(f"  Verify TLS:  {client.request.verify_tls}")
    click.echo("\nLogging:")
    click.echo(f"  Level:       {config_obj.logging.level}")
    click.echo(f"  Log file:    {config_obj.logging.log_file}")


@cli.command()
@click.option("--host", default=None, help="Bind address (default from configuration)")
@click.option("--port", type=int, default=None, help="Bind port (default from configuration)")
@click.option("--path", default=None, help="Notification URL path (default from configuration)")
@click.pass_context
def listen(ctx: click.Context, host: Optional[str], port: Optional[int], path: Optional[str]) -> None:
    """Run a notification listener (development server)."""
    config_obj = get_config(ctx)
    updates = {k: v for k, v in {"host": host, "port": port, "path": path}.items() if v is not None}
    listener_config = config_obj.listener.model_copy(update=updates)
    run_listener(get_client(ctx), listener_config)


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"hipay-professional version {get_package_version()}")


if __name__ == "__main__":
    cli()
