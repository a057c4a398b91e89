"""Shared helpers for CLI commands."""

from pathlib import Path
from typing import Optional

import click

from hipay_professional.client import HipayClient
from hipay_professional.config import Config, load_config
from hipay_professional.utils.exceptions import ConfigurationError


def get_config(ctx: click.Context) -> Config:
    """Load (once) the configuration selected by the group options.
    
    Exits with status 1 when the configuration is invalid.
    """
    obj = ctx.ensure_object(dict)
    if obj.get("config") is None:
        config_path: Optional[Path] = obj.get("config_path")
        try:
            obj["config"] = load_config(config_path)
        except ConfigurationError as e:
            click.echo(f"Error loading configuration: {e}", err=True)
            ctx.exit(1)
    return obj["config"]


def get_client(ctx: click.Context) -> HipayClient:
    """Build a client from the loaded configuration."""
    return HipayClient.from_config(get_config(ctx).client)
