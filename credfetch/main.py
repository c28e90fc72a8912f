"""CLI entry point for credfetch."""

import sys
from pathlib import Path

import click

from credfetch.cli.credentials import credentials_group
from credfetch.config.settings import LookupSettings
from credfetch.exceptions import ConfigurationError
from credfetch.utils.logging_config import configure_logging, get_logger

log = get_logger(__name__)

DEFAULT_CONFIG = "credfetch.yaml"


@click.group()
@click.option(
    "--config",
    default=DEFAULT_CONFIG,
    show_default=True,
    help="Path to configuration file (optional; defaults apply when it does not exist)",
)
@click.option("--log-level", default=None, help="Logging level (overrides configuration)")
@click.pass_context
def cli(ctx: click.Context, config: str, log_level: str | None) -> None:
    """credfetch: Windows Credential Manager lookup CLI."""
    config_path = Path(config)

    try:
        if config_path.exists():
            settings = LookupSettings.from_yaml(str(config_path))
        elif config != DEFAULT_CONFIG:
            raise ConfigurationError(f"Configuration file not found: {config}")
        else:
            settings = LookupSettings()
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    configure_logging(log_level or settings.log_level, settings.log_format)
    log.debug("settings_loaded", config=str(config_path) if config_path.exists() else None)

    ctx.obj = {"settings": settings}


cli.add_command(credentials_group)


if __name__ == "__main__":
    cli()
