import click
import logging
from pathlib import Path
from rich.console import Console
from rich.logging import RichHandler

from .. import __version__
from ..core.config import Settings, get_settings
from ..core.exceptions import ConfigurationError, ValidationError
from ..core.logging import setup_logging
from ..core.validation import Validator
from ..pricing import PriceCacheFacade
from .commands import hydrate, ondemand, spot

console = Console()


def _validate_region(ctx, param, value):
    if value is None:
        return value
    try:
        return Validator.validate_aws_region(value)
    except ValidationError as e:
        raise click.BadParameter(str(e))


def _load_settings(config, region, profile) -> Settings:
    if config:
        path = Path(config)
        if not path.exists():
            raise ConfigurationError(f"Configuration file {path} not found")
        settings = Settings.from_file(path)
    else:
        settings = get_settings()

    if region:
        settings.aws.region = region
    if profile:
        settings.aws.profile = profile
    return settings


@click.group()
@click.version_option(version=__version__, prog_name='pricecache')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--config', type=click.Path(dir_okay=False), help='Path to configuration file')
@click.option('--region', '-r', callback=_validate_region, help='AWS region to price instance types in')
@click.option('--profile', help='AWS profile to use')
@click.pass_context
def cli(ctx, debug, config, region, profile):
    """
    pricecache - EC2 on-demand and spot price lookups

    Look up hourly on-demand prices and time-weighted average spot prices
    for EC2 instance types.
    """
    ctx.ensure_object(dict)

    try:
        settings = _load_settings(config, region, profile)
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    setup_logging(
        level='DEBUG' if debug else settings.logging.level,
        log_file=settings.logging.file,
        structured=settings.logging.structured,
        handler=RichHandler(console=Console(stderr=True), rich_tracebacks=True),
    )
    if debug:
        logging.getLogger('pricecache').setLevel(logging.DEBUG)

    ctx.obj['settings'] = settings
    ctx.obj['console'] = console
    ctx.obj.setdefault('facade_factory', PriceCacheFacade.from_settings)


# Register commands
cli.add_command(ondemand.ondemand)
cli.add_command(spot.spot)
cli.add_command(hydrate.hydrate)


if __name__ == '__main__':
    cli()
