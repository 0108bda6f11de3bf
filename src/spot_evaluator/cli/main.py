import click
from pathlib import Path
from pydantic import ValidationError
from rich.console import Console

from .. import __version__
from ..core.config import DEFAULT_CONFIG_PATH, get_settings, reload_settings
from ..core.exceptions import ConfigurationError
from ..core.logging import setup_logging
from .commands import inventory, recommend, configure

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name='spot-evaluator')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--config', type=click.Path(dir_okay=False, path_type=Path),
              help='Path to configuration file')
@click.option('--structured-logs', is_flag=True, help='Emit JSON log lines')
@click.pass_context
def cli(ctx, debug, config, structured_logs):
    """
    Spot Evaluator - cheaper spot replacements for Kubernetes node groups

    Inventories cluster nodes, compares their spot and on-demand prices and
    recommends cheaper instance types with at least the same capacity.
    """
    ctx.ensure_object(dict)

    try:
        settings = reload_settings(config) if config else get_settings()
    except (ConfigurationError, ValidationError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    setup_logging(
        level='DEBUG' if debug or settings.debug else settings.logging.level,
        log_file=settings.logging.file,
        structured=structured_logs or settings.logging.structured,
        console=settings.logging.console,
        rich_console=Console(stderr=True),
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count
    )

    ctx.obj['settings'] = settings
    ctx.obj['config_file'] = config or DEFAULT_CONFIG_PATH
    ctx.obj['console'] = console


# Register commands
cli.add_command(inventory.inventory)
cli.add_command(recommend.recommend)
cli.add_command(configure.configure)


if __name__ == '__main__':
    cli()
