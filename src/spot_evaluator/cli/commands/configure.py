import click
import yaml
from pathlib import Path
from rich.panel import Panel
from rich.prompt import Confirm
from rich.syntax import Syntax

from ...core.config import Settings


@click.command()
@click.option('--show', is_flag=True, help='Show current configuration')
@click.option('--init', 'init_', is_flag=True, help='Write a default configuration file')
@click.option('--reset', is_flag=True, help='Reset configuration to defaults')
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def configure(ctx, show, init_, reset, yes):
    """
    Show or initialize the configuration file

    Examples:
        spot-evaluator configure --show
        spot-evaluator configure --init
    """
    console = ctx.obj['console']
    settings = ctx.obj['settings']
    config_file = Path(ctx.obj['config_file'])

    if show or not (init_ or reset):
        _show_configuration(console, settings, config_file)
        return

    if init_ and config_file.exists() and not reset:
        console.print(f"[yellow]{config_file} already exists, use --reset to overwrite[/yellow]")
        return

    if reset and not yes:
        if not Confirm.ask(f"[yellow]Reset {config_file} to defaults?[/yellow]", console=console):
            console.print("[red]Reset cancelled[/red]")
            return

    Settings().to_yaml(config_file)
    console.print(f"[green]✓ Configuration saved to {config_file}[/green]")


def _show_configuration(console, settings, config_file):
    """Display the effective configuration"""
    rendered = yaml.safe_dump(settings.model_dump(mode="json"), default_flow_style=False)
    source = config_file if config_file.exists() else "defaults"
    console.print(Panel(Syntax(rendered, "yaml"), title=f"Configuration ({source})"))
