import click
from rich.table import Table

from ...core.exceptions import AuthenticationError, InventoryError
from .. import factory
from ..output import OUTPUT_FORMATS, emit_document, format_price


@click.command()
@click.option('--format', '-f', type=click.Choice(OUTPUT_FORMATS),
              default='table', help='Output format')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output file for json, yaml or csv results')
@click.pass_context
def inventory(ctx, format, output):
    """
    List cluster node groups with their spot and on-demand prices

    Examples:
        spot-evaluator inventory
        spot-evaluator inventory -f csv -o inventory.csv
    """
    console = ctx.obj['console']
    settings = ctx.obj['settings']

    if output and format == 'table':
        raise click.UsageError("--output requires --format json, yaml or csv")

    try:
        collector = factory.build_collector(settings)
        with console.status("[bold green]Collecting node inventory..."):
            groups = collector.collect()
    except InventoryError as e:
        raise click.ClickException(str(e))

    evaluator = factory.build_evaluator(settings)
    try:
        with console.status("[bold green]Fetching prices..."):
            evaluations = [evaluator.price_group(group) for group in groups]
    except AuthenticationError as e:
        raise click.ClickException(str(e))

    if format == 'table':
        _display_inventory_table(console, evaluations)
        summary = collector.get_summary()
        console.print(f"\nNode groups: [bold]{summary['total_groups']}[/bold]  "
                      f"Nodes: [bold]{summary['total_nodes']}[/bold]  "
                      f"Spot nodes: [bold]{summary['spot_nodes']}[/bold]")
        if summary['total_errors']:
            console.print(f"[yellow]{summary['total_errors']} nodes skipped (missing labels)[/yellow]")
    else:
        emit_document(console, evaluations, format, output)


def _display_inventory_table(console, evaluations):
    """Display node groups with pricing"""

    table = Table(title="Node Inventory", show_header=True, header_style="bold cyan")
    table.add_column("Instance", style="cyan")
    table.add_column("AZ", style="magenta")
    table.add_column("Count", justify="right")
    table.add_column("Capacity")
    table.add_column("On-Demand", justify="right", style="yellow")
    table.add_column("Spot", justify="right", style="green")
    table.add_column("Savings", justify="right", style="bold green")

    for evaluation in evaluations:
        group = evaluation.group
        if evaluation.pricing_error:
            savings = "[red]lookup failed[/red]"
        else:
            savings = f"{evaluation.savings_percentage:.2f}%"

        table.add_row(
            group.instance_type,
            group.availability_zone,
            str(group.count),
            group.capacity_type.value,
            format_price(evaluation.on_demand_price),
            format_price(evaluation.spot_price),
            savings
        )

    console.print("\n")
    console.print(table)
