import click
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from ...core.base import NodeGroup, EvaluationStatus
from ...core.exceptions import AuthenticationError, InventoryError, CancellationError
from ...providers.aws import region_from_zone
from ...reporting import summarize
from .. import factory
from ..output import OUTPUT_FORMATS, emit_document, format_price


@click.command()
@click.option('--limit', '-n', type=int, help='Replacements to show per node group')
@click.option('--workers', '-P', type=click.IntRange(min=1), help='Parallel candidate lookups')
@click.option('--timeout', type=click.FloatRange(min=0), help='Seconds allowed per node group')
@click.option('--instance-type', help='Evaluate a single group of this instance type instead of the cluster')
@click.option('--zone', help='Availability zone of the single group')
@click.option('--region', help='Region of the single group (derived from --zone by default)')
@click.option('--count', type=click.IntRange(min=1), default=1, help='Node count of the single group')
@click.option('--format', '-f', type=click.Choice(OUTPUT_FORMATS),
              default='table', help='Output format')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output file for json, yaml or csv results')
@click.pass_context
def recommend(ctx, limit, workers, timeout, instance_type, zone, region, count, format, output):
    """
    Recommend cheaper, capacity-compatible spot instance types

    Examples:
        spot-evaluator recommend --limit 5
        spot-evaluator recommend --instance-type m5.large --zone us-east-1a --count 4
    """
    console = ctx.obj['console']
    settings = ctx.obj['settings']

    if bool(instance_type) != bool(zone):
        raise click.UsageError("--instance-type and --zone must be given together")
    if output and format == 'table':
        raise click.UsageError("--output requires --format json, yaml or csv")

    if instance_type:
        groups = [NodeGroup(
            instance_type=instance_type,
            availability_zone=zone,
            region=region or region_from_zone(zone),
            count=count
        )]
    else:
        try:
            with console.status("[bold green]Collecting node inventory..."):
                groups = factory.build_collector(settings).collect()
        except InventoryError as e:
            raise click.ClickException(str(e))

    evaluator = factory.build_evaluator(settings, limit=limit, max_workers=workers, timeout=timeout)

    evaluations = []
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            task = progress.add_task("Evaluating node groups...", total=len(groups))
            for group in groups:
                progress.update(task, description=f"Evaluating {group.instance_type} in {group.availability_zone}...")
                evaluations.append(evaluator.evaluate_group(group))
                progress.advance(task)
    except (AuthenticationError, CancellationError) as e:
        raise click.ClickException(str(e))

    if format == 'table':
        _display_recommendations(console, evaluations)
    else:
        emit_document(console, evaluations, format, output)


def _display_recommendations(console, evaluations):
    """Display pricing and ranked replacements per node group"""

    for evaluation in evaluations:
        group = evaluation.group
        console.print(
            f"\n[bold cyan]{group.instance_type}[/bold cyan] in [magenta]{group.availability_zone}[/magenta] "
            f"x{group.count}  on-demand={format_price(evaluation.on_demand_price)} "
            f"spot={format_price(evaluation.spot_price)} "
            f"savings={evaluation.savings_percentage:.2f}%"
        )
        if evaluation.pricing_error:
            console.print(f"  [yellow]pricing unavailable: {evaluation.pricing_error}[/yellow]")

        status = evaluation.status
        if status == EvaluationStatus.LOOKUP_FAILED:
            console.print(f"  [red]replacement lookup failed: {evaluation.replacement_error}[/red]")
        elif status == EvaluationStatus.NO_REPLACEMENTS:
            console.print("  no lower-cost compatible replacements found")
        else:
            console.print("  replacements with additional spot savings ($/hour):")
            for option in evaluation.replacements:
                console.print(
                    f"  - [green]{option.instance_type:<14}[/green] spot=${option.spot_price:<10.4f} "
                    f"save/node=${option.savings_per_node_per_hour:<8.4f} "
                    f"save/group=${option.savings_per_group_per_hour:<8.4f}"
                )

    summary = summarize(evaluations)
    summary_text = f"""[bold]Recommendation Summary[/bold]

Node groups: [cyan]{summary['total_groups']}[/cyan]
Nodes: [cyan]{summary['total_nodes']}[/cyan]
Groups with replacements: [green]{summary['groups_with_replacements']}[/green]
Groups with lookup failures: [red]{summary['groups_failed']}[/red]
Best-case savings: [bold yellow]${summary['best_savings_per_hour']:,.4f}/hour[/bold yellow]"""

    console.print("\n")
    console.print(Panel(summary_text, border_style="green" if summary['groups_failed'] == 0 else "red"))
