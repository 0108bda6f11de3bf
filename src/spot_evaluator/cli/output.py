import click
from pathlib import Path
from typing import Optional, Sequence

from ..core.base import GroupEvaluation
from ..reporting import render_document, write_report

OUTPUT_FORMATS = ['table', 'json', 'yaml', 'csv']


def format_price(price: Optional[float]) -> str:
    return f"${price:.4f}" if price is not None else "n/a"


def emit_document(console, evaluations: Sequence[GroupEvaluation], format: str,
                  output: Optional[str]) -> None:
    """Write a json/yaml/csv document to ``output`` or to stdout"""
    if output:
        path = write_report(evaluations, format, Path(output))
        console.print(f"\n✓ Results saved to [green]{path}[/green]")
    else:
        click.echo(render_document(evaluations, format))
