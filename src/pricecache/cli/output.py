import json
from typing import Any, Dict, List, Optional

import click
import yaml
from rich.markup import escape
from rich.table import Table

from ..core.exceptions import ValidationError

FORMATS = ['table', 'json', 'yaml']


def facade_from_context(ctx: click.Context):
    """Build the price facade for the current invocation"""
    if 'facade' not in ctx.obj:
        try:
            ctx.obj['facade'] = ctx.obj['facade_factory'](ctx.obj['settings'])
        except ValidationError as e:
            raise click.UsageError(str(e))
    return ctx.obj['facade']


def emit(ctx: click.Context, results: Dict[str, Any], format: str, output: Optional[str],
         title: str, columns: List[str]) -> None:
    """Print or save results in the requested format"""
    console = ctx.obj['console']

    if format == 'table':
        table = Table(title=title, show_header=True, header_style="bold cyan")
        for column in columns:
            justify = "right" if column.endswith("($/hr)") else "left"
            table.add_column(column, justify=justify)
        for row in results['prices']:
            table.add_row(*_table_cells(row))
        console.print(table)
        return

    if format == 'json':
        rendered = json.dumps(results, indent=2, default=str)
    else:
        rendered = yaml.dump(results, default_flow_style=False, sort_keys=False)

    if output:
        with open(output, 'w') as f:
            f.write(rendered)
        console.print(f"✓ Results saved to [green]{output}[/green]")
    else:
        click.echo(rendered)


def _table_cells(row: Dict[str, Any]) -> List[str]:
    price = row.get('price')
    cells = [row['instance_type']]
    if 'zones' in row:
        cells.append(', '.join(row['zones']) or 'all')
    cells.append(f"${price:,.4f}" if price is not None else "-")
    cells.append(f"[red]{escape(row['error'])}[/red]" if row.get('error') else "[green]ok[/green]")
    return cells
