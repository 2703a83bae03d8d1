import click
from rich.markup import escape
from rich.table import Table

from ...core.exceptions import TransportError
from ..output import FORMATS, emit, facade_from_context


@click.command()
@click.option('--ondemand/--no-ondemand', default=True, help='Refresh the on-demand cache')
@click.option('--spot/--no-spot', default=True, help='Refresh the spot cache')
@click.option('--days', '-d', type=click.IntRange(1, 90), default=None,
              help='Days of spot history to load (defaults to configuration)')
@click.option('--output', '-o', type=click.Path(), help='Output file for the summary')
@click.option('--format', '-f', type=click.Choice(FORMATS), default='table', help='Output format')
@click.pass_context
def hydrate(ctx, ondemand, spot, days, output, format):
    """
    Load the full price catalogs and report what was cached

    Examples:
        pricecache hydrate
        pricecache hydrate --no-ondemand --days 7 -f json
    """
    console = ctx.obj['console']
    facade = facade_from_context(ctx)

    results = []
    try:
        if ondemand:
            with console.status("[bold green]Loading on-demand catalog..."):
                results.append(facade.hydrate_ondemand_cache())
        if spot:
            with console.status("[bold green]Loading spot price history..."):
                results.append(facade.hydrate_spot_cache(days))
    except TransportError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        ctx.exit(1)

    summary = [result.to_dict() for result in results]

    if format != 'table':
        emit(ctx, {'region': facade.region, 'caches': summary}, format, output, "Hydration Summary", [])
        return

    table = Table(title="Hydration Summary", show_header=True, header_style="bold cyan")
    table.add_column("Cache", style="cyan")
    table.add_column("Entries", justify="right", style="green")
    table.add_column("Parse Errors", justify="right", style="yellow")
    table.add_column("Refreshed At (UTC)")

    for entry in summary:
        table.add_row(entry['cache'], str(entry['entries']), str(len(entry['errors'])), entry['refreshed_at'])

    console.print(table)
