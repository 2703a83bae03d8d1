import click
from rich.markup import escape

from ...core.exceptions import ParseErrorGroup, PriceCacheError, TransportError
from ..output import FORMATS, emit, facade_from_context


@click.command()
@click.argument('instance_types', nargs=-1, required=True)
@click.option('--zone', '-z', 'zones', multiple=True, help='Availability zone to include (can specify multiple)')
@click.option('--days', '-d', type=click.IntRange(1, 90), default=None,
              help='Days of spot history to average (defaults to configuration)')
@click.option('--hydrate', is_flag=True, help='Load spot history for every instance type first')
@click.option('--output', '-o', type=click.Path(), help='Output file for results')
@click.option('--format', '-f', type=click.Choice(FORMATS), default='table', help='Output format')
@click.pass_context
def spot(ctx, instance_types, zones, days, hydrate, output, format):
    """
    Show time-weighted average spot prices

    Examples:
        pricecache spot m5.large --days 7
        pricecache -r us-west-2 spot c5.xlarge -z us-west-2a -z us-west-2b
    """
    console = ctx.obj['console']
    facade = facade_from_context(ctx)
    window = days or ctx.obj['settings'].pricing.spot_days_back

    if hydrate:
        try:
            with console.status("[bold green]Loading spot price history..."):
                result = facade.hydrate_spot_cache(window)
        except TransportError as e:
            console.print(f"[red]✗ {escape(str(e))}[/red]")
            ctx.exit(1)
        console.print(f"✓ Loaded spot history for [green]{result.entries}[/green] instance types")
        if result.errors:
            console.print(f"[yellow]! {len(result.errors)} spot price event(s) could not be parsed[/yellow]")

    rows = []
    for instance_type in instance_types:
        row = {'instance_type': instance_type, 'zones': list(zones), 'price': None}
        try:
            row['price'] = facade.get_spot_average_price(instance_type, zones, window)
        except ParseErrorGroup as e:
            row['price'] = e.partial
            row['error'] = str(e)
        except PriceCacheError as e:
            row['error'] = str(e)
        rows.append(row)

    refreshed = facade.last_spot_refresh_time()
    results = {
        'region': facade.region,
        'days': window,
        'refreshed_at': refreshed.isoformat() if refreshed else None,
        'prices': rows,
    }
    emit(ctx, results, format, output, f"Spot Prices ({window} day average)",
         ["Instance Type", "Zones", "Price ($/hr)", "Status"])

    if all(row.get('error') for row in rows):
        ctx.exit(1)
