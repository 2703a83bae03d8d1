import click
from rich.markup import escape

from ...core.exceptions import ParseErrorGroup, PriceCacheError, TransportError
from ..output import FORMATS, emit, facade_from_context


@click.command()
@click.argument('instance_types', nargs=-1, required=True)
@click.option('--hydrate', is_flag=True, help='Load the whole on-demand catalog before looking up prices')
@click.option('--output', '-o', type=click.Path(), help='Output file for results')
@click.option('--format', '-f', type=click.Choice(FORMATS), default='table', help='Output format')
@click.pass_context
def ondemand(ctx, instance_types, hydrate, output, format):
    """
    Show on-demand hourly prices

    Examples:
        pricecache ondemand m5.large c5.xlarge
        pricecache -r eu-west-1 ondemand --hydrate m5.large -f json
    """
    console = ctx.obj['console']
    facade = facade_from_context(ctx)

    if hydrate:
        try:
            with console.status("[bold green]Loading on-demand catalog..."):
                result = facade.hydrate_ondemand_cache()
        except TransportError as e:
            console.print(f"[red]✗ {escape(str(e))}[/red]")
            ctx.exit(1)
        console.print(f"✓ Loaded [green]{result.entries}[/green] on-demand prices")
        if result.errors:
            console.print(f"[yellow]! {len(result.errors)} pricing record(s) could not be parsed[/yellow]")

    rows = []
    for instance_type in instance_types:
        row = {'instance_type': instance_type, 'price': None}
        try:
            row['price'] = facade.get_ondemand_price(instance_type)
        except ParseErrorGroup as e:
            row['price'] = e.partial
            row['error'] = str(e)
        except PriceCacheError as e:
            row['error'] = str(e)
        rows.append(row)

    refreshed = facade.last_ondemand_refresh_time()
    results = {
        'region': facade.region,
        'refreshed_at': refreshed.isoformat() if refreshed else None,
        'prices': rows,
    }
    emit(ctx, results, format, output, "On-Demand Prices",
         ["Instance Type", "Price ($/hr)", "Status"])

    if all(row.get('error') for row in rows):
        ctx.exit(1)
