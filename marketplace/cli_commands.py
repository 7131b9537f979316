"""
Flask CLI commands for operating the marketplace API.

Commands:
- flask init-db: Create all tables
- flask product-pricing REF: Show the discount resolution for a product
- flask check-delivery REF --city --country: Show delivery options for a destination
"""

import click
import json
from flask import current_app
from marketplace.database import create_all, get_session
from marketplace.exceptions import NotFoundError
from marketplace.stores import SqlAlchemyStore
from marketplace.services.discount_service import get_product_discounts
from marketplace.services.delivery_service import resolve_delivery_options


def init_cli_commands(app):
    """Register CLI commands with Flask app."""
    
    @app.cli.command('init-db')
    def init_db_command():
        """Create every table defined in marketplace.models."""
        create_all()
        click.echo(click.style('✅ Tables created', fg='green'))
    
    @app.cli.command('product-pricing')
    @click.argument('product_ref')
    def product_pricing(product_ref):
        """Print applicable discounts and the best price for a product (id or slug)."""
        store = SqlAlchemyStore(get_session())
        try:
            payload = get_product_discounts(store, product_ref)
        except NotFoundError as e:
            click.echo(click.style(f'❌ {e.message}: {product_ref}', fg='red'))
            raise SystemExit(1)
        
        click.echo(f"Price: {payload['price']}")
        click.echo(f"Applicable discounts: {len(payload['discounts'])}")
        for discount in payload['discounts']:
            click.echo(f"   - #{discount['id']} {discount['name']} ({discount['type']} {discount['value']})")
        if payload['hasDiscount']:
            best = payload['bestDiscount']
            click.echo(click.style(
                f"Best: {best['name']} -{payload['discountAmount']} => {payload['finalPrice']}",
                fg='green'
            ))
        else:
            click.echo('No discount applies')
    
    @app.cli.command('check-delivery')
    @click.argument('product_ref')
    @click.option('--city', required=True, help='Destination city')
    @click.option('--country', required=True, help='Destination country')
    @click.option('--as-json', is_flag=True, help='Print the raw resolution as JSON')
    def check_delivery(product_ref, city, country, as_json):
        """Resolve delivery options for a product and destination."""
        store = SqlAlchemyStore(get_session())
        try:
            resolution = resolve_delivery_options(
                store, product_ref, city, country,
                aliases=current_app.config.get('CITY_ALIASES')
            )
        except NotFoundError as e:
            click.echo(click.style(f'❌ {e.message}: {product_ref}', fg='red'))
            raise SystemExit(1)
        
        if as_json:
            click.echo(json.dumps(resolution.to_dict(), indent=2, default=str))
            return
        
        summary = resolution.summary
        if not summary.can_deliver:
            click.echo(click.style(f'❌ {summary.error_message}', fg='yellow'))
            return
        
        click.echo(click.style(f'✅ {summary.total_options} option(s) to {city}, {country}', fg='green'))
        for option in resolution.options:
            free = ' (free)' if option.is_free_delivery else ''
            click.echo(
                f"   - {option.pickup_location_name} [{option.pickup_city}] via {option.delivery_method_name}: "
                f"{option.delivery_price}{free}, {option.estimated_min_days}-{option.estimated_max_days} days"
            )
        click.echo(f"Cheapest: {summary.cheapest_price} | Fastest: {summary.fastest_days} day(s)")
