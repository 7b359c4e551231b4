import click

from pricing_engine.infrastructure.bootstrap import settings
from pricing_engine.infrastructure.cli.pricing_commands import (
    price_bulk,
    price_check,
    price_discount,
    price_margins,
    price_offers,
    price_partial,
    price_preview,
)
from pricing_engine.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_history,
    product_list,
    product_show,
    product_update,
)
from pricing_engine.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Log at DEBUG level.")
def cli(verbose: bool) -> None:
    """Catalog pricing & discount rules engine"""
    configure_logging("DEBUG" if verbose else settings().log_level)


@cli.group()
def product() -> None:
    """Manage catalog products."""


@cli.group()
def price() -> None:
    """Check and bulk-update prices and discounts."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_history)
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_update)
price.add_command(price_bulk)
price.add_command(price_check)
price.add_command(price_discount)
price.add_command(price_margins)
price.add_command(price_offers)
price.add_command(price_partial)
price.add_command(price_preview)
