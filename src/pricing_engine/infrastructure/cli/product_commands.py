"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from pricing_engine.application.create_product import CreateProductHandler
from pricing_engine.application.delete_product import DeleteProductHandler
from pricing_engine.application.dto import ADMIN_ROLE, ProductDraft, ProductDTO, ProductPatch
from pricing_engine.application.get_product import GetProductHandler
from pricing_engine.application.list_products import ListProductsHandler
from pricing_engine.application.show_price_history import ShowPriceHistoryHandler
from pricing_engine.application.update_product import UpdateProductHandler
from pricing_engine.domain.exceptions import DomainException
from pricing_engine.infrastructure.bootstrap import catalog_store, settings

_ROLE = click.option(
    "--role",
    default="customer",
    show_default=True,
    help="Caller role; only 'admin' sees cost and margin.",
)


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Selling price (e.g. 120.00).")
@click.option("--stock", required=True, type=int, help="Units in stock.")
@click.option("--category", default="", help="Category label.")
@click.option("--purchase-price", default=None, help="Cost basis.")
@click.option("--sku", default=None, help="Stock keeping unit.")
@click.option("--barcode", default=None, help="Barcode for scanner lookup.")
def product_add(
    name: str,
    price: str,
    stock: int,
    category: str,
    purchase_price: str | None,
    sku: str | None,
    barcode: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = CreateProductHandler(store=catalog_store())

    try:
        dto = handler.handle(
            ProductDraft(
                name=name,
                price=price,
                stock=stock,
                category=category,
                purchase_price=purchase_price,
                sku=sku,
                barcode=barcode,
            )
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{dto.id} '{dto.name}' added at {dto.price:.2f}")


@click.command("list")
@_ROLE
@click.option("--search", default=None, help="Match name, SKU, barcode or category.")
def product_list(role: str, search: str | None) -> None:
    """List products in the catalog."""
    products = ListProductsHandler(store=catalog_store()).handle(role=role, search=search)

    if not products:
        click.echo("No products found.")
        return

    show_margin = role == ADMIN_ROLE
    header = f"{'ID':<6} {'Name':<24} {'Category':<14} {'Price':>10} {'Stock':>6}"
    if show_margin:
        header += f" {'Margin %':>9}"
    click.echo(header)
    click.echo("-" * len(header))
    for p in products:
        line = f"{p.id:<6} {p.name:<24} {p.category:<14} {p.price:>10.2f} {p.stock:>6}"
        if show_margin:
            line += f" {p.profit_margin:>9.2f}"
        click.echo(line)


@click.command("show")
@click.option("--id", "product_id", type=int, default=None, help="Product ID.")
@click.option("--barcode", default=None, help="Look up an active product by barcode.")
@_ROLE
def product_show(product_id: int | None, barcode: str | None, role: str) -> None:
    """Show one product."""
    if (product_id is None) == (barcode is None):
        raise click.UsageError("Give exactly one of --id or --barcode")

    handler = GetProductHandler(store=catalog_store())
    try:
        if product_id is not None:
            dto = handler.handle(product_id, role=role)
        else:
            dto = handler.by_barcode(barcode, role=role)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_product(dto)


def _display_product(dto: ProductDTO) -> None:
    for key, value in dto.as_dict().items():
        if value is not None:
            click.echo(f"{key:<20} {value}")


@click.command("update")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--price", default=None, help="New selling price.")
@click.option("--purchase-price", default=None, help="New cost basis.")
@click.option("--stock", default=None, type=int, help="New stock level.")
@click.option("--discount-type", type=click.Choice(["percentage", "fixed"]), default=None)
@click.option("--discount-value", default=None, help="Discount amount or percent.")
@click.option("--discount-start", default=None, help="Discount start date (YYYY-MM-DD).")
@click.option("--discount-end", default=None, help="Discount end date (YYYY-MM-DD).")
def product_update(
    product_id: int,
    price: str | None,
    purchase_price: str | None,
    stock: int | None,
    discount_type: str | None,
    discount_value: str | None,
    discount_start: str | None,
    discount_end: str | None,
) -> None:
    """Update a product's price, stock or discount."""
    handler = UpdateProductHandler(store=catalog_store(), actor=settings().actor)
    patch = ProductPatch(
        price=price,
        purchase_price=purchase_price,
        stock=stock,
        discount_type=discount_type,
        discount_value=discount_value,
        discount_start_date=discount_start,
        discount_end_date=discount_end,
    )

    try:
        dto = handler.handle(product_id, patch)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{dto.id} updated: price {dto.price:.2f}, margin {dto.profit_margin}%")


@click.command("delete")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
def product_delete(product_id: int) -> None:
    """Remove a product from the catalog."""
    try:
        DeleteProductHandler(store=catalog_store()).handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} deleted.")


@click.command("history")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
def product_history(product_id: int) -> None:
    """Show a product's price changes, most recent first."""
    try:
        entries = ShowPriceHistoryHandler(store=catalog_store()).handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not entries:
        click.echo("No price changes recorded.")
        return

    click.echo(f"{'When':<26} {'Old':>10} {'New':>10}  {'By':<10} Reason")
    click.echo("-" * 72)
    for e in entries:
        click.echo(
            f"{e.timestamp[:19]:<26} {e.old_price:>10.2f} {e.new_price:>10.2f}  {e.actor:<10} {e.reason}"
        )
