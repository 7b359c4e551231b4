"""CLI commands for pricing checks and bulk price changes."""

from __future__ import annotations

import click

from pricing_engine.application.bulk_partial_update import BulkPartialUpdateHandler
from pricing_engine.application.bulk_update_prices import BulkUpdatePricesHandler
from pricing_engine.application.check_pricing import (
    CheckOfferConflictsHandler,
    CheckProfitRulesHandler,
)
from pricing_engine.application.dto import BulkUpdateSummaryDTO, PartialPriceUpdate, PricingTerms
from pricing_engine.application.margin_report import MarginReportHandler
from pricing_engine.domain.exceptions import DomainException
from pricing_engine.infrastructure.bootstrap import catalog_store, settings


def _filter_options(func):
    func = click.option("--max-price", default=None, help="Upper price bound.")(func)
    func = click.option("--min-price", default=None, help="Lower price bound.")(func)
    func = click.option(
        "--low-stock",
        "stock_threshold",
        default=None,
        type=int,
        help="Only products with stock at or below this level.",
    )(func)
    func = click.option("--category", default="all", show_default=True, help="Category filter.")(func)
    return func


def _pricing_request(
    strategy: str,
    value: str | None,
    category: str,
    stock_threshold: int | None,
    min_price: str | None,
    max_price: str | None,
) -> dict:
    return {
        "activeTab": "pricing",
        "strategy": strategy,
        "value": value,
        "category": category,
        "applyToLowStock": stock_threshold is not None,
        "stockThreshold": stock_threshold,
        "minPrice": min_price,
        "maxPrice": max_price,
    }


def _display_summary(summary: BulkUpdateSummaryDTO) -> None:
    click.echo(
        f"Strategy {summary.strategy}: {summary.updated_count} of "
        f"{summary.total_filtered} products updated."
    )
    if summary.conflict_count:
        names = ", ".join(f"#{p.id} {p.name}" for p in summary.conflict_products)
        click.echo(f"{summary.conflict_count} skipped with an existing discount: {names}")


@click.command("check")
@click.option("--price", required=True, help="Selling price.")
@click.option("--purchase-price", default=None, help="Cost basis.")
@click.option("--discount-type", type=click.Choice(["percentage", "fixed"]), default="fixed")
@click.option("--discount-value", default=None, help="Discount amount or percent.")
def price_check(
    price: str,
    purchase_price: str | None,
    discount_type: str,
    discount_value: str | None,
) -> None:
    """Check a price against the profit rules."""
    try:
        terms = PricingTerms.of(price, purchase_price, discount_type, discount_value)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    result = CheckProfitRulesHandler().handle(terms)
    if not result.is_valid:
        raise click.ClickException(result.error)
    click.echo("Pricing is valid.")


@click.command("offers")
@click.option("--id", "product_id", required=True, type=int, help="Product whose offer to check.")
def price_offers(product_id: int) -> None:
    """Check a product's discount against its category."""
    store = catalog_store()
    product = store.get(product_id)
    if product is None:
        raise click.ClickException(f"Product #{product_id} not found")

    result = CheckOfferConflictsHandler(store).handle(product, exclude_id=product_id)
    for conflict in result.conflicts:
        click.echo(f"CONFLICT  {conflict.type:<20} {conflict.details}")
    for warning in result.warnings:
        click.echo(f"WARNING   {warning}")
    if not result.is_valid:
        raise click.ClickException(result.error)
    click.echo("No blocking conflicts.")


@click.command("bulk")
@click.option(
    "--strategy",
    required=True,
    type=click.Choice(["percentage", "fixed", "range"]),
    help="How to compute new prices.",
)
@click.option("--value", default=None, help="Percent or amount for percentage/fixed.")
@_filter_options
def price_bulk(
    strategy: str,
    value: str | None,
    category: str,
    stock_threshold: int | None,
    min_price: str | None,
    max_price: str | None,
) -> None:
    """Apply a pricing strategy to every matching product."""
    handler = BulkUpdatePricesHandler(store=catalog_store(), actor=settings().actor)
    request = _pricing_request(strategy, value, category, stock_threshold, min_price, max_price)

    try:
        summary = handler.handle(request)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_summary(summary)


@click.command("discount")
@click.option("--type", "discount_type", type=click.Choice(["percentage", "fixed"]), default="percentage")
@click.option("--value", required=True, help="Discount amount or percent.")
@click.option("--start", default=None, help="Start date (YYYY-MM-DD).")
@click.option("--end", default=None, help="End date (YYYY-MM-DD).")
@click.option(
    "--on-conflict",
    type=click.Choice(["skip", "override", "merge"]),
    default="skip",
    show_default=True,
    help="What to do with products that already carry a discount.",
)
@_filter_options
def price_discount(
    discount_type: str,
    value: str,
    start: str | None,
    end: str | None,
    on_conflict: str,
    category: str,
    stock_threshold: int | None,
    min_price: str | None,
    max_price: str | None,
) -> None:
    """Apply a category-wide discount."""
    handler = BulkUpdatePricesHandler(store=catalog_store(), actor=settings().actor)
    request = {
        "activeTab": "discounts",
        "categoryDiscount": True,
        "discountType": discount_type,
        "discountValue": value,
        "discountStartDate": start,
        "discountEndDate": end,
        "conflictResolution": on_conflict,
        "category": category,
        "applyToLowStock": stock_threshold is not None,
        "stockThreshold": stock_threshold,
        "minPrice": min_price,
        "maxPrice": max_price,
    }

    try:
        summary = handler.handle(request)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_summary(summary)


@click.command("preview")
@click.option(
    "--strategy",
    required=True,
    type=click.Choice(["percentage", "fixed", "range"]),
    help="How to compute new prices.",
)
@click.option("--value", default=None, help="Percent or amount for percentage/fixed.")
@_filter_options
def price_preview(
    strategy: str,
    value: str | None,
    category: str,
    stock_threshold: int | None,
    min_price: str | None,
    max_price: str | None,
) -> None:
    """Show what a bulk pricing update would do, without applying it."""
    handler = BulkUpdatePricesHandler(store=catalog_store())
    request = _pricing_request(strategy, value, category, stock_threshold, min_price, max_price)

    try:
        lines = handler.preview(request)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No products match.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Current':>10} {'New':>10} {'Change':>10}")
    click.echo("-" * 64)
    for line in lines:
        click.echo(
            f"{line.product_id:<6} {line.name:<24} {line.current_price:>10.2f} "
            f"{line.new_price:>10.2f} {line.price_change:>+10.2f}"
        )


def _parse_partial_items(raw_items: tuple[str, ...]) -> list[PartialPriceUpdate]:
    """Parse 'ID:BASE[:COST]' entries; either price may be left empty."""
    updates: list[PartialPriceUpdate] = []
    for raw in raw_items:
        parts = raw.split(":")
        if len(parts) not in (2, 3):
            raise click.BadParameter(
                f"Invalid item format '{raw}'. Expected 'ID:BasePrice[:CostPrice]'."
            )
        try:
            product_id = int(parts[0])
        except ValueError:
            raise click.BadParameter(f"Invalid product ID '{parts[0]}'.")
        base = parts[1] or None
        cost = (parts[2] or None) if len(parts) == 3 else None
        updates.append(PartialPriceUpdate(product_id=product_id, base_price=base, cost_price=cost))
    return updates


@click.command("partial")
@click.option(
    "--item",
    "items",
    required=True,
    multiple=True,
    help="Row as 'ID:BasePrice[:CostPrice]'; repeat for more rows.",
)
def price_partial(items: tuple[str, ...]) -> None:
    """Set base and/or cost prices on several products; bad rows are reported."""
    updates = _parse_partial_items(items)
    handler = BulkPartialUpdateHandler(store=catalog_store(), actor=settings().actor)
    report = handler.handle(updates)

    click.echo(f"{report.success_count} of {report.total_updates} updates applied.")
    for error in report.errors:
        click.echo(f"  #{error.product_id}: {error.error}")


@click.command("margins")
def price_margins() -> None:
    """Show margin and financial health for every product."""
    lines = MarginReportHandler(store=catalog_store()).handle()

    if not lines:
        click.echo("No products found.")
        return

    click.echo(
        f"{'ID':<6} {'Name':<24} {'Price':>10} {'Final':>10} {'Cost':>10} {'Margin %':>9}  Health"
    )
    click.echo("-" * 84)
    for line in lines:
        click.echo(
            f"{line.product_id:<6} {line.name:<24} {line.price:>10.2f} {line.final_price:>10.2f} "
            f"{line.purchase_price:>10.2f} {line.profit_margin:>9.2f}  {line.health}"
        )
