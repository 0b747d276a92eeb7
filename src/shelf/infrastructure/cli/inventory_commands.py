"""CLI commands for the copy ledger."""

from __future__ import annotations

import click

from shelf.application.adjust_inventory import AdjustInventoryHandler
from shelf.application.dto import InventoryDTO
from shelf.application.manage_inventory import (
    SetInventoryStatusHandler,
    UpdateThresholdsHandler,
)
from shelf.application.retry import retry_on_conflict
from shelf.application.show_inventory import (
    VIEWS,
    InventoryReportHandler,
    ShowAvailabilityHandler,
    ShowInventoryHandler,
)
from shelf.application.track_inventory import TrackInventoryHandler
from shelf.domain.exceptions import DomainException
from shelf.domain.model.inventory import InventoryStatus
from shelf.domain.model.ledger import LedgerOperation
from shelf.infrastructure.bootstrap import inventory_repository
from shelf.infrastructure.config import Settings

_OPERATIONS = [op.value.replace("_", "-") for op in LedgerOperation]


def _display_item(dto: InventoryDTO) -> None:
    click.echo(f"{dto.item_id}  {dto.title}  (status={dto.status}, version={dto.version})")
    click.echo(
        f"  total={dto.total} available={dto.available} reserved={dto.reserved} "
        f"rented={dto.rented} damaged={dto.damaged} lost={dto.lost}"
    )
    flags = [name for name, on in (("LOW STOCK", dto.low_stock), ("REORDER", dto.needs_reorder)) if on]
    if flags:
        click.echo(f"  {' / '.join(flags)}")


@click.command("track")
@click.option("--item", "item_id", required=True, help="Catalog item ID.")
@click.option("--title", required=True, help="Display title.")
@click.option("--copies", default=0, show_default=True, type=click.IntRange(min=0), help="Initial copies on the shelf.")
@click.option("--min-stock", default=1, show_default=True, type=click.IntRange(min=0), help="Low-stock threshold.")
@click.option("--max-stock", type=click.IntRange(min=0), default=None, help="Maximum stock.")
@click.option("--reorder-level", type=click.IntRange(min=0), default=None, help="Reorder threshold.")
@click.option("--location", default=None, help="Location code.")
@click.option("--shelf", "shelf_code", default=None, help="Shelf code.")

@click.pass_obj
def inventory_track(settings: Settings, item_id, title, copies, min_stock, max_stock, reorder_level, location, shelf_code) -> None:
    """Start tracking copies of a catalog item."""
    handler = TrackInventoryHandler(inventory_repo=inventory_repository(settings))

    try:
        dto = handler.handle(
            item_id=item_id,
            title=title,
            copies=copies,
            minimum_stock=min_stock,
            maximum_stock=max_stock,
            reorder_level=reorder_level,
            location_code=location,
            shelf_code=shelf_code,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_item(dto)


@click.command("adjust")
@click.argument("operation", type=click.Choice(_OPERATIONS))
@click.option("--item", "item_id", required=True, help="Catalog item ID.")
@click.option("--quantity", required=True, type=int, help="Number of copies.")
@click.option("--expect-version", type=int, default=None, help="Fail if the record changed since this version.")
@click.pass_obj
def inventory_adjust(settings: Settings, operation: str, item_id: str, quantity: int, expect_version: int | None) -> None:
    """Move copies between pools (reserve, rent, return-rental, ...)."""
    handler = AdjustInventoryHandler(inventory_repo=inventory_repository(settings))

    def _run() -> InventoryDTO:
        return handler.handle(item_id, operation, quantity, expected_version=expect_version)

    try:
        if expect_version is None:
            dto = retry_on_conflict(_run, attempts=settings.conflict_retries)
        else:
            # the caller pinned a version; a conflict is the answer
            dto = _run()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_item(dto)


@click.command("status")
@click.option("--item", "item_id", required=True, help="Catalog item ID.")
@click.argument("status", type=click.Choice([s.value for s in InventoryStatus], case_sensitive=False))

@click.pass_obj
def inventory_status(settings: Settings, item_id: str, status: str) -> None:
    """Activate, deactivate or discontinue a tracked item."""
    handler = SetInventoryStatusHandler(inventory_repo=inventory_repository(settings))

    try:
        dto = handler.handle(item_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory for '{dto.item_id}' is now {dto.status}")


@click.command("thresholds")
@click.option("--item", "item_id", required=True, help="Catalog item ID.")
@click.option("--min-stock", required=True, type=int, help="Low-stock threshold.")
@click.option("--max-stock", type=int, default=None, help="Maximum stock.")
@click.option("--reorder-level", type=int, default=None, help="Reorder threshold.")

@click.pass_obj
def inventory_thresholds(settings: Settings, item_id: str, min_stock: int, max_stock: int | None, reorder_level: int | None) -> None:
    """Change stock thresholds for a tracked item."""
    handler = UpdateThresholdsHandler(inventory_repo=inventory_repository(settings))

    try:
        dto = handler.handle(item_id, min_stock, max_stock, reorder_level)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_item(dto)


@click.command("show")
@click.option("--view", type=click.Choice(VIEWS), default="all", show_default=True)

@click.pass_obj
def inventory_show(settings: Settings, view: str) -> None:
    """Show copy counts."""
    handler = ShowInventoryHandler(inventory_repo=inventory_repository(settings))
    lines = handler.handle(view)

    if not lines:
        click.echo("No inventory records found.")
        return

    click.echo(
        f"{'Item':<12} {'Title':<24} {'Total':>6} {'Avail':>6} {'Resv':>6} "
        f"{'Rented':>7} {'Dmg':>5} {'Lost':>5}"
    )
    click.echo("-" * 78)
    for d in lines:
        click.echo(
            f"{d.item_id:<12} {d.title[:24]:<24} {d.total:>6} {d.available:>6} {d.reserved:>6} "
            f"{d.rented:>7} {d.damaged:>5} {d.lost:>5}"
        )


@click.command("availability")
@click.option("--item", "item_id", required=True, help="Catalog item ID.")

@click.pass_obj
def inventory_availability(settings: Settings, item_id: str) -> None:
    """Is a catalog item available right now?"""
    handler = ShowAvailabilityHandler(inventory_repo=inventory_repository(settings))

    try:
        dto = handler.handle(item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    state = "available" if dto.available else "not available"
    click.echo(f"{dto.item_id}: {state} ({dto.available_copies} of {dto.total_copies} copies, {dto.status})")


@click.command("report")

@click.pass_obj
def inventory_report(settings: Settings) -> None:
    """Summary counts over all tracked items."""
    s = InventoryReportHandler(inventory_repo=inventory_repository(settings)).handle()
    click.echo(f"Active items:        {s.active_items}")
    click.echo(f"  available:         {s.available_items}")
    click.echo(f"  out of stock:      {s.out_of_stock_items}")
    click.echo(f"Low-stock items:     {s.low_stock_items}")
    click.echo(f"Copies total:        {s.total_copies}")
    click.echo(f"Copies available:    {s.available_copies}")
    click.echo(f"Copies rented:       {s.rented_copies}")
