import click

from shelf.infrastructure.cli.category_commands import (
    category_ancestors,
    category_create,
    category_deactivate,
    category_delete,
    category_descendants,
    category_link,
    category_move,
    category_reactivate,
    category_show,
    category_tree,
    category_unlink,
    category_update,
)
from shelf.infrastructure.cli.inventory_commands import (
    inventory_adjust,
    inventory_availability,
    inventory_report,
    inventory_show,
    inventory_status,
    inventory_thresholds,
    inventory_track,
)
from shelf.infrastructure.config import load_settings
from shelf.infrastructure.logging import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """shelf: copy ledger and category hierarchy"""
    settings = load_settings()
    configure_logging(settings)
    ctx.obj = settings


@cli.group()
def inventory() -> None:
    """Track copies of catalog items."""


@cli.group()
def category() -> None:
    """Manage the category tree."""


# Register subcommands
inventory.add_command(inventory_adjust)
inventory.add_command(inventory_availability)
inventory.add_command(inventory_report)
inventory.add_command(inventory_show)
inventory.add_command(inventory_status)
inventory.add_command(inventory_thresholds)
inventory.add_command(inventory_track)
category.add_command(category_ancestors)
category.add_command(category_create)
category.add_command(category_deactivate)
category.add_command(category_delete)
category.add_command(category_descendants)
category.add_command(category_link)
category.add_command(category_move)
category.add_command(category_reactivate)
category.add_command(category_show)
category.add_command(category_tree)
category.add_command(category_unlink)
category.add_command(category_update)
