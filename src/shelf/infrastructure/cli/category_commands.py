"""CLI commands for the category tree."""

from __future__ import annotations

import click

from shelf.application.create_category import CreateCategoryHandler
from shelf.application.delete_category import DeleteCategoryHandler
from shelf.application.dto import CategoryDTO, CategoryTreeDTO
from shelf.application.link_catalog_item import LinkCatalogItemHandler
from shelf.application.show_category import ShowCategoryHandler
from shelf.application.update_category import (
    ChangeCategoryStateHandler,
    MoveCategoryHandler,
    UpdateCategoryHandler,
)
from shelf.domain.exceptions import DomainException
from shelf.infrastructure.bootstrap import catalog_link_repository, category_repository
from shelf.infrastructure.config import Settings


def _repos(settings: Settings) -> dict:
    return {
        "category_repo": category_repository(settings),
        "link_repo": catalog_link_repository(settings),
    }


def _label(dto: CategoryDTO) -> str:
    suffix = "" if dto.is_active else "  [inactive]"
    return f"#{dto.id} {dto.name} ({dto.slug}){suffix}"


def _echo_tree(tree: CategoryTreeDTO, depth: int = 0) -> None:
    click.echo(f"{'  ' * depth}{_label(tree.category)}")
    for child in tree.children:
        _echo_tree(child, depth + 1)


def _echo_list(dtos: list[CategoryDTO], empty: str) -> None:
    if not dtos:
        click.echo(empty)
        return
    for dto in dtos:
        click.echo(_label(dto))


@click.command("create")
@click.option("--name", required=True, help="Category name.")
@click.option("--description", default=None, help="Free-text description.")
@click.option("--parent", "parent_id", default=None, help="Parent category ID.")
@click.pass_obj
def category_create(settings: Settings, name: str, description: str | None, parent_id: str | None) -> None:
    """Create a category, optionally under a parent."""
    handler = CreateCategoryHandler(**_repos(settings))

    try:
        dto = handler.handle(name, description=description, parent_id=parent_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category {_label(dto)} created")


@click.command("update")
@click.option("--id", "category_id", required=True, help="Category ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--description", default=None, help="New description; an empty string clears it.")
@click.pass_obj
def category_update(settings: Settings, category_id: str, name: str | None, description: str | None) -> None:
    """Rename or re-describe a category."""
    handler = UpdateCategoryHandler(**_repos(settings))

    try:
        dto = handler.handle(category_id, name=name, description=description)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category {_label(dto)} updated")


@click.command("move")
@click.option("--id", "category_id", required=True, help="Category ID.")
@click.option("--parent", "parent_id", default=None, help="New parent ID.")
@click.option("--root", is_flag=True, help="Make the category a root.")
@click.pass_obj
def category_move(settings: Settings, category_id: str, parent_id: str | None, root: bool) -> None:
    """Move a category under a new parent (or to the top level)."""
    if (parent_id is None) == (not root):
        raise click.UsageError("Pass exactly one of --parent or --root.")
    handler = MoveCategoryHandler(**_repos(settings))

    try:
        dto = handler.handle(category_id, None if root else parent_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    where = "the top level" if dto.parent_id is None else f"#{dto.parent_id}"
    click.echo(f"Category {_label(dto)} moved to {where}")


@click.command("delete")
@click.option("--id", "category_id", required=True, help="Category ID.")
@click.pass_obj
def category_delete(settings: Settings, category_id: str) -> None:
    """Delete an empty leaf category."""
    handler = DeleteCategoryHandler(**_repos(settings))

    try:
        handler.handle(category_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category #{category_id} deleted")


@click.command("deactivate")
@click.option("--id", "category_id", required=True, help="Category ID.")
@click.pass_obj
def category_deactivate(settings: Settings, category_id: str) -> None:
    """Hide a category; its name becomes reusable."""
    try:
        dto = ChangeCategoryStateHandler(**_repos(settings)).handle(category_id, active=False)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category {_label(dto)} deactivated")


@click.command("reactivate")
@click.option("--id", "category_id", required=True, help="Category ID.")
@click.pass_obj
def category_reactivate(settings: Settings, category_id: str) -> None:
    """Bring a deactivated category back."""
    try:
        dto = ChangeCategoryStateHandler(**_repos(settings)).handle(category_id, active=True)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category {_label(dto)} reactivated")


@click.command("show")
@click.option("--id", "category_id", default=None, help="Category ID.")
@click.option("--slug", default=None, help="Category slug.")
@click.pass_obj
def category_show(settings: Settings, category_id: str | None, slug: str | None) -> None:
    """Show one category, with its direct subcategories."""
    if (category_id is None) == (slug is None):
        raise click.UsageError("Pass exactly one of --id or --slug.")
    handler = ShowCategoryHandler(**_repos(settings))

    try:
        dto = handler.get(category_id) if category_id else handler.get_by_slug(slug)
        children = handler.children(dto.id)
        items = handler.linked_item_count(dto.id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(_label(dto))
    if dto.description:
        click.echo(f"  {dto.description}")
    click.echo(f"  parent: {'-' if dto.parent_id is None else '#' + dto.parent_id}")
    click.echo(f"  catalog items: {items}")
    click.echo(f"  created: {dto.created_at}  updated: {dto.updated_at}")
    for child in children:
        click.echo(f"  - {_label(child)}")


@click.command("tree")
@click.option("--id", "category_id", default=None, help="Subtree root; whole forest if omitted.")
@click.pass_obj
def category_tree(settings: Settings, category_id: str | None) -> None:
    """Print the category hierarchy."""
    handler = ShowCategoryHandler(**_repos(settings))

    try:
        trees = handler.tree(category_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not trees:
        click.echo("No categories found.")
        return
    for tree in trees:
        _echo_tree(tree)


@click.command("ancestors")
@click.option("--id", "category_id", required=True, help="Category ID.")
@click.pass_obj
def category_ancestors(settings: Settings, category_id: str) -> None:
    """List ancestors from the root down to the parent."""
    try:
        dtos = ShowCategoryHandler(**_repos(settings)).ancestors(category_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_list(dtos, "Category is a root.")


@click.command("descendants")
@click.option("--id", "category_id", required=True, help="Category ID.")
@click.pass_obj
def category_descendants(settings: Settings, category_id: str) -> None:
    """List every category below this one (pre-order)."""
    try:
        dtos = ShowCategoryHandler(**_repos(settings)).descendants(category_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_list(dtos, "Category has no subcategories.")


@click.command("link")
@click.option("--id", "category_id", required=True, help="Category ID.")
@click.option("--item", "item_id", required=True, help="Catalog item ID.")
@click.pass_obj
def category_link(settings: Settings, category_id: str, item_id: str) -> None:
    """File a catalog item under a category."""
    try:
        LinkCatalogItemHandler(**_repos(settings)).link(category_id, item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item '{item_id}' filed under category #{category_id}")


@click.command("unlink")
@click.option("--id", "category_id", required=True, help="Category ID.")
@click.option("--item", "item_id", required=True, help="Catalog item ID.")
@click.pass_obj
def category_unlink(settings: Settings, category_id: str, item_id: str) -> None:
    """Remove a catalog item from a category."""
    try:
        LinkCatalogItemHandler(**_repos(settings)).unlink(category_id, item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item '{item_id}' removed from category #{category_id}")
