"""Catalog inspection commands for mfdeps.

``list`` shows every known category with its package count; ``show``
prints the packages of one category as a table or as JSON::

    $ mfdeps list
    $ mfdeps show core --format json
"""

from __future__ import annotations

import sys

import click

from mfdeps.exceptions import MfDepsError
from mfdeps.context import pass_context, MfDepsContext
from mfdeps.utils import (
    get_logger,
    print_error,
    print_json,
    print_table,
    print_warning,
)

logger = get_logger("commands.catalog")


@click.command("list")
@pass_context
def list_categories(ctx: MfDepsContext) -> None:
    """List the catalog categories."""
    try:
        categories = ctx.known_categories()
        if not categories:
            print_warning(f"No categories found in {ctx.settings.catalog_path}")
            return

        store = ctx.catalog_store()
        rows = []
        for category in categories:
            catalog = store.load(category)
            rows.append({"Category": category, "Packages": len(catalog)})

    except MfDepsError as e:
        print_error(f"{e}")
        sys.exit(1)

    print_table(
        rows,
        headers=["Category", "Packages"],
        title="Available categories",
        column_styles={
            "Category": {"style": "cyan", "no_wrap": True},
            "Packages": {"justify": "right"},
        },
    )


@click.command("show")
@click.argument("category")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    show_default=True,
    help="Output format.",
)
@pass_context
def show_category(ctx: MfDepsContext, category: str, output_format: str) -> None:
    """Show the packages of CATEGORY."""
    try:
        catalog = ctx.catalog_store().load(category)
    except MfDepsError as e:
        print_error(f"{e}")
        sys.exit(1)

    if output_format == "json":
        print_json(catalog.to_json())
        return

    if not len(catalog):
        print_warning(f"Category '{category}' is empty")
        return

    print_table(
        [{"Package": name, "Version": version} for name, version in catalog.entries.items()],
        headers=["Package", "Version"],
        title=f"Packages in {category}",
        column_styles={
            "Package": {"style": "cyan", "no_wrap": True},
            "Version": {"style": "green", "justify": "center"},
        },
    )
