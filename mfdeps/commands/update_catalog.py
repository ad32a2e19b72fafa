"""Update-catalog command implementation for mfdeps.

Rewrites catalog files with the latest versions published on the npm
registry. A ``<category>.json.backup`` copy is made before a file is
rewritten; unchanged categories are left alone.

Typical usage::

    # Refresh one category
    $ mfdeps update-catalog core

    # Refresh every category
    $ mfdeps update-catalog
"""

from __future__ import annotations

import sys
import asyncio
from typing import List, Optional

import click

from mfdeps.exceptions import MfDepsError
from mfdeps.core.refresher import CatalogRefresher
from mfdeps.core.registry import build_lookup
from mfdeps.context import pass_context, MfDepsContext
from mfdeps.commands.check_updates import display_report
from mfdeps.utils import (
    HTTPClient,
    get_logger,
    print_info,
    print_error,
    print_success,
    print_warning,
)

logger = get_logger("commands.update_catalog")


@click.command("update-catalog")
@click.argument("category", required=False)
@pass_context
def update_catalog(ctx: MfDepsContext, category: Optional[str]) -> None:
    """Rewrite catalogs with the latest npm versions.

    Refreshes CATEGORY, or every known category when omitted. A missing
    category is an error.

    Exits:
        0 if every category was refreshed or already current,
        1 if an error occurred.
    """
    categories = [category] if category else ctx.known_categories()

    try:
        asyncio.run(_update_catalog_async(ctx, categories))
    except MfDepsError as e:
        print_error(f"{e}")
        sys.exit(1)


async def _update_catalog_async(ctx: MfDepsContext, categories: List[str]) -> None:
    settings = ctx.settings

    if not categories:
        print_warning(f"No categories found in {settings.catalog_path}")
        return

    written = 0

    async with HTTPClient(max_concurrency=settings.concurrency) as http:
        lookup = build_lookup(
            settings.lookup,
            http_client=http,
            registry_url=settings.registry_url,
        )
        refresher = CatalogRefresher(
            ctx.catalog_store(),
            lookup,
            concurrency=settings.concurrency,
        )

        for category in categories:
            print_info(f"\nUpdating catalog {category}...")
            report = await refresher.refresh_category(category)
            display_report(report)

            if report.written:
                written += 1
                print_success(f"{category}.json updated")
                print_info(f"Backup saved to {report.backup_path}")
            else:
                print_info(f"No updates needed for {category}")

    if written:
        print_warning(
            "\nReview the updated catalogs before running mfdeps update "
            "in your projects"
        )
