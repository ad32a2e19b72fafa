"""Check-updates command implementation for mfdeps.

Compares every catalog entry with the latest version published on the npm
registry and reports what is outdated. Nothing is written; use
``update-catalog`` to rewrite the catalog files.

Typical usage::

    # Check every category
    $ mfdeps check-updates

    # Check a few categories only
    $ mfdeps check-updates core testing
"""

from __future__ import annotations

import sys
import asyncio
from typing import List, Tuple

import click

from mfdeps.models import RefreshReport
from mfdeps.core.refresher import CatalogRefresher
from mfdeps.core.registry import build_lookup
from mfdeps.context import pass_context, MfDepsContext
from mfdeps.exceptions import CategoryNotFoundError, MfDepsError
from mfdeps.utils import (
    HTTPClient,
    colorize_update_type,
    get_logger,
    get_update_type,
    print_error,
    print_info,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.check_updates")


@click.command("check-updates")
@click.argument("categories", nargs=-1)
@pass_context
def check_updates(ctx: MfDepsContext, categories: Tuple[str, ...]) -> None:
    """Check catalog packages for newer versions on npm.

    CATEGORIES defaults to every known category. Missing categories are
    skipped with a warning.

    Exits:
        0 when the check completed, even if updates are available,
        1 if an error occurred.
    """
    try:
        asyncio.run(_check_async(ctx, list(categories) or ctx.known_categories()))
    except MfDepsError as e:
        print_error(f"{e}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Async orchestration
# ---------------------------------------------------------------------------


async def _check_async(ctx: MfDepsContext, categories: List[str]) -> None:
    settings = ctx.settings

    if not categories:
        print_warning(f"No categories found in {settings.catalog_path}")
        return

    total_updates = 0

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
            print_info(f"\nChecking updates for {category}...")
            try:
                report = await refresher.check_category(category)
            except CategoryNotFoundError:
                print_warning(f"File {category}.json not found, skipping...")
                continue

            display_report(report)
            total_updates += len(report.updated)

    if total_updates:
        print_info(f"\nFound {total_updates} update(s) in total")
        print_info(
            "To update specific categories, run: mfdeps update-catalog <category>"
        )
    else:
        print_success("\nAll catalogs are up to date")


def display_report(report: RefreshReport) -> None:
    """Print the outdated and failed entries of one category."""
    if report.updated:
        rows = [
            {
                "Package": entry.name,
                "Catalog": entry.current,
                "Latest": entry.latest,
                "Change": colorize_update_type(
                    get_update_type(entry.current, entry.latest)
                ),
            }
            for entry in report.updated
        ]
        print_table(
            rows,
            headers=["Package", "Catalog", "Latest", "Change"],
            title=f"Updates for {report.category}",
            column_styles={
                "Package": {"style": "cyan", "no_wrap": True},
                "Catalog": {"style": "yellow", "justify": "center"},
                "Latest": {"style": "green", "justify": "center"},
                "Change": {"justify": "center"},
            },
        )

    for entry in report.failed:
        print_error(f"Error checking {entry.name}: {entry.error}")

    if report.updated:
        print_info(f"Found {len(report.updated)} update(s) for {report.category}")
    elif not report.failed:
        print_success(f"All packages in {report.category} are up to date")
