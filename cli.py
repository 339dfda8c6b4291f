import click
import logging
from tabulate import tabulate
import traceback

from config.settings import get_settings
from core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    InventoryFetchError,
    PageSourceError,
)
from core.inventory.api_client import InventoryAPIClient
from core.reconcile.drain import drain_listings
from core.reconcile.runner import run_stock_sync
from core.reconcile.variants import JoinVariantFactory
from core.scrapers.websites.treasurebox_scraper import TreasureBoxScraper

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("stock-sync-cli")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, verbose):
    """Storefront stock sync tool."""
    # Store verbose flag in the Click context instead of a global variable
    ctx.ensure_object(dict)
    ctx.obj["VERBOSE"] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")


def make_scraper(headless=None):
    """Create the storefront page source from settings."""
    settings = get_settings()
    return TreasureBoxScraper(
        settings.LISTING_URL,
        headless=settings.HEADLESS if headless is None else headless,
        navigation_timeout_ms=settings.NAVIGATION_TIMEOUT_MS,
    )


def report_error(ctx, e):
    """Echo an error the way every command does, with a traceback in verbose mode."""
    if isinstance(e, ConfigurationError):
        click.echo(f"Configuration error: {str(e)}")
    elif isinstance(e, AuthenticationError):
        click.echo(f"Authentication failed: {str(e)}")
    elif isinstance(e, InventoryFetchError):
        click.echo(f"Failed to fetch products: {str(e)}")
    elif isinstance(e, PageSourceError):
        click.echo(f"Browser error: {str(e)}")
    else:
        click.echo(f"Unexpected error: {str(e)}")

    if ctx.obj["VERBOSE"]:
        click.echo(traceback.format_exc())


@cli.command()
@click.option(
    "--join-key",
    "-k",
    type=click.Choice(JoinVariantFactory.names()),
    default="character",
    help="Attribute used to match storefront products to inventory (default: character)",
)
@click.option("--dry-run", is_flag=True, help="Scrape and match but do not write updates")
@click.option(
    "--headless/--no-headless", default=None, help="Run the browser without a window"
)
@click.option("--max-pages", type=int, help="Stop the listing walk after N pages")
@click.option(
    "--settle-delay", type=int, help="Milliseconds to wait after each page turn"
)
@click.option(
    "--format-type",
    "-f",
    type=click.Choice(["text", "table", "csv"]),
    default="table",
    help="Output format (default: table)",
)
@click.option("--output", "-o", type=click.Path(), help="Save the report to file")
@click.pass_context
def sync(ctx, join_key, dry_run, headless, max_pages, settle_delay, format_type, output):
    """Scrape storefront stock and push it to the inventory API.

    Signs in and fetches the full inventory first; either failing ends the
    run before the browser is launched.
    """
    settings = get_settings()

    try:
        variant = JoinVariantFactory.create_variant(join_key, settings.DETAIL_URL_TEMPLATE)
        api_client = InventoryAPIClient(settings.API_BASE_URL, timeout=settings.REQUEST_TIMEOUT)
        report = run_stock_sync(
            api_client,
            settings.EMAIL,
            settings.PASSWORD,
            lambda: make_scraper(headless),
            variant,
            settle_delay_ms=settings.PAGE_SETTLE_DELAY_MS if settle_delay is None else settle_delay,
            max_pages=settings.MAX_LISTING_PAGES if max_pages is None else max_pages,
            dry_run=dry_run,
        )
    except Exception as e:  # pylint: disable=broad-exception-caught
        report_error(ctx, e)
        return

    click.echo(
        f"\nMatched {report.matched} products "
        f"({report.updated} updated, {report.failed} failed, "
        f"{len(report.unmatched)} without inventory match)."
    )

    result_output = format_report(report.outcomes, format_type)

    # Output to file or console
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(result_output)
        click.echo(f"Report written to {output}")
    else:
        click.echo("\n" + result_output)


@cli.command()
@click.option(
    "--headless/--no-headless", default=None, help="Run the browser without a window"
)
@click.option("--max-pages", type=int, help="Stop the listing walk after N pages")
@click.pass_context
def listings(ctx, headless, max_pages):
    """Walk the storefront listing and print every product found."""
    settings = get_settings()

    try:
        with make_scraper(headless) as source:
            found = drain_listings(
                source,
                settings.PAGE_SETTLE_DELAY_MS,
                settings.MAX_LISTING_PAGES if max_pages is None else max_pages,
            )
    except Exception as e:  # pylint: disable=broad-exception-caught
        report_error(ctx, e)
        return

    click.echo(f"Found {len(found)} products.")
    if found:
        table_data = [[i, listing.join_key, listing.link] for i, listing in enumerate(found, 1)]
        click.echo(tabulate(table_data, headers=["#", "Character", "Link"], tablefmt="grid"))


@cli.command()
@click.argument("url")
@click.option(
    "--headless/--no-headless", default=None, help="Run the browser without a window"
)
@click.pass_context
def stock(ctx, url, headless):
    """Print the stock shown on a single product detail page."""
    try:
        with make_scraper(headless) as source:
            quantity = source.read_stock(url)
    except Exception as e:  # pylint: disable=broad-exception-caught
        report_error(ctx, e)
        return

    click.echo(f"Stock: {quantity}")


def format_report(outcomes, format_type):
    """Format update outcomes based on specified format type."""
    if not outcomes:
        return "No matching products found."

    if format_type == "text":
        lines = [f"Processed {len(outcomes)} products:"]
        for i, outcome in enumerate(outcomes, 1):
            lines.append(f"\n{i}. {outcome.join_key} (product {outcome.record_id})")
            lines.append(f"   Stock: {outcome.previous_stock} -> {outcome.observed_stock}")
            lines.append(f"   Status: {outcome.status}")
            if outcome.error:
                lines.append(f"   Error: {outcome.error}")
            lines.append(f"   URL: {outcome.link}")

        return "\n".join(lines)

    elif format_type == "csv":
        import csv
        from io import StringIO

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(
            ["Product ID", "Key", "Previous Stock", "Stock", "Status", "Error", "URL"]
        )

        for outcome in outcomes:
            writer.writerow(
                [
                    outcome.record_id,
                    outcome.join_key,
                    outcome.previous_stock,
                    outcome.observed_stock,
                    outcome.status,
                    outcome.error or "",
                    outcome.link,
                ]
            )

        return output.getvalue()

    else:  # table format
        table_data = []
        for outcome in outcomes:
            # Truncate key if too long
            join_key = outcome.join_key
            if len(join_key) > 40:
                join_key = join_key[:37] + "..."

            table_data.append(
                [
                    outcome.record_id,
                    join_key,
                    outcome.previous_stock,
                    outcome.observed_stock,
                    outcome.status,
                ]
            )

        headers = ["Product ID", "Key", "Previous", "Stock", "Status"]
        return tabulate(table_data, headers=headers, tablefmt="grid")


if __name__ == "__main__":
    # This runs the Click application
    cli.main(obj={})
