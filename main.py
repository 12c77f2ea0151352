# main.py

"""Entry point for the price_comparator command line."""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from rich.console import Console

from price_comparator.config.logging_config import setup_logging
from price_comparator.errors import PriceComparatorError
from price_comparator.models.price_history import PriceHistoryFilter

logger = logging.getLogger("price_comparator.main")


def _iso_date(raw: str) -> date:
    """argparse type for ISO dates."""
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        msg = f"not an ISO date (YYYY-MM-DD): {raw}"
        raise argparse.ArgumentTypeError(msg) from exc


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="price_comparator",
        description="Grocery price comparison across stores and dates.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--db",
        default=None,
        dest="db_path",
        help="SQLite database path (default: data/prices.db).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show INFO log messages on the terminal.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import CSV price lists.")
    imp.add_argument(
        "data_dir",
        nargs="?",
        default=None,
        help="Directory of <store>_<date>.csv files (default: data/).",
    )

    basket = sub.add_parser("basket", help="Split a basket across stores.")
    basket.add_argument("product_ids", nargs="+", help="Product IDs.")
    basket.add_argument("-d", "--date", type=_iso_date, default=None)

    history = sub.add_parser("history", help="Price timeline of a product.")
    history.add_argument("product_name", help="Product name.")
    history.add_argument("--store", default=None)
    history.add_argument("--category", default=None)
    history.add_argument("--brand", default=None)
    history.add_argument("--start", type=_iso_date, default=None)
    history.add_argument("--end", type=_iso_date, default=None)

    alt = sub.add_parser("alternatives", help="Cheaper per-unit products.")
    alt.add_argument("product_id", help="Product ID.")
    alt.add_argument("-d", "--date", type=_iso_date, default=None)
    alt.add_argument(
        "-u", "--unit", default=None, help="Target unit (g, kg, ml, l, ...).",
    )

    disc = sub.add_parser("discounts", help="List discounts.")
    mode = disc.add_mutually_exclusive_group()
    mode.add_argument(
        "--best",
        action="store_const",
        const="best",
        dest="mode",
        help="Highest active discount per product.",
    )
    mode.add_argument(
        "--new",
        action="store_const",
        const="new",
        dest="mode",
        help="Discounts that started recently.",
    )
    disc.add_argument("-d", "--date", type=_iso_date, default=None)
    return parser


def _dispatch(args: argparse.Namespace) -> int:
    """Run the selected sub-command and return its exit code."""
    from price_comparator.cli import runner

    db_path = Path(args.db_path) if args.db_path else None

    if args.command == "import":
        return runner.run_import(args.data_dir, db_path)
    if args.command == "basket":
        return runner.run_basket(
            args.product_ids, args.date, args.output_format, db_path,
        )
    if args.command == "history":
        return runner.run_history(
            PriceHistoryFilter(
                product_name=args.product_name,
                store_name=args.store,
                category=args.category,
                brand=args.brand,
                start_date=args.start,
                end_date=args.end,
            ),
            args.output_format,
            db_path,
        )
    if args.command == "alternatives":
        return runner.run_alternatives(
            args.product_id, args.date, args.unit, args.output_format, db_path,
        )
    return runner.run_discounts(
        args.mode or "active", args.date, args.output_format, db_path,
    )


def main() -> None:
    """Parse arguments, run one command and exit with its status."""
    args = _build_parser().parse_args()
    log_file = setup_logging(verbose=args.verbose)
    logger.info("price_comparator %s starting, log file: %s", args.command, log_file)
    try:
        exit_code = _dispatch(args)
    except PriceComparatorError as exc:
        logger.error("%s failed: %s", args.command, exc, exc_info=True)
        Console(stderr=True).print(f"[red]Error: {exc}[/red]")
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
