# price_comparator/cli/runner.py

"""Headless CLI commands over the pricing engine."""

import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from price_comparator.config.settings import Settings
from price_comparator.models.basket import StoreBasket
from price_comparator.models.discount import Discount
from price_comparator.models.price_history import (
    PriceHistoryFilter,
    ProductTimeline,
)
from price_comparator.models.product import Unit
from price_comparator.models.recommendation import Recommendation
from price_comparator.services.price_comparator import PriceComparator
from price_comparator.storage.csv_importer import CsvImporter
from price_comparator.storage.price_db import PriceDB

logger = logging.getLogger("price_comparator.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _jsonable(value: Any) -> Any:
    """Convert engine records into JSON-serialisable structures."""
    if is_dataclass(value) and not isinstance(value, type):
        return _jsonable(asdict(value))
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _dump_json(payload: Any) -> None:
    """Write a JSON document to stdout."""
    json.dump(_jsonable(payload), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _open_comparator(db_path: Path | None) -> tuple[PriceDB, PriceComparator]:
    """Load the database into a comparator."""
    db = PriceDB(db_path)
    return db, PriceComparator(db.load())


# ── Import ───────────────────────────────────────────────


def run_import(data_dir: str | None, db_path: Path | None = None) -> int:
    """Import CSV price and discount lists into the database."""
    directory = Path(data_dir) if data_dir else Settings.DATA_DIR
    _err.print(f"[bold]Importing CSV files from[/bold] {directory}")

    report = CsvImporter().import_directory(directory)
    for error in report.errors:
        _err.print(f"[yellow]Skipped {error}[/yellow]")

    db = PriceDB(db_path)
    try:
        count = db.save_report(report)
    finally:
        db.close()

    _err.print(
        f"[green]✓ Imported {count:,} rows from "
        f"{report.files_read} files[/green]"
    )
    return 0 if report.ok else 1


# ── Basket ───────────────────────────────────────────────


def _print_baskets(baskets: list[StoreBasket]) -> None:
    """Render one Rich table per store basket."""
    console = Console()
    for basket in baskets:
        table = Table(
            title=f"{basket.store_name} (total {basket.total})",
            show_lines=True,
            title_style="bold cyan",
        )
        table.add_column("Product", style="bold")
        table.add_column("Price", justify="right")
        table.add_column("Discount", justify="right", style="magenta")
        table.add_column("Final", justify="right", style="green")
        for item in basket.items:
            table.add_row(
                f"{item.product_name} [dim]({item.product_id})[/dim]",
                str(item.original_price),
                f"{item.discount_percentage}%",
                str(item.discounted_price),
            )
        console.print(table)


def run_basket(
    product_ids: list[str],
    on: date | None,
    output_format: str,
    db_path: Path | None = None,
) -> int:
    """Print the optimal store split for a list of products."""
    db, comparator = _open_comparator(db_path)
    try:
        baskets = comparator.optimize_basket(product_ids, on)
    finally:
        db.close()

    if not baskets:
        _err.print("[yellow]None of the products has a price yet.[/yellow]")
        return 1
    if output_format == "table":
        _print_baskets(baskets)
    else:
        _dump_json(baskets)
    return 0


# ── History ──────────────────────────────────────────────


def _print_history(timelines: list[ProductTimeline]) -> None:
    """Render one Rich table per product and store."""
    console = Console()
    for timeline in timelines:
        for store in timeline.stores:
            table = Table(
                title=f"{timeline.product_name} @ {store.store_name}",
                show_lines=False,
                title_style="bold cyan",
            )
            table.add_column("From")
            table.add_column("To")
            table.add_column("Price", justify="right")
            table.add_column("Discount", justify="right", style="magenta")
            table.add_column("Final", justify="right", style="green")
            for seg in store.segments:
                table.add_row(
                    seg.start_date.isoformat(),
                    seg.end_date.isoformat(),
                    str(seg.original_price),
                    f"{seg.discount_percentage}%",
                    str(seg.final_price),
                )
            console.print(table)


def run_history(
    history_filter: PriceHistoryFilter,
    output_format: str,
    db_path: Path | None = None,
) -> int:
    """Print per-store price timelines for a product."""
    db, comparator = _open_comparator(db_path)
    try:
        timelines = comparator.get_price_history(history_filter)
    finally:
        db.close()

    if timelines is None:
        _err.print("[yellow]No price history found.[/yellow]")
        return 1
    if output_format == "table":
        _print_history(timelines)
    else:
        _dump_json(timelines)
    return 0


# ── Alternatives ─────────────────────────────────────────


def _print_recommendations(recommendations: list[Recommendation]) -> None:
    """Render cheaper alternatives as a Rich table."""
    table = Table(
        title="Cheaper Alternatives",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Product", max_width=40)
    table.add_column("Brand")
    table.add_column("Store", style="magenta")
    table.add_column("Price", justify="right")
    table.add_column("Per unit", justify="right", style="green")
    table.add_column("Savings", justify="right")
    for idx, r in enumerate(recommendations, 1):
        table.add_row(
            str(idx),
            r.product_name,
            r.brand,
            r.store_name,
            str(r.price),
            f"{r.price_per_unit}/{r.unit.abbreviation}",
            f"{r.savings_percentage}%",
        )
    Console().print(table)


def run_alternatives(
    product_id: str,
    on: date | None,
    unit: str | None,
    output_format: str,
    db_path: Path | None = None,
) -> int:
    """Print products cheaper per unit than ``product_id``."""
    target_unit = Unit.from_abbreviation(unit) if unit else None
    db, comparator = _open_comparator(db_path)
    try:
        recommendations = comparator.get_cheaper_alternatives(
            product_id, on, target_unit,
        )
    finally:
        db.close()

    if not recommendations:
        _err.print("[yellow]No cheaper alternatives found.[/yellow]")
    if output_format == "table":
        _print_recommendations(recommendations)
    else:
        _dump_json(recommendations)
    return 0


# ── Discounts ────────────────────────────────────────────


def _print_discounts(discounts: list[Discount], title: str) -> None:
    """Render discounts as a Rich table."""
    table = Table(title=title, show_lines=False, title_style="bold cyan")
    table.add_column("Product", style="bold")
    table.add_column("Store", justify="right")
    table.add_column("Discount", justify="right", style="magenta")
    table.add_column("From")
    table.add_column("To")
    for d in discounts:
        table.add_row(
            d.product_id,
            str(d.store_id),
            f"{d.percentage}%",
            d.from_date.isoformat(),
            d.to_date.isoformat(),
        )
    Console().print(table)


def run_discounts(
    mode: str,
    on: date | None,
    output_format: str,
    db_path: Path | None = None,
) -> int:
    """Print active, best or newly started discounts."""
    db, comparator = _open_comparator(db_path)
    try:
        if mode == "best":
            discounts = comparator.get_best_discounts(on)
            title = "Best Discounts"
        elif mode == "new":
            discounts = comparator.get_new_discounts(on)
            title = "New Discounts"
        else:
            discounts = comparator.get_active_discounts(on)
            title = "Active Discounts"
    finally:
        db.close()

    if output_format == "table":
        _print_discounts(discounts, title)
    else:
        _dump_json(discounts)
    return 0
