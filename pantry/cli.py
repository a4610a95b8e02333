"""CLI entry point for pantry."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections import defaultdict
from dataclasses import asdict
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

from .config import PantryConfig, load_config
from .db import Database, HistoryDB, InventoryDB, ShoppingListDB
from .extract import create_extractor
from .llm import create_generator
from .matcher import IngredientMatcher
from .merge import InventoryMergeEngine
from .models import (
    HistoryEvent,
    HistoryEventType,
    RawInput,
    SourceKind,
    SummaryTier,
    Unit,
)
from .parsing import StructuredItemParser
from .pipeline import BatchOrchestrator
from .storage import StorageAdvisor

DEFAULT_CONFIG_PATH = "~/.config/pantry/config.toml"


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="pantry",
        description="Household inventory: add groceries from receipts and shopping notes",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help="Path to the configuration file (TOML)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # ingest
    ingest_parser = sub.add_parser("ingest", help="Add items from receipts or notes")
    ingest_parser.add_argument("files", nargs="+", help="Text files (or images with --image)")
    ingest_parser.add_argument(
        "--image", action="store_true", help="Inputs are receipt images"
    )
    ingest_parser.add_argument(
        "--speech", action="store_true", help="Inputs are speech transcripts"
    )
    ingest_parser.add_argument("--locale", type=str, default=None, help="e.g. zh, en")
    ingest_parser.add_argument(
        "--date", type=date.fromisoformat, default=None, metavar="YYYY-MM-DD",
        help="Purchase date (default: today)",
    )
    ingest_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # inventory
    inv_parser = sub.add_parser("inventory", help="Show active inventory")
    inv_parser.add_argument("--groups", action="store_true", help="Totals per group")

    # history
    hist_parser = sub.add_parser("history", help="Show recent history events")
    hist_parser.add_argument("--days", type=int, default=7)

    # consume / expire
    consume_parser = sub.add_parser("consume", help="Use up part of a record")
    consume_parser.add_argument("record_id", type=int)
    consume_parser.add_argument("amount", type=int)
    sub.add_parser("expire", help="Mark records past their expiration date")

    # shopping
    shop_parser = sub.add_parser("shopping", help="Manage the shopping list")
    shop_sub = shop_parser.add_subparsers(dest="shopping_command")
    add_parser = shop_sub.add_parser("add", help="Add or update an item")
    add_parser.add_argument("name")
    add_parser.add_argument("min_quantity", type=int)
    add_parser.add_argument(
        "--unit", choices=[u.value for u in Unit], default=Unit.ITEM.value
    )
    remove_parser = shop_sub.add_parser("remove", help="Remove an item")
    remove_parser.add_argument("item_id", type=int)
    shop_sub.add_parser("list", help="Show the shopping list")
    shop_sub.add_parser("check", help="Show items below their minimum stock")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = load_config(args.config)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.logging.level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db = Database(config.database.path)
    try:
        match args.command:
            case "ingest":
                code = asyncio.run(_cmd_ingest(config, db, args))
                if code:
                    sys.exit(code)
            case "inventory":
                _cmd_inventory(db, args)
            case "history":
                _cmd_history(db, args)
            case "consume":
                _cmd_consume(db, args)
            case "expire":
                _cmd_expire(db)
            case "shopping":
                _cmd_shopping(config, db, args, shop_parser)
    finally:
        db.close()


def build_orchestrator(config: PantryConfig, db: Database) -> BatchOrchestrator:
    """Wire the pipeline components from configuration."""
    matcher = IngredientMatcher(config.matching.rules())
    advisor = StorageAdvisor(config.storage.category_locations())
    inventory = InventoryDB(db)
    merge_engine = InventoryMergeEngine(
        inventory, HistoryDB(db), matcher=matcher, advisor=advisor
    )
    return BatchOrchestrator(
        extractor=create_extractor(config),
        parser=StructuredItemParser(create_generator(config)),
        merge_engine=merge_engine,
        shopping=ShoppingListDB(db),
    )


async def _cmd_ingest(config: PantryConfig, db: Database, args) -> int:
    source = SourceKind.SPEECH if args.speech else SourceKind.SCAN
    inputs: list[RawInput] = []
    for name in args.files:
        path = Path(name)
        if args.image:
            inputs.append(
                RawInput(locale=args.locale, source=source, media_path=path, label=path.name)
            )
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Cannot read {path}: {e}", file=sys.stderr)
            continue
        inputs.append(RawInput(text=text, locale=args.locale, source=source, label=path.name))

    orchestrator = build_orchestrator(config, db)
    print(f"🧾 Processing {len(inputs)} input(s)...", file=sys.stderr)
    result = await orchestrator.run(inputs, purchase_date=args.date)
    summary = result.summary()

    if args.json:
        data = {
            "status": result.status.value,
            "summary": summary.message,
            "tier": summary.tier.value,
            "success_count": result.success_count,
            "failure_count": result.failure_count,
            "ai_count": result.ai_count,
            "heuristic_count": result.heuristic_count,
            "records": [
                {
                    "id": r.id,
                    "name": r.name,
                    "quantity": r.quantity,
                    "unit": r.unit.value,
                    "category": r.category.value,
                    "storage_location": r.storage_location.value,
                    "expiration_date": r.expiration_date.isoformat() if r.expiration_date else None,
                }
                for r in result.records
            ],
            "failed_items": result.failed_items,
            "restock": [
                {**asdict(a.item), "current_stock": a.current_stock} for a in result.restock
            ],
        }
        print(json.dumps(data, ensure_ascii=False, indent=2, default=str))
    else:
        for r in result.records:
            print(
                f"  + {r.name:<16} {r.quantity:>6} {r.unit.value:<10} "
                f"[{r.category.value}] → {r.storage_location.value}, "
                f"expires {r.expiration_date}"
            )
        print(summary.message)
        for alert in result.restock:
            print(
                f"🛒 {alert.item.name}: {alert.current_stock}/{alert.item.min_quantity} "
                f"{alert.item.unit.value}"
            )

    return 1 if summary.tier is SummaryTier.ALL_FAILED else 0


def _cmd_inventory(db: Database, args) -> None:
    inventory = InventoryDB(db)
    records = inventory.get_active_records()
    if not records:
        print("Inventory is empty.")
        return

    if args.groups:
        totals: dict[int, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        for r in records:
            totals[r.group_id][r.unit.value] += r.quantity
        for group in inventory.get_groups():
            if group.id not in totals:
                continue
            amounts = ", ".join(f"{q} {u}" for u, q in totals[group.id].items())
            print(f"  {group.display_name:<16} {amounts}  [{group.category.value}]")
        return

    print(f"Active records: {len(records)}")
    for r in records:
        print(
            f"  #{r.id:<4} {r.name:<16} {r.quantity:>6} {r.unit.value:<10} "
            f"{r.storage_location.value:<12} expires {r.expiration_date}"
        )


def _cmd_history(db: Database, args) -> None:
    events = HistoryDB(db).get_events(days=args.days)
    if not events:
        print(f"No events in the last {args.days} day(s).")
        return
    for e in events:
        print(
            f"  {e.timestamp:%Y-%m-%d %H:%M} {e.event_type.value:<11} "
            f"{e.item_name} {e.quantity} {e.unit.value}"
        )


def _cmd_consume(db: Database, args) -> None:
    inventory = InventoryDB(db)
    history = HistoryDB(db)
    try:
        with db.transaction():
            record = inventory.consume_record(args.record_id, args.amount)
            history.append(
                HistoryEvent(
                    item_name=record.name,
                    quantity=args.amount,
                    unit=record.unit,
                    category=record.category,
                    event_type=HistoryEventType.CONSUMPTION,
                )
            )
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    print(f"{record.name}: {record.quantity} {record.unit.value} left")


def _cmd_expire(db: Database) -> None:
    inventory = InventoryDB(db)
    history = HistoryDB(db)
    with db.transaction():
        expired = inventory.mark_expired()
        for r in expired:
            history.append(
                HistoryEvent(
                    item_name=r.name,
                    quantity=r.quantity,
                    unit=r.unit,
                    category=r.category,
                    event_type=HistoryEventType.EXPIRATION,
                    notes=f"expired {r.expiration_date}",
                )
            )
    print(f"Marked {len(expired)} record(s) as expired.")


def _cmd_shopping(config: PantryConfig, db: Database, args, shop_parser) -> None:
    shopping = ShoppingListDB(db)
    match args.shopping_command:
        case "add":
            item = shopping.add_item(args.name, args.min_quantity, unit=Unit(args.unit))
            print(f"#{item.id} {item.name}: keep at least {item.min_quantity} {item.unit.value}")
        case "remove":
            shopping.remove_item(args.item_id)
        case "list":
            items = shopping.get_items()
            if not items:
                print("Shopping list is empty.")
            for item in items:
                flag = "" if item.alert_enabled else " (alerts off)"
                print(f"  #{item.id:<4} {item.name:<16} min {item.min_quantity} {item.unit.value}{flag}")
        case "check":
            matcher = IngredientMatcher(config.matching.rules())
            alerts = shopping.below_threshold(InventoryDB(db), matcher)
            if not alerts:
                print("Everything is stocked.")
            for alert in alerts:
                print(
                    f"🛒 {alert.item.name}: {alert.current_stock}/{alert.item.min_quantity} "
                    f"{alert.item.unit.value}"
                )
        case _:
            shop_parser.print_help()
            sys.exit(1)
