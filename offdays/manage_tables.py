#!/usr/bin/env python3
"""
Table Management CLI Tool

Load, inspect and clear the schedule tables kept in Redis.

Usage:
    python -m offdays.manage_tables stats               # Row count per table
    python -m offdays.manage_tables load tables.json    # Load tables from JSON
    python -m offdays.manage_tables export              # Dump tables as JSON
    python -m offdays.manage_tables clear [table]       # Clear one or all tables

The JSON file maps table names to lists of rows:

    {
      "blocks": [{"block": "9A", "role": "Resident",
                  "start_date": "2023-04-06", "end_date": "2023-04-19"}],
      "schedules": [{"name": "Alice", "role": "Resident", "9A": "CCU - A"}],
      "templates": [{"service": "CCU", "position": "A", "role": "Resident",
                     "block_type": "Any", "5": "OFF"}],
      "bayview_templates": [{"date": "2023-04-10", "1": "OFF", "2": "ON"}],
      "service_regex": [{"service": "CCU", "expression": "CCU - :position"}]
    }

Examples:
    # Replace the blocks table before a new academic year
    python -m offdays.manage_tables clear blocks --force
    python -m offdays.manage_tables load blocks_2024.json
"""

import sys
import json
import asyncio
import argparse
from typing import Any, Callable, Dict, List

from offdays.config import Settings
from offdays.redis_manager import RedisConnectionManager
from offdays.table_store import RedisTableStore


def row_key_builders(settings: Settings) -> Dict[str, Callable[[Dict[str, Any]], str]]:
    """How each table names its rows"""
    return {
        settings.table_blocks: lambda r: f"{r.get('role', '')}|{r['block']}",
        settings.table_schedules: lambda r: r[settings.schedule_key_name],
        settings.table_templates: lambda r: r.get("id") or "|".join(
            str(r.get(col, "")) for col in ("role", "service", "position", "block_type")
        ),
        settings.table_templates_secondary: lambda r: r["date"],
        settings.table_service_regex: lambda r: r["service"],
    }


async def cmd_stats(store: RedisTableStore, settings: Settings):
    """Display row count per table."""
    print(f"\n{'='*60}")
    print(f"TABLES (prefix: {settings.key_prefix})")
    print(f"{'='*60}")
    for table in row_key_builders(settings):
        print(f"  {table:<24} {await store.count(table):>6} rows")
    print(f"{'='*60}\n")


async def cmd_load(store: RedisTableStore, settings: Settings, json_file: str, replace: bool):
    """Load tables from a JSON file."""
    with open(json_file, 'r') as f:
        data: Dict[str, List[Dict[str, Any]]] = json.load(f)

    builders = row_key_builders(settings)
    unknown = sorted(set(data) - set(builders))
    if unknown:
        print(f"❌ Unknown table(s): {', '.join(unknown)}")
        sys.exit(1)

    for table, rows in data.items():
        if replace:
            await store.clear(table)
        count = await store.put_rows(table, rows, builders[table])
        print(f"✅ {table}: {count} row(s) loaded")


async def cmd_export(store: RedisTableStore, settings: Settings):
    """Export all tables as JSON to stdout."""
    data = {table: await store.scan(table) for table in row_key_builders(settings)}
    print(json.dumps(data, indent=2))


async def cmd_clear(store: RedisTableStore, settings: Settings, table: str, force: bool):
    """Clear one table, or every table when none is given."""
    tables = [table] if table else list(row_key_builders(settings))

    if not force:
        print(f"⚠️  This will delete all rows in: {', '.join(tables)}")
        response = input("Are you sure? (yes/no): ").strip().lower()
        if response not in ['yes', 'y']:
            print("❌ Cancelled")
            return

    for name in tables:
        removed = await store.clear(name)
        print(f"✅ Cleared {removed} row(s) from {name}")


async def run(args: argparse.Namespace):
    settings = Settings.from_env()
    store = RedisTableStore(key_prefix=settings.key_prefix)
    try:
        if args.command == 'stats':
            await cmd_stats(store, settings)
        elif args.command == 'load':
            await cmd_load(store, settings, args.file, args.replace)
        elif args.command == 'export':
            await cmd_export(store, settings)
        elif args.command == 'clear':
            await cmd_clear(store, settings, args.table, args.force)
    finally:
        await RedisConnectionManager().close()


def main():
    parser = argparse.ArgumentParser(
        description='Manage off-days schedule tables in Redis',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    subparsers.add_parser('stats', help='Show row count per table')

    load_parser = subparsers.add_parser('load', help='Load tables from JSON file')
    load_parser.add_argument('file', help='JSON file to load')
    load_parser.add_argument('--replace', action='store_true',
                             help='Clear each table before loading it')

    subparsers.add_parser('export', help='Export tables as JSON')

    clear_parser = subparsers.add_parser('clear', help='Clear tables')
    clear_parser.add_argument('table', nargs='?', default=None, help='Table to clear (default: all)')
    clear_parser.add_argument('--force', '-f', action='store_true', help='Skip confirmation')

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    asyncio.run(run(args))


if __name__ == '__main__':
    main()
