"""
Shared fixtures: an in-memory table store and a small seeded schedule.

The seeded data mirrors one real day: 2023-04-10 is day 5 of block 9A for
residents and day 5 of block 9B for interns.
"""

import sys
import pathlib
sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

from datetime import date
from typing import Dict, List, Optional, Sequence

import pytest

from offdays.config import Settings
from offdays.table_store import Condition, project


class MemoryTableStore:
    """Dict-backed implementation of the ``TableStore`` protocol."""

    def __init__(self, tables: Optional[Dict[str, Dict[str, Dict[str, str]]]] = None):
        self.tables = tables or {}
        self.calls: List[tuple] = []

    def put(self, table: str, key: str, row: Dict[str, object]):
        self.tables.setdefault(table, {})[key] = {k: str(v) for k, v in row.items()}

    async def scan(self, table: str, where: Optional[Condition] = None,
                   projection: Optional[Sequence[str]] = None):
        self.calls.append(("scan", table))
        rows = self.tables.get(table, {}).values()
        return [project(r, projection) for r in rows if where is None or where.matches(r)]

    async def query(self, table: str, key: str):
        self.calls.append(("query", table))
        row = self.tables.get(table, {}).get(key)
        return [dict(row)] if row else []


@pytest.fixture
def settings():
    return Settings(
        min_date=date(2023, 1, 1),
        max_date=date(2023, 12, 31),
        default_pin="4321",
    )


@pytest.fixture
def store(settings):
    s = MemoryTableStore()

    s.put(settings.table_blocks, "Resident|9A", {
        "block": "9A", "role": "Resident",
        "start_date": "2023-04-06", "end_date": "2023-04-19",
    })
    s.put(settings.table_blocks, "Intern|9B", {
        "block": "9B", "role": "Intern",
        "start_date": "2023-04-06", "end_date": "2023-04-19",
    })

    s.put(settings.table_schedules, "Alice", {"name": "Alice", "role": "Resident", "9A": "CCU - A"})
    s.put(settings.table_schedules, "Bob", {"name": "Bob", "role": "Resident", "9A": "Janeway - B"})
    s.put(settings.table_schedules, "Carol", {"name": "Carol", "role": "Intern", "9B": "Brancati - C"})
    s.put(settings.table_schedules, "Dan", {"name": "Dan", "role": "Intern", "9B": "Bayview MICU"})

    s.put(settings.table_templates, "Resident|CCU|A|Any", {
        "service": "CCU", "position": "A", "role": "Resident", "block_type": "Any", "5": "OFF",
    })
    s.put(settings.table_templates, "Intern|Brancati|C|B", {
        "service": "Brancati", "position": "C", "role": "Intern", "block_type": "B", "5": "MAYBE",
    })
    s.put(settings.table_templates, "Intern|Brancati|D|A", {
        "service": "Brancati", "position": "D", "role": "Intern", "block_type": "A", "5": "OFF",
    })

    s.put(settings.table_templates_secondary, "2023-04-10", {"date": "2023-04-10", "1": "ON", "2": "ON"})

    s.put(settings.table_service_regex, "CCU", {"service": "CCU", "expression": "CCU - :position"})
    s.put(settings.table_service_regex, "Brancati", {"service": "Brancati", "expression": "Brancati - :position"})
    s.put(settings.table_service_regex, "Bayview ICU", {"service": "Bayview ICU", "expression": "Bayview \\w*ICU :position"})
    return s
