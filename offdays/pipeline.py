"""
Per-request orchestration of the classification engine.

    date -> block(s) -> (roster || off rotations) -> rules -> buckets -> payload
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from offdays.block_resolver import resolve_block, resolve_blocks_by_role
from offdays.classifier import Classification, classify_exhaustive, classify_matches
from offdays.config import Role, Settings
from offdays.input_validator import validate_date
from offdays.models import BlockInfo
from offdays.off_rotations import fetch_off_rotations, gather_or_cancel
from offdays.output_builder import (
    build_residents_output,
    build_schedule_status,
    merge_classifications,
)
from offdays.roster import fetch_roster
from offdays.rules import RuleCompiler, build_rules
from offdays.table_store import TableStore

logger = logging.getLogger("offdays.pipeline")


async def classify_role(store: TableStore, settings: Settings, day: date, role: Role,
                        block_info: BlockInfo,
                        compiler: Optional[RuleCompiler] = None) -> Classification:
    """Run fetch -> rules -> classify for one role."""
    roster, rotations = await gather_or_cancel(
        fetch_roster(store, settings, block_info.block_name, role),
        fetch_off_rotations(store, settings, day, block_info, role),
    )
    rules = await build_rules(store, settings, rotations, compiler, exhaustive=True)
    logger.info(
        "role=%s block=%s day=%s roster=%s rules=%s",
        role.value, block_info.block_name, block_info.day_number,
        len(roster), [c.value for c, _ in rules],
    )
    return classify_exhaustive(rules, roster)


async def schedule_status(store: TableStore, settings: Settings, raw_date: str,
                          compiler: Optional[RuleCompiler] = None) -> Dict[str, Any]:
    """
    Role-aware status for a date.

    Roles run one after the other and their buckets are merged at the end.
    """
    day = validate_date(raw_date, settings)
    blocks = await resolve_blocks_by_role(store, day, settings)

    results = []
    for role, block_info in blocks.items():
        results.append(await classify_role(store, settings, day, role, block_info, compiler))

    return build_schedule_status(settings, day, blocks, merge_classifications(results))


async def residents_status(store: TableStore, settings: Settings, raw_date: str,
                           compiler: Optional[RuleCompiler] = None) -> Dict[str, Any]:
    """Role-unaware status for a date, using the non-exhaustive classifier."""
    day = validate_date(raw_date, settings)
    block_info = await resolve_block(store, day, settings)

    roster, rotations = await gather_or_cancel(
        fetch_roster(store, settings, block_info.block_name),
        fetch_off_rotations(store, settings, day, block_info),
    )
    rules = await build_rules(store, settings, rotations, compiler, exhaustive=False)
    return build_residents_output(settings, day, block_info, classify_matches(rules, roster))
