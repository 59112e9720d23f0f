"""
Block resolution: which rotation block a date falls in, and which day of it.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from offdays.config import Role, Settings
from offdays.errors import ScheduleError
from offdays.models import Block, BlockInfo
from offdays.table_store import Spans, TableStore

logger = logging.getLogger("offdays.blocks")

NO_BLOCK_MESSAGE = "Could not find a schedule block for that date"


def build_block_info(day: date, block_name: Optional[str], start_date: date) -> BlockInfo:
    """Day 1 is the block's start date."""
    return BlockInfo(
        block_name=block_name,
        is_type_a=bool(block_name) and "A" in block_name,
        day_number=(day - start_date).days + 1,
    )


def _row_to_block(row: Dict[str, str]) -> Block:
    return Block(
        block_name=row.get("block") or None,
        start_date=date.fromisoformat(row["start_date"]),
        end_date=date.fromisoformat(row["end_date"]),
        role=row.get("role") or None,
    )


async def find_blocks(store: TableStore, day: date, settings: Settings) -> List[Block]:
    """All blocks whose [start_date, end_date] contains the day (inclusive)."""
    rows = await store.scan(
        settings.table_blocks,
        where=Spans("start_date", "end_date", day.isoformat()),
    )
    blocks = [_row_to_block(row) for row in rows]
    if not blocks:
        raise ScheduleError.not_found(NO_BLOCK_MESSAGE)
    return blocks


async def resolve_block(store: TableStore, day: date, settings: Settings) -> BlockInfo:
    """Role-unaware resolution: the first block containing the day."""
    block = (await find_blocks(store, day, settings))[0]
    return build_block_info(day, block.block_name, block.start_date)


async def resolve_blocks_by_role(store: TableStore, day: date,
                                 settings: Settings) -> Dict[Role, BlockInfo]:
    """
    Role-aware resolution.

    Each role has at most one active block; rows without a role, or with a
    role that is not configured, are ignored here because they cannot be
    routed to a roster.
    """
    infos: Dict[Role, BlockInfo] = {}
    for block in await find_blocks(store, day, settings):
        if block.role is None:
            logger.warning("Block %s has no role, skipping", block.block_name)
            continue
        role = settings.role_for(block.role)
        if role is None:
            logger.warning("Block %s has unknown role %r, skipping", block.block_name, block.role)
            continue
        if role in infos:
            logger.warning("Multiple %s blocks contain %s, keeping %s",
                           block.role, day, infos[role].block_name)
            continue
        infos[role] = build_block_info(day, block.block_name, block.start_date)
    if not infos:
        raise ScheduleError.not_found(NO_BLOCK_MESSAGE)
    # Stable role order for the merged response
    return {role: infos[role] for role in Role if role in infos}
