"""
Roster lookup: who is assigned to what during a block.
"""

import logging
from typing import List, Optional

from offdays.config import Role, Settings
from offdays.models import StaffAssignment
from offdays.table_store import Eq, TableStore

logger = logging.getLogger("offdays.roster")


async def fetch_roster(store: TableStore, settings: Settings, block_name: Optional[str],
                       role: Optional[Role] = None) -> List[StaffAssignment]:
    """
    Read each staff member's assignment for ``block_name``.

    The schedules table has one column per block; staff without a value in
    that column are not on the roster for the block.
    """
    if not block_name:
        logger.warning("Block for role %s has no name, its staff cannot be listed",
                       role.value if role else "-")
        return []

    name_col, role_col = settings.schedule_key_name, settings.schedule_key_role
    rows = await store.scan(
        settings.table_schedules,
        where=Eq(role_col, settings.role_name(role)) if role is not None else None,
        projection=(name_col, role_col, block_name),
    )

    roster = []
    for row in rows:
        assignment = row.get(block_name)
        if not assignment or name_col not in row:
            logger.debug("No %s assignment for %r", block_name, row.get(name_col))
            continue
        roster.append(StaffAssignment(
            name=row[name_col],
            assignment=assignment,
            role=settings.role_name(role) if role is not None else None,
        ))
    return roster
