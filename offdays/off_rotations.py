"""
Off-rotation fetching.

Collects the services whose template marks the current day-number as OFF or
MAYBE OFF, and merges the Bayview (secondary site) schedule, which is keyed by
calendar date and only knows OFF.
"""

import asyncio
import logging
from datetime import date
from typing import Dict, Optional

from offdays.config import Role, Settings
from offdays.errors import ScheduleError
from offdays.models import BlockInfo, OffRotations
from offdays.table_store import AnyOf, Eq, In, TableStore

logger = logging.getLogger("offdays.rotations")

SECONDARY_DATE_COLUMN = "date"


async def gather_or_cancel(*aws):
    """
    Await store calls concurrently, like ``asyncio.gather``.

    When one of them fails the others are cancelled before the error
    propagates, so a failed request leaves no store call running.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


async def fetch_primary_rotations(store: TableStore, settings: Settings, day_number: int,
                                  is_type_a: bool, role: Optional[Role] = None) -> OffRotations:
    """
    Get rotations scheduled for an off day, except for Bayview rotations.

    With a role, rows marked MAYBE are collected too and each row is sorted
    by the sentinel found in its day-number column. Without a role only OFF
    rows are considered.
    """
    day_column = str(day_number)
    block_types = (settings.block_type_any, settings.block_type(is_type_a))

    if role is None:
        scheduled = Eq(day_column, settings.scheduled_off)
    else:
        scheduled = AnyOf((Eq(day_column, settings.scheduled_off),
                           Eq(day_column, settings.scheduled_maybe_off)))
    where = scheduled & In("block_type", block_types)
    if role is not None:
        where = where & Eq("role", settings.role_name(role))

    rows = await store.scan(
        settings.table_templates,
        where=where,
        projection=("service", "position", day_column),
    )

    rotations = OffRotations()
    for row in rows:
        bucket = rotations.off if row.get(day_column) == settings.scheduled_off else rotations.maybe_off
        # Keys are service names (The O, Brancati, CCU); values are positions (A, B, Any)
        bucket[row["service"]] = row.get("position", "")
    return rotations


async def fetch_secondary_site_rotations(store: TableStore, settings: Settings,
                                         day: date) -> Dict[str, str]:
    """
    Get Bayview rotations scheduled for an off day.

    The row for a date has the date column plus one column per position. Every
    position column holding the OFF sentinel maps the synthetic Bayview service
    to that position; BCCU and BMICU share one schedule, so if several
    positions are off only the last one survives.
    """
    rows = await store.query(settings.table_templates_secondary, day.isoformat())
    if not rows:
        raise ScheduleError.not_found("Could not find any Bayview schedules for given date")

    off: Dict[str, str] = {}
    for column, value in rows[0].items():
        if column == SECONDARY_DATE_COLUMN:
            continue
        if value == settings.scheduled_off:
            off[settings.secondary_site_service] = column
    return off


def uses_secondary_site(settings: Settings, role: Optional[Role]) -> bool:
    return role is None or role in settings.secondary_site_roles


async def fetch_off_rotations(store: TableStore, settings: Settings, day: date,
                              block_info: BlockInfo, role: Optional[Role] = None) -> OffRotations:
    """
    Fetch primary and Bayview off rotations concurrently and merge them.

    Bayview facts always land in OFF and overwrite a same-named primary
    service. A missing Bayview row fails the whole request.
    """
    primary = fetch_primary_rotations(
        store, settings, block_info.day_number, block_info.is_type_a, role
    )
    if not uses_secondary_site(settings, role):
        return await primary

    rotations, secondary_off = await gather_or_cancel(
        primary, fetch_secondary_site_rotations(store, settings, day)
    )
    rotations.off.update(secondary_off)
    logger.debug("role=%s off=%s maybeOff=%s",
                 role.value if role else "-", rotations.off, rotations.maybe_off)
    return rotations
