"""
Shared output builder used by both API versions.

Merges per-role classifications and shapes the JSON payloads. No business
rules live here.
"""

from datetime import date
from typing import Any, Dict, Iterable, Mapping

from offdays.classifier import Classification, sort_by_name
from offdays.config import Category, Role, Settings
from offdays.models import BlockInfo


def merge_classifications(results: Iterable[Classification]) -> Classification:
    """Concatenate each category across roles, then sort each category once."""
    merged: Dict[Category, list] = {}
    for result in results:
        for category, entries in result.items():
            merged.setdefault(category, []).extend(entries)
    return {category: sort_by_name(entries) for category, entries in merged.items()}


def _bounds(settings: Settings) -> Dict[str, str]:
    return {
        "minDate": settings.format_date(settings.first_valid_date),
        "maxDate": settings.format_date(settings.max_date),
    }


def build_schedule_status(settings: Settings, day: date,
                          blocks: Mapping[Role, BlockInfo],
                          classification: Classification) -> Dict[str, Any]:
    """
    Build the role-aware payload.

    Every category key is present, even when its bucket is empty.
    """
    status: Dict[str, Any] = {
        "fetchedDate": settings.format_date(day),
        **_bounds(settings),
        "blocks": [
            {
                "role": settings.role_name(role),
                "blockName": info.block_name,
                "dayNumber": info.day_number,
                "isTypeA": info.is_type_a,
            }
            for role, info in blocks.items()
        ],
    }
    for category in Category:
        status[category.value] = [e.to_dict() for e in classification.get(category, [])]
    return {"schedule-status": status}


def build_residents_output(settings: Settings, day: date, block_info: BlockInfo,
                           classification: Classification) -> Dict[str, Any]:
    """Build the role-unaware payload; only classified categories appear."""
    output: Dict[str, Any] = {
        "metadata": {
            "blockName": block_info.block_name,
            "dayNumber": block_info.day_number,
            "date": settings.format_date(day),
            **_bounds(settings),
        }
    }
    for category, entries in classification.items():
        output[category.value] = [e.to_dict() for e in entries]
    return output
