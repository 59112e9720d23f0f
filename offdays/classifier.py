"""
Assignment classification.

Two behaviours are offered:

- ``classify_exhaustive``: every staff member lands in exactly one bucket.
  Rules are tried in order and the LAST matching category wins; no match
  means NOT_SURE.
- ``classify_matches``: each category scans the whole roster on its own, so
  a staff member can show up in several buckets (or none).
"""

from typing import Dict, Iterable, List

from offdays.config import Category
from offdays.models import StaffAssignment
from offdays.rules import Rules

Classification = Dict[Category, List[StaffAssignment]]


def sort_by_name(entries: Iterable[StaffAssignment]) -> List[StaffAssignment]:
    """Ascending ordinal sort on name; stable for equal names."""
    return sorted(entries, key=lambda entry: entry.name)


def classify_exhaustive(rules: Rules, roster: Iterable[StaffAssignment]) -> Classification:
    result: Classification = {
        Category.OFF: [],
        Category.MAYBE_OFF: [],
        Category.NOT_SURE: [],
    }
    for entry in roster:
        bucket = Category.NOT_SURE
        for category, matcher in rules:
            if matcher.matches(entry.assignment):
                bucket = category
        result[bucket].append(entry)
    return {category: sort_by_name(entries) for category, entries in result.items()}


def classify_matches(rules: Rules, roster: Iterable[StaffAssignment]) -> Classification:
    roster = list(roster)
    result: Classification = {}
    for category, matcher in rules:
        result[category] = sort_by_name(
            entry for entry in roster if matcher.matches(entry.assignment)
        )
    return result
