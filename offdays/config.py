"""
Settings and domain enums for the off-days service.

All tunables are read once from the environment by ``Settings.from_env()``
and the resulting object is handed to each component explicitly.
"""

import os
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """
    Staff roles with their own blocks and templates.

    Values are the default identifiers; the ones actually stored in the
    tables come from ``Settings.role_intern`` / ``Settings.role_resident``.
    """
    INTERN = "Intern"
    RESIDENT = "Resident"


class Category(str, Enum):
    """Classification buckets; values are the keys used in responses."""
    OFF = "off"
    MAYBE_OFF = "maybeOff"
    NOT_SURE = "likelyNotOff"


# Rule evaluation order. The exhaustive classifier lets the LAST matching
# category win, so MAYBE_OFF overrides OFF for the same staff member.
CATEGORY_ORDER: Tuple[Category, ...] = (Category.OFF, Category.MAYBE_OFF)


def _parse_bound(value: str) -> date:
    """Accept both plain dates and ISO timestamps (e.g. 2023-07-26T00:00:00Z)."""
    value = value.strip()
    if len(value) > 10:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return date.fromisoformat(value)


class Settings(BaseModel):
    """
    Typed configuration shared by every request.

    ``date_format`` is a ``strftime`` pattern (e.g. ``%Y-%m-%d``), not a
    ``YYYY-MM-DD`` style token string.
    """

    model_config = ConfigDict(frozen=True)

    # Store tables
    key_prefix: str = "offdays"
    table_blocks: str = "blocks"
    table_schedules: str = "schedules"
    table_templates: str = "templates"
    table_templates_secondary: str = "bayview_templates"
    table_service_regex: str = "service_regex"

    # Display and bounds
    date_format: str = "%Y-%m-%d"
    min_date: date = Field(date(2023, 7, 26), description="Exclusive lower bound")
    max_date: date = Field(date(2023, 12, 11), description="Inclusive upper bound")

    # Sentinels stored in the template tables
    scheduled_off: str = "OFF"
    scheduled_maybe_off: str = "MAYBE"
    block_type_any: str = "Any"
    block_type_a: str = "A"
    block_type_b: str = "B"

    # Rule templates
    position_placeholder: str = ":position"
    maybe_off_service: str = "Maybe Off"

    # Role identifiers as stored in the blocks, schedules and templates tables
    role_intern: str = Role.INTERN.value
    role_resident: str = Role.RESIDENT.value

    # Secondary site
    secondary_site_service: str = "Bayview ICU"
    secondary_site_roles: Tuple[Role, ...] = (Role.RESIDENT,)

    # Column names
    schedule_key_name: str = "name"
    schedule_key_role: str = "role"

    default_pin: str = ""

    @property
    def first_valid_date(self) -> date:
        return self.min_date + timedelta(days=1)

    def format_date(self, value: date) -> str:
        return value.strftime(self.date_format)

    def block_type(self, is_type_a: bool) -> str:
        return self.block_type_a if is_type_a else self.block_type_b

    @property
    def role_names(self) -> Dict[Role, str]:
        return {Role.INTERN: self.role_intern, Role.RESIDENT: self.role_resident}

    def role_name(self, role: Role) -> str:
        """Identifier stored in the tables for ``role``"""
        return self.role_names[role]

    def role_for(self, name: Optional[str]) -> Optional[Role]:
        """Role stored as ``name``, or None when it is not a configured role"""
        for role, stored in self.role_names.items():
            if stored == name:
                return role
        return None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        defaults = cls()

        date_format = os.getenv("FORMAT_DATE", defaults.date_format)
        if "%" not in date_format:
            raise ValueError(
                f"FORMAT_DATE must be a strftime pattern such as %Y-%m-%d, got {date_format!r}"
            )

        role_intern = os.getenv("ROLE_INTERN", defaults.role_intern)
        role_resident = os.getenv("ROLE_RESIDENT", defaults.role_resident)
        by_name = {role_intern: Role.INTERN, role_resident: Role.RESIDENT}

        roles = os.getenv("SECONDARY_SITE_ROLES")
        if roles is None:
            secondary_roles = defaults.secondary_site_roles
        else:
            names = [r.strip() for r in roles.split(",") if r.strip()]
            unknown = [n for n in names if n not in by_name]
            if unknown:
                raise ValueError(f"SECONDARY_SITE_ROLES has unknown role(s): {', '.join(unknown)}")
            secondary_roles = tuple(by_name[n] for n in names)

        return cls(
            key_prefix=os.getenv("REDIS_KEY_PREFIX", defaults.key_prefix),
            table_blocks=os.getenv("TABLE_BLOCKS", defaults.table_blocks),
            table_schedules=os.getenv("TABLE_SCHEDULES", defaults.table_schedules),
            table_templates=os.getenv("TABLE_TEMPLATES", defaults.table_templates),
            table_templates_secondary=os.getenv("TABLE_TEMPLATES_BV", defaults.table_templates_secondary),
            table_service_regex=os.getenv("TABLE_SERVICE_REGEX", defaults.table_service_regex),
            date_format=date_format,
            min_date=_parse_bound(os.getenv("BOUND_MIN_DATE", defaults.min_date.isoformat())),
            max_date=_parse_bound(os.getenv("BOUND_MAX_DATE", defaults.max_date.isoformat())),
            scheduled_off=os.getenv("SCHEDULED_OFF", defaults.scheduled_off),
            scheduled_maybe_off=os.getenv("SCHEDULED_MAYBE_OFF", defaults.scheduled_maybe_off),
            block_type_any=os.getenv("BLOCK_TYPE_ANY", defaults.block_type_any),
            position_placeholder=os.getenv("EXP_PLACEHOLDER_POSITION", defaults.position_placeholder),
            maybe_off_service=os.getenv("MAYBE_OFF_SERVICES", defaults.maybe_off_service),
            secondary_site_service=os.getenv("SERVICE_BAYVIEW_ICU", defaults.secondary_site_service),
            role_intern=role_intern,
            role_resident=role_resident,
            secondary_site_roles=secondary_roles,
            schedule_key_name=os.getenv("SCHEDULE_KEY_NAME", defaults.schedule_key_name),
            schedule_key_role=os.getenv("SCHEDULE_KEY_ROLE", defaults.schedule_key_role),
            default_pin=os.getenv("DEFAULT_PIN", defaults.default_pin),
        )
