"""
Domain value types and pydantic models for the off-days API.

Dataclasses describe request-scoped engine values; pydantic models define
request/response schemas for validation and documentation.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from offdays.config import Category


# ============================================================================
# ENGINE VALUES
# ============================================================================

@dataclass(frozen=True)
class Block:
    """A rotation period row from the blocks table."""
    block_name: Optional[str]
    start_date: date
    end_date: date
    role: Optional[str] = None


@dataclass(frozen=True)
class BlockInfo:
    """Where a date falls within its block."""
    block_name: Optional[str]
    is_type_a: bool
    day_number: int


@dataclass
class OffRotations:
    """Service -> position maps for the OFF and MAYBE_OFF statuses."""
    off: Dict[str, str] = field(default_factory=dict)
    maybe_off: Dict[str, str] = field(default_factory=dict)

    def by_category(self) -> Dict[Category, Dict[str, str]]:
        return {Category.OFF: self.off, Category.MAYBE_OFF: self.maybe_off}

    def services(self) -> List[str]:
        return list(dict.fromkeys([*self.off, *self.maybe_off]))


@dataclass(frozen=True)
class StaffAssignment:
    """One roster entry for the current block (e.g. "CCU - A")."""
    name: str
    assignment: str
    role: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        data = {"name": self.name, "assignment": self.assignment}
        if self.role is not None:
            data["role"] = self.role
        return data


# ============================================================================
# API SCHEMAS
# ============================================================================

class StaffEntry(BaseModel):
    """Staff member as rendered in a classification bucket."""
    name: str
    role: Optional[str] = None
    assignment: str


class BlockSummary(BaseModel):
    """Per-role block metadata."""
    role: Optional[str] = None
    blockName: Optional[str] = None
    dayNumber: int
    isTypeA: bool


class ScheduleStatus(BaseModel):
    """Body of the ``schedule-status`` object returned by GET /schedule-status/{date}."""
    fetchedDate: str = Field(..., description="Requested date in display format")
    minDate: str = Field(..., description="First supported date (inclusive)")
    maxDate: str = Field(..., description="Last supported date (inclusive)")
    blocks: List[BlockSummary] = Field(default_factory=list)
    off: List[StaffEntry] = Field(default_factory=list)
    maybeOff: List[StaffEntry] = Field(default_factory=list)
    likelyNotOff: List[StaffEntry] = Field(default_factory=list)


class ScheduleStatusResponse(BaseModel):
    """Response payload from GET /schedule-status/{date}."""
    model_config = ConfigDict(populate_by_name=True)

    schedule_status: ScheduleStatus = Field(..., alias="schedule-status")


class ResidentsMetadata(BaseModel):
    blockName: Optional[str] = None
    dayNumber: int
    date: str
    minDate: str
    maxDate: str


class ResidentsResponse(BaseModel):
    """Response payload from GET /residents/{date}."""
    metadata: ResidentsMetadata
    off: Optional[List[StaffEntry]] = None
    maybeOff: Optional[List[StaffEntry]] = None

    model_config = ConfigDict(extra='allow')


class PinRequest(BaseModel):
    """Request payload for POST /validate."""
    pin: str = ""


class PinResponse(BaseModel):
    isValid: bool


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    """Response from GET /health endpoint."""
    status: str = Field("ok")
    redis: bool = Field(False, description="Whether the store answered a ping")
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())
