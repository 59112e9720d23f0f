"""
Off-days API v2 Router.

v2 Features:
- Blocks resolved per role (Intern, Resident)
- Per-service MAYBE OFF templates in addition to OFF
- Bayview schedule merged for residents only
- Every staff member reported in exactly one bucket (off, maybeOff, likelyNotOff)

Endpoints:
- GET /schedule-status/{date} - Role-aware status for a date
"""

from fastapi import APIRouter

router = APIRouter(tags=["v2"])

from .schedule_status import router as schedule_status_router
router.include_router(schedule_status_router)
