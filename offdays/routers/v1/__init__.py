"""
Off-days API v1 Router.

Endpoints:
- GET /residents/{date} - Who is off / maybe off, single block, no default bucket
"""

from fastapi import APIRouter

router = APIRouter(tags=["v1"])

from .residents import router as residents_router
router.include_router(residents_router)
