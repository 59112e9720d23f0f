"""
Off-days API Routers Package.

This package contains versioned API routers:
- v1: Original API (GET /residents/{date}, one block, non-exhaustive buckets)
- v2: Role-aware API (GET /schedule-status/{date}, every staff member bucketed)
"""

from .v1 import router as v1_router
from .v2 import router as v2_router

__all__ = ['v1_router', 'v2_router']
