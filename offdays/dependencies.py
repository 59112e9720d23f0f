"""
FastAPI dependencies shared by the routers.

The app owns one ``Settings`` and one store, created at startup and kept on
``app.state``; tests swap them by assigning new values.
"""

from fastapi import Request

from offdays.config import Settings
from offdays.table_store import TableStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> TableStore:
    return request.app.state.store
