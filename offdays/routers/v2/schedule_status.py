"""
v2 Schedule Status Router - role-aware classification.

For each role with an active block the roster is bucketed into ``off``,
``maybeOff`` and ``likelyNotOff``; the role results are merged into one
payload.
"""

import time
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse

from offdays.config import Settings
from offdays.dependencies import get_settings, get_store
from offdays.errors import ErrorKind, ScheduleError
from offdays.models import ErrorResponse, ScheduleStatusResponse
from offdays.pipeline import schedule_status
from offdays.table_store import TableStore

logger = logging.getLogger("offdays.api.v2")

router = APIRouter()


@router.get(
    "/schedule-status/{date}",
    response_model=ScheduleStatusResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    response_class=ORJSONResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def schedule_status_endpoint(
    date: str,
    request: Request,
    store: TableStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """
    Classify every intern and resident for a date.

    Path parameters:
    - date: ``YYYY-MM-DD``

    Returns:
    - 200: ``{"schedule-status": {...}}``
    - 400: Invalid or out-of-range date
    - 404: No block, or no Bayview schedule for a resident block
    - 500: Internal server error
    """
    start_time = time.perf_counter()
    try:
        output = await schedule_status(store, settings, date)
    except ScheduleError:
        raise
    except Exception as e:
        logger.error(
            "schedule_status requestId=%s error=%s",
            request.state.request_id, str(e), exc_info=True
        )
        raise ScheduleError(ErrorKind.UNEXPECTED, str(e))

    status = output["schedule-status"]
    elapsed_ms = int((time.perf_counter() - start_time) * 1000)
    logger.info(
        "schedule_status requestId=%s date=%s blocks=%s off=%s maybeOff=%s likelyNotOff=%s durMs=%s",
        request.state.request_id,
        status["fetchedDate"],
        ",".join(b["blockName"] or "?" for b in status["blocks"]),
        len(status["off"]),
        len(status["maybeOff"]),
        len(status["likelyNotOff"]),
        elapsed_ms,
    )
    return output
