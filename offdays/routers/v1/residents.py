"""
v1 Residents Router.

Classifies the roster of the single block containing a date. Each category
is matched independently, so a resident can appear under both ``off`` and
``maybeOff``, and residents matching nothing are left out.
"""

import time
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse

from offdays.config import Settings
from offdays.dependencies import get_settings, get_store
from offdays.errors import ErrorKind, ScheduleError
from offdays.models import ErrorResponse, ResidentsResponse
from offdays.pipeline import residents_status
from offdays.table_store import TableStore

logger = logging.getLogger("offdays.api.v1")

router = APIRouter()


@router.get(
    "/residents/{date}",
    response_model=ResidentsResponse,
    response_model_exclude_none=True,
    response_class=ORJSONResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def residents_endpoint(
    date: str,
    request: Request,
    store: TableStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """
    Given a date within the supported range, return the residents that are
    off and those who are maybe off.

    Returns:
    - 200: metadata plus ``off`` / ``maybeOff`` lists
    - 400: Invalid or out-of-range date
    - 404: No block or Bayview schedule for the date
    - 500: Internal server error
    """
    start_time = time.perf_counter()
    try:
        output = await residents_status(store, settings, date)
    except ScheduleError:
        raise
    except Exception as e:
        logger.error(
            "residents requestId=%s error=%s",
            request.state.request_id, str(e), exc_info=True
        )
        raise ScheduleError(ErrorKind.UNEXPECTED, str(e))

    elapsed_ms = int((time.perf_counter() - start_time) * 1000)
    logger.info(
        "residents requestId=%s date=%s block=%s off=%s maybeOff=%s durMs=%s",
        request.state.request_id,
        date,
        output["metadata"]["blockName"],
        len(output.get("off", [])),
        len(output.get("maybeOff", [])),
        elapsed_ms,
    )
    return output
