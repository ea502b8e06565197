"""
Typed errors raised by the time-tracking and timesheet engines.

The engines never format user-facing responses; they raise one of the
errors below and ``setup_exception_handlers`` turns it into JSON.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TimesheetError(Exception):
    """Base class for every error the core raises."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(TimesheetError):
    """Referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class Forbidden(TimesheetError):
    """Caller does not own, or is not assigned to, the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class Conflict(TimesheetError):
    """Request is incompatible with the current state of the data."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class InvalidState(Conflict):
    """Operation needs the record in a different lifecycle status."""

    code = "INVALID_STATE"


class StorageFailure(TimesheetError):
    """The persistence layer failed; details are logged, not returned."""

    code = "STORAGE_FAILURE"


async def timesheet_error_handler(request: Request, exc: TimesheetError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.code, exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code}
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TimesheetError, timesheet_error_handler)
