"""
Query-string helpers shared by the endpoints.
"""

from datetime import date
from typing import Optional
from fastapi import HTTPException, status

from timesheets.fastapi.schemas.timesheet import parse_iso_date


def parse_date_query(value: Optional[str], field: str) -> Optional[date]:
    """
    Turn an optional ``YYYY-MM-DD`` query value into a date.

    Raises:
        HTTPException: 422 if the value is not a real calendar date
    """
    if value is None:
        return None
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[{"loc": ["query", field], "msg": str(e), "type": "value_error"}]
        )
