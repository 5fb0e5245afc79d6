"""
Holiday error taxonomy. Every store or validation failure is mapped to exactly one of these.
"""
from typing import Optional


class HolidayError(Exception):
    """Base class; carries the HTTP status the route layer answers with."""
    status_code = 500
    default_detail = "Holiday operation failed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class HolidayValidationError(HolidayError):
    status_code = 400
    default_detail = "Invalid holiday data"


class HolidayNotFoundError(HolidayError):
    status_code = 404
    default_detail = "Holiday not found"


class HolidayConflictError(HolidayError):
    status_code = 409
    default_detail = "Duplicate holiday for this date/year/name"


class HolidayStoreError(HolidayError):
    status_code = 500
    default_detail = "Holiday store unavailable"
