"""
Models package for the college ERP holiday service

SQLAlchemy ORM models and their Pydantic request/response models live in the same file.
"""

# Enums
from .enums import HolidayTypeEnum

# SQLAlchemy Models
from .holiday import Holiday

# Pydantic Models
from .holiday import (
    HolidayFields,
    HolidaySchema,
    BulkImportResult,
)

__all__ = [
    # Enums
    "HolidayTypeEnum",
    # SQLAlchemy Models
    "Holiday",
    # Pydantic Models
    "HolidayFields",
    "HolidaySchema",
    "BulkImportResult",
]
