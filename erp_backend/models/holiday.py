"""
Holiday SQLAlchemy model
"""
from sqlalchemy import Column, Integer, String, Enum as SQLEnum, Index, UniqueConstraint  # type: ignore
from sqlalchemy.dialects import mysql  # type: ignore
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from erp_backend.db import Base, UTCDateTime, utcnow
from erp_backend.models.enums import HolidayTypeEnum

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 120
NOTES_MAX_LENGTH = 300
YEAR_MIN = 1900
YEAR_MAX = 3000


class Holiday(Base):
    """Holidays table"""
    __tablename__ = "holidays"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Binary collation on MySQL keeps the unique key and ordering case-sensitive
    name = Column(
        String(NAME_MAX_LENGTH).with_variant(mysql.VARCHAR(NAME_MAX_LENGTH, collation="utf8mb4_bin"), "mysql"),
        nullable=False,
    )
    type = Column(
        SQLEnum(HolidayTypeEnum, name="holiday_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    date = Column(UTCDateTime, nullable=False, comment="Midnight IST of the holiday, stored as UTC")
    year = Column(Integer, nullable=False)
    notes = Column(String(NOTES_MAX_LENGTH), nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("year", "date", "name", name="uq_holiday_year_date_name"),
        Index("idx_holiday_date", "date"),
        Index("idx_holiday_year", "year"),
    )

    def __repr__(self):
        return f"<Holiday id={self.id} name={self.name!r} date={self.date}>"


# Pydantic Models (for API request/response)

class HolidayFields(BaseModel):
    """Normalized holiday fields, validated before they reach the store"""
    name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    type: HolidayTypeEnum
    date: datetime
    year: int = Field(..., ge=YEAR_MIN, le=YEAR_MAX)
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH)


class HolidaySchema(BaseModel):
    """Model for holiday response"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    type: HolidayTypeEnum
    date: datetime
    year: int
    notes: Optional[str] = None
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: datetime = Field(..., serialization_alias="updatedAt")


class BulkImportResult(BaseModel):
    success: bool = True
    count: int = 0
    errors: list[str] = Field(default_factory=list)
