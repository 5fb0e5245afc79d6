"""
Persistence adapter for holidays.

The (year, date, name) uniqueness is enforced by the table's unique constraint,
so a duplicate insert or update fails atomically at flush time and surfaces as
HolidayConflictError. No read-then-write check is done here.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select  # type: ignore
from sqlalchemy.exc import IntegrityError, SQLAlchemyError  # type: ignore
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore

from erp_backend.models import Holiday, HolidayTypeEnum
from erp_backend.utils.errors import HolidayConflictError, HolidayStoreError

logger = logging.getLogger(__name__)


class HolidayStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _save(self, holiday: Holiday) -> Holiday:
        try:
            await self.db.flush()
            await self.db.commit()
            await self.db.refresh(holiday)
        except IntegrityError as e:
            await self.db.rollback()
            logger.info("Holiday uniqueness conflict: %s", e.orig)
            raise HolidayConflictError() from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to save holiday")
            raise HolidayStoreError() from e
        return holiday

    async def get(self, holiday_id: int) -> Optional[Holiday]:
        try:
            result = await self.db.execute(select(Holiday).where(Holiday.id == holiday_id))
        except SQLAlchemyError as e:
            logger.exception("Failed to load holiday %s", holiday_id)
            raise HolidayStoreError() from e
        return result.scalar_one_or_none()

    async def insert(self, fields: Dict[str, Any]) -> Holiday:
        holiday = Holiday(**fields)
        self.db.add(holiday)
        return await self._save(holiday)

    async def update(self, holiday: Holiday, changes: Dict[str, Any]) -> Holiday:
        for key, value in changes.items():
            setattr(holiday, key, value)
        return await self._save(holiday)

    async def delete(self, holiday: Holiday) -> None:
        try:
            await self.db.delete(holiday)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to delete holiday %s", holiday.id)
            raise HolidayStoreError() from e

    async def find(
        self,
        *,
        year: Optional[int] = None,
        holiday_type: Optional[HolidayTypeEnum] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Holiday]:
        """Holidays matching every given filter, ordered by date then name. Bounds are inclusive."""
        query = select(Holiday)
        if year is not None:
            query = query.where(Holiday.year == year)
        if holiday_type is not None:
            query = query.where(Holiday.type == holiday_type)
        if start is not None:
            query = query.where(Holiday.date >= start)
        if end is not None:
            query = query.where(Holiday.date <= end)
        query = query.order_by(Holiday.date, Holiday.name)
        if limit is not None:
            query = query.limit(limit)

        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.exception("Failed to query holidays")
            raise HolidayStoreError() from e
        return list(result.scalars().all())
