import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore

from erp_backend.db import get_db
from erp_backend.models import BulkImportResult, HolidaySchema
from erp_backend.services import holidays as holiday_service
from erp_backend.utils.action_log import log_holiday_action
from erp_backend.utils.errors import HolidayError, HolidayStoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/holidays", tags=["Holidays"])


@contextmanager
def holiday_errors(failure: str):
    """Map holiday errors to HTTP responses; anything unexpected is logged and becomes a 500."""
    try:
        yield
    except HolidayStoreError as e:
        raise HTTPException(status_code=500, detail=failure) from e
    except HolidayError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e
    except Exception as e:
        logger.exception("%s", failure)
        raise HTTPException(status_code=500, detail=failure) from e


@router.get("", response_model=List[HolidaySchema])
async def list_holidays(
    year: Optional[str] = Query(None),
    month: Optional[str] = Query(None),
    start: Optional[str] = Query(None),
    end: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """
    List holidays sorted by date then name.
    `start`/`end` (inclusive) take priority over `year` + `month`.
    """
    with holiday_errors("Failed to fetch holidays"):
        return await holiday_service.list_holidays(
            db, year=year, month=month, start=start, end=end, holiday_type=type
        )


@router.get("/upcoming", response_model=List[HolidaySchema])
async def upcoming_holidays(
    from_: Optional[str] = Query(None, alias="from"),
    db: AsyncSession = Depends(get_db),
):
    """Next holidays on or after `from` (YYYY-MM-DD, default now), capped at 100."""
    with holiday_errors("Failed to fetch upcoming holidays"):
        return await holiday_service.upcoming_holidays(db, from_)


@router.post("/bulk", response_model=BulkImportResult)
async def bulk_import_holidays(
    request: Request,
    items: List[Any] = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """
    Bulk import holidays. Skips invalid items and duplicates of (year, date, name).
    """
    with holiday_errors("Failed to import holidays"):
        result = await holiday_service.bulk_import_holidays(db, items)
    log_holiday_action("HOLIDAYS_IMPORTED", request, count=result.count, skipped=len(result.errors))
    return result


@router.get("/{holiday_id}", response_model=HolidaySchema)
async def get_holiday(holiday_id: str, db: AsyncSession = Depends(get_db)):
    with holiday_errors("Failed to fetch holiday"):
        return await holiday_service.get_holiday(db, holiday_id)


@router.post("", response_model=HolidaySchema, status_code=201)
async def create_holiday(
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    with holiday_errors("Failed to create holiday"):
        holiday = await holiday_service.create_holiday(db, payload)
    log_holiday_action("HOLIDAY_CREATED", request, holiday_id=holiday.id, name=holiday.name, year=holiday.year)
    return holiday


@router.put("/{holiday_id}", response_model=HolidaySchema)
async def update_holiday(
    holiday_id: str,
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    with holiday_errors("Failed to update holiday"):
        holiday = await holiday_service.update_holiday(db, holiday_id, payload)
    log_holiday_action("HOLIDAY_UPDATED", request, holiday_id=holiday.id, fields=sorted((payload or {}).keys()))
    return holiday


@router.delete("/{holiday_id}")
async def delete_holiday(holiday_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    with holiday_errors("Failed to delete holiday"):
        await holiday_service.delete_holiday(db, holiday_id)
    log_holiday_action("HOLIDAY_DELETED", request, holiday_id=holiday_id)
    return {"ok": True}
