"""
Holiday operations: normalization, year derivation, validation and the
create / update / delete / get / list / upcoming / bulk-import flows.

Normalization is an explicit step run before every write, never a hook on
the model, so it can be exercised without a database.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore

from erp_backend.models import BulkImportResult, Holiday, HolidayFields, HolidaySchema, HolidayTypeEnum
from erp_backend.services.holiday_store import HolidayStore
from erp_backend.utils.dates import month_range, parse_date, year_of
from erp_backend.utils.errors import (
    HolidayConflictError,
    HolidayNotFoundError,
    HolidayValidationError,
)
from erp_backend.utils.id_utils import to_int, to_int_id

logger = logging.getLogger(__name__)

HOLIDAY_FIELDS = ("name", "type", "date", "year", "notes")
REQUIRED_FIELDS = ("name", "type", "date")
TRIMMED_FIELDS = ("name", "notes")
UPCOMING_LIMIT = 100


def normalize(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Normalize the holiday fields present in ``payload``.

    Fields that are absent or null are left out of the result. ``name`` and
    ``notes`` are trimmed, ``date`` goes through the IST date rule (None when
    it cannot be read as a date). ``type`` and ``year`` are passed through for
    validation to judge.
    """
    fields = {}
    for key in HOLIDAY_FIELDS:
        value = payload.get(key)
        if value is None:
            continue
        if key in TRIMMED_FIELDS:
            value = str(value).strip()
        elif key == "date":
            value = parse_date(value)
        fields[key] = value
    return fields


def derive_year(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Fill a missing/falsy ``year`` from ``date``. A year that is already set is kept as-is."""
    holiday_date = fields.get("date")
    if not fields.get("year") and isinstance(holiday_date, datetime):
        return {**fields, "year": year_of(holiday_date)}
    return fields


def _describe(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        messages.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(messages)


def validate_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a complete set of normalized fields, raising HolidayValidationError."""
    try:
        return HolidayFields(**fields).model_dump()
    except ValidationError as e:
        raise HolidayValidationError(_describe(e)) from e


async def _load(store: HolidayStore, holiday_id: Any) -> Holiday:
    record_id = to_int_id(holiday_id)
    if record_id is None:
        raise HolidayNotFoundError()
    holiday = await store.get(record_id)
    if holiday is None:
        raise HolidayNotFoundError()
    return holiday


async def get_holiday(db: AsyncSession, holiday_id: Any) -> HolidaySchema:
    holiday = await _load(HolidayStore(db), holiday_id)
    return HolidaySchema.model_validate(holiday)


async def create_holiday(db: AsyncSession, payload: Optional[Mapping[str, Any]]) -> HolidaySchema:
    """
    Create a holiday from a raw request payload.

    Raises:
        HolidayValidationError: name/type/date missing, or a field fails validation
        HolidayConflictError: a holiday with the same (year, date, name) exists
    """
    payload = payload or {}
    if any(not payload.get(key) for key in REQUIRED_FIELDS):
        raise HolidayValidationError("name, type, and date are required")

    fields = validate_fields(derive_year(normalize(payload)))
    holiday = await HolidayStore(db).insert(fields)
    logger.debug("Created holiday %s", holiday.id)
    return HolidaySchema.model_validate(holiday)


async def update_holiday(db: AsyncSession, holiday_id: Any, payload: Optional[Mapping[str, Any]]) -> HolidaySchema:
    """
    Apply a partial update. Only fields present in ``payload`` are normalized and written;
    the rest of the record is validated as stored.
    """
    store = HolidayStore(db)
    holiday = await _load(store, holiday_id)

    changes = normalize(payload or {})
    if not changes:
        return HolidaySchema.model_validate(holiday)

    current = {key: getattr(holiday, key) for key in HOLIDAY_FIELDS}
    merged = validate_fields(derive_year({**current, **changes}))
    holiday = await store.update(holiday, {key: merged[key] for key in changes})
    return HolidaySchema.model_validate(holiday)


async def delete_holiday(db: AsyncSession, holiday_id: Any) -> None:
    store = HolidayStore(db)
    holiday = await _load(store, holiday_id)
    await store.delete(holiday)


async def list_holidays(
    db: AsyncSession,
    *,
    year: Any = None,
    month: Any = None,
    start: Any = None,
    end: Any = None,
    holiday_type: Any = None,
) -> List[HolidaySchema]:
    """
    List holidays by year, type and date scope.

    An explicit start/end range wins over year+month whenever either bound is
    given; bounds that cannot be parsed are dropped. Unparseable year or month
    values drop their filter too.
    """
    filters: Dict[str, Any] = {}

    year_value = to_int(year)
    if year_value is not None:
        filters["year"] = year_value

    if holiday_type:
        try:
            filters["holiday_type"] = HolidayTypeEnum(holiday_type)
        except ValueError:
            # No record can carry a type outside the enum
            return []

    if start or end:
        filters["start"] = parse_date(start) if start else None
        filters["end"] = parse_date(end) if end else None
    elif year_value is not None and month:
        month_value = to_int(month)
        if month_value is not None and 1 <= month_value <= 12:
            try:
                filters["start"], filters["end"] = month_range(year_value, month_value)
            except ValueError:
                logger.debug("Year %s out of calendar range; month filter dropped", year_value)

    holidays = await HolidayStore(db).find(**filters)
    return [HolidaySchema.model_validate(h) for h in holidays]


async def upcoming_holidays(db: AsyncSession, from_date: Any = None) -> List[HolidaySchema]:
    """At most UPCOMING_LIMIT holidays on or after ``from_date`` (default: now)."""
    pivot = (parse_date(from_date) if from_date else None) or datetime.now(timezone.utc)
    holidays = await HolidayStore(db).find(start=pivot, limit=UPCOMING_LIMIT)
    return [HolidaySchema.model_validate(h) for h in holidays]


async def bulk_import_holidays(db: AsyncSession, items: Iterable[Any]) -> BulkImportResult:
    """
    Create holidays one by one, skipping items that are invalid or duplicates.
    Each created holiday is committed on its own, so a skipped item never undoes the others.
    """
    result = BulkImportResult()
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            result.errors.append(f"{index}: expected a holiday object")
            continue
        try:
            await create_holiday(db, item)
        except (HolidayValidationError, HolidayConflictError) as e:
            result.errors.append(f"{index}: {e.detail}")
            continue
        result.count += 1
    return result
