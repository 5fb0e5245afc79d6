"""
Tests for the holiday persistence adapter
Tests for: database failures mapped to store errors, rollback on failed writes, column DDL
"""
import pytest
from sqlalchemy.dialects import mysql, sqlite
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.schema import CreateTable

from erp_backend.models import Holiday, HolidayTypeEnum
from erp_backend.services.holiday_store import HolidayStore
from erp_backend.utils.dates import parse_date
from erp_backend.utils.errors import HolidayConflictError, HolidayError, HolidayStoreError


def holi_fields(**overrides):
    fields = {
        "name": "Holi",
        "type": HolidayTypeEnum.GAZETTED,
        "date": parse_date("2025-03-14"),
        "year": 2025,
        "notes": None,
    }
    fields.update(overrides)
    return fields


async def connection_lost(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("connection lost"))


@pytest.fixture
def rollbacks(db_session, monkeypatch):
    """Record every rollback issued on the session"""
    calls = []
    original = db_session.rollback

    async def recording_rollback():
        calls.append(True)
        await original()

    monkeypatch.setattr(db_session, "rollback", recording_rollback)
    return calls


class TestHolidayStore:

    async def test_insert_and_get(self, db_session):
        store = HolidayStore(db_session)

        holiday = await store.insert(holi_fields())

        assert holiday.id is not None
        assert (await store.get(holiday.id)).name == "Holi"

    async def test_failed_flush_rolls_back(self, db_session, rollbacks, monkeypatch):
        monkeypatch.setattr(db_session, "flush", connection_lost)

        with pytest.raises(HolidayStoreError):
            await HolidayStore(db_session).insert(holi_fields())
        assert rollbacks

    async def test_failed_update_rolls_back(self, db_session, rollbacks, monkeypatch):
        store = HolidayStore(db_session)
        holiday = await store.insert(holi_fields())
        monkeypatch.setattr(db_session, "commit", connection_lost)

        with pytest.raises(HolidayStoreError):
            await store.update(holiday, {"notes": "Festival of colours"})
        assert rollbacks

    async def test_duplicate_is_conflict(self, db_session, rollbacks):
        store = HolidayStore(db_session)
        await store.insert(holi_fields())

        with pytest.raises(HolidayConflictError):
            await store.insert(holi_fields())
        assert rollbacks

    async def test_integrity_error_is_conflict(self, db_session, rollbacks, monkeypatch):
        async def duplicate_key(*args, **kwargs):
            raise IntegrityError("INSERT", {}, Exception("Duplicate entry"))

        monkeypatch.setattr(db_session, "flush", duplicate_key)

        with pytest.raises(HolidayConflictError):
            await HolidayStore(db_session).insert(holi_fields())
        assert rollbacks

    async def test_failed_delete_rolls_back(self, db_session, rollbacks, monkeypatch):
        store = HolidayStore(db_session)
        holiday = await store.insert(holi_fields())
        monkeypatch.setattr(db_session, "commit", connection_lost)

        with pytest.raises(HolidayStoreError):
            await store.delete(holiday)
        assert rollbacks

    async def test_failed_find(self, db_session, monkeypatch):
        monkeypatch.setattr(db_session, "execute", connection_lost)

        with pytest.raises(HolidayStoreError):
            await HolidayStore(db_session).find(year=2025)

    async def test_failed_get(self, db_session, monkeypatch):
        monkeypatch.setattr(db_session, "execute", connection_lost)

        with pytest.raises(HolidayStoreError):
            await HolidayStore(db_session).get(1)


class TestHolidayErrors:

    def test_default_detail(self):
        assert HolidayStoreError().detail == "Holiday store unavailable"
        assert str(HolidayError()) == "Holiday operation failed"

    def test_explicit_detail(self):
        error = HolidayConflictError("taken")

        assert error.detail == "taken"
        assert error.status_code == 409


class TestHolidayTableDDL:

    def test_mysql_keeps_microseconds_and_case(self):
        ddl = str(CreateTable(Holiday.__table__).compile(dialect=mysql.dialect()))

        assert ddl.count("DATETIME(6)") == 3
        assert "COLLATE utf8mb4_bin" in ddl

    def test_sqlite_uses_plain_types(self):
        ddl = str(CreateTable(Holiday.__table__).compile(dialect=sqlite.dialect()))

        assert "DATETIME(6)" not in ddl
        assert "utf8mb4_bin" not in ddl
        assert "VARCHAR(120)" in ddl
