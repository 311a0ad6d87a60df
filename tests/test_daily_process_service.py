# tests/test_daily_process_service.py
from datetime import date, datetime, timezone

from app.models.daily_process import DailyProcess
from app.services.daily_process_service import DailyProcessService

from tests.factories import make_daily_process


def test_get_or_create_is_idempotent(db):
    service = DailyProcessService(db)

    first = service.get_or_create_current()
    second = service.get_or_create_current()

    assert first.id == second.id
    assert db.query(DailyProcess).count() == 1


def test_current_batch_is_none_before_creation(db):
    assert DailyProcessService(db).current_batch() is None


def test_operating_date_uses_hospital_timezone(db):
    service = DailyProcessService(db)
    # 03:00 UTC sigue siendo el día anterior en America/Bogota (UTC-5)
    late_night = datetime(2025, 3, 10, 3, 0, tzinfo=timezone.utc)

    assert service.operating_date(late_night) == date(2025, 3, 9)


def test_current_batch_resolves_by_given_moment(db):
    batch = make_daily_process(db, date=date(2025, 3, 9))
    service = DailyProcessService(db)

    assert service.current_batch(datetime(2025, 3, 9, 15, 0, tzinfo=timezone.utc)).id == batch.id
    assert service.current_batch(datetime(2025, 3, 11, 15, 0, tzinfo=timezone.utc)) is None


def test_list_returns_most_recent_first(db):
    make_daily_process(db, date=date(2025, 1, 1))
    make_daily_process(db, date=date(2025, 1, 3))
    make_daily_process(db, date=date(2025, 1, 2))

    dates = [d.date for d in DailyProcessService(db).list()]
    assert dates == [date(2025, 1, 3), date(2025, 1, 2), date(2025, 1, 1)]
