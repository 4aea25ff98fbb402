from datetime import datetime, timedelta, timezone

from app.core.config import settings
from app.services.utils.clock import as_utc, business_day_bounds


def test_utc_day_bounds():
    start, end = business_day_bounds(datetime(2024, 3, 10, 23, 59, tzinfo=timezone.utc))
    assert start == datetime(2024, 3, 10, tzinfo=timezone.utc)
    assert end == datetime(2024, 3, 11, tzinfo=timezone.utc)


def test_naive_input_is_treated_as_utc():
    start, _ = business_day_bounds(datetime(2024, 3, 10, 0, 0))
    assert start == datetime(2024, 3, 10, tzinfo=timezone.utc)


def test_local_calendar_day(monkeypatch):
    monkeypatch.setattr(settings, "BUSINESS_TIMEZONE", "America/Santiago")
    # 02:00 UTC on Jan 11 is still Jan 10 in Santiago (UTC-3 in summer)
    start, end = business_day_bounds(datetime(2024, 1, 11, 2, 0, tzinfo=timezone.utc))
    assert start == datetime(2024, 1, 10, 3, 0, tzinfo=timezone.utc)
    assert end == datetime(2024, 1, 11, 3, 0, tzinfo=timezone.utc)


def test_as_utc_normalises_offsets():
    minus_five = timezone(timedelta(hours=-5))
    assert as_utc(datetime(2026, 10, 19, 0, 0, tzinfo=minus_five)) == datetime(2026, 10, 19, 5, 0, tzinfo=timezone.utc)
    assert as_utc(datetime(2026, 10, 19, 5, 0)).tzinfo is timezone.utc
    assert as_utc(None) is None
