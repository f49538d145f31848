from datetime import date, datetime, timedelta, timezone

import pytest

from telemetry_api.db.session import Base, engine, SessionLocal
from telemetry_api.errors import AggregationLimitExceeded
from telemetry_api.models.event import Event
from telemetry_api.models.identity import AnalyticsUser
from telemetry_api.services.stats import compute_stats, day_buckets


AS_OF = datetime(2026, 3, 31, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def seed_users(db, last_seen_by_id):
    db.add_all([AnalyticsUser(id=uid, last_seen=seen) for uid, seen in last_seen_by_id.items()])
    db.commit()


def stats(db, **kwargs):
    return compute_stats(db, as_of=AS_OF, launch_event_type="GAME_LAUNCH", **kwargs)


def test_day_buckets_cover_thirty_utc_dates_ending_today():
    buckets = day_buckets(AS_OF, 30)
    assert len(buckets) == 30
    assert max(buckets) == date(2026, 3, 31)
    assert min(buckets) == date(2026, 3, 2)
    assert set(buckets.values()) == {0}


def test_thirty_day_window_edges():
    db = SessionLocal()
    try:
        eps = timedelta(seconds=1)
        seed_users(
            db,
            {
                "just-inside": AS_OF - timedelta(days=30) + eps,
                "just-outside": AS_OF - timedelta(days=30) - eps,
                "today": AS_OF - timedelta(hours=1),
            },
        )
        result = stats(db)
        assert result.active_users_30d == 2
        assert result.active_users_14d == 1
    finally:
        db.close()


def test_fourteen_day_window_is_inclusive():
    db = SessionLocal()
    try:
        seed_users(
            db,
            {
                "on-edge": AS_OF - timedelta(days=14),
                "past-edge": AS_OF - timedelta(days=14, seconds=1),
            },
        )
        result = stats(db)
        assert result.active_users_30d == 2
        assert result.active_users_14d == 1
    finally:
        db.close()


def test_rows_without_a_bucket_are_dropped_from_series_only():
    db = SessionLocal()
    try:
        # 2026-03-01 12:00:01 is inside the 720h window but 2026-03-01 is not one of the 30 dates
        seed_users(
            db,
            {
                "edge": AS_OF - timedelta(days=30) + timedelta(seconds=1),
                "mid": datetime(2026, 3, 15, 23, 59, tzinfo=timezone.utc),
                "mid2": datetime(2026, 3, 15, 0, 0, tzinfo=timezone.utc),
            },
        )
        result = stats(db)
        assert result.active_users_30d == 3
        series = {d.date: d.count for d in result.daily_active_users}
        assert date(2026, 3, 1) not in series
        assert series[date(2026, 3, 15)] == 2
        assert sum(series.values()) == 2
    finally:
        db.close()


def test_identities_seen_after_as_of_are_ignored():
    db = SessionLocal()
    try:
        seed_users(db, {"future": AS_OF + timedelta(minutes=1), "now": AS_OF})
        result = stats(db)
        assert result.active_users_30d == 1
        assert {d.date: d.count for d in result.daily_active_users}[date(2026, 3, 31)] == 1
    finally:
        db.close()


def test_series_is_sorted_ascending():
    db = SessionLocal()
    try:
        result = stats(db)
        dates = [d.date for d in result.daily_active_users]
        assert dates == sorted(dates)
        assert len(dates) == 30
    finally:
        db.close()


def test_launches_counted_over_all_time():
    db = SessionLocal()
    try:
        seed_users(db, {"old": AS_OF - timedelta(days=400)})
        db.add_all(
            [
                Event(user_id="old", type="GAME_LAUNCH", created_at=AS_OF - timedelta(days=399)),
                Event(user_id="old", type="GAME_LAUNCH", created_at=AS_OF - timedelta(days=1)),
                Event(user_id="old", type="MOD_LOADED", created_at=AS_OF - timedelta(days=1)),
            ]
        )
        db.commit()
        result = stats(db)
        assert result.total_launches == 2
        assert result.active_users_30d == 0
    finally:
        db.close()


def test_compute_stats_is_idempotent():
    db = SessionLocal()
    try:
        seed_users(db, {f"u{i}": AS_OF - timedelta(days=i, hours=3) for i in range(20)})
        first = stats(db).model_dump_json()
        second = stats(db).model_dump_json()
        assert first == second
        assert db.query(AnalyticsUser).count() == 20
    finally:
        db.close()


def test_active_window_bound_is_enforced():
    db = SessionLocal()
    try:
        seed_users(db, {f"u{i}": AS_OF - timedelta(hours=i) for i in range(5)})
        assert stats(db, max_active_identities=5).active_users_30d == 5
        with pytest.raises(AggregationLimitExceeded):
            stats(db, max_active_identities=4)
    finally:
        db.close()
