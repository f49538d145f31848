from datetime import datetime, timedelta, timezone

import pytest

from telemetry_api.core.clock import to_aware_utc
from telemetry_api.db.session import Base, engine, SessionLocal
from telemetry_api.errors import ValidationError
from telemetry_api.models.identity import AnalyticsUser
from telemetry_api.models.session import LauncherSession
from telemetry_api.services.identities import open_session, touch_session, upsert_identity


T0 = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def load_user(db, user_id):
    db.expire_all()
    return db.query(AnalyticsUser).filter(AnalyticsUser.id == user_id).one()


def test_upsert_identity_creates_then_advances_last_seen():
    db = SessionLocal()
    try:
        upsert_identity(db, "u1", T0, country="FR", touch_country=True)
        assert to_aware_utc(load_user(db, "u1").last_seen) == T0

        later = T0 + timedelta(minutes=5)
        upsert_identity(db, "u1", later, country="FR", touch_country=True)
        user = load_user(db, "u1")
        assert to_aware_utc(user.last_seen) == later
        assert user.country == "FR"
        assert db.query(AnalyticsUser).count() == 1
    finally:
        db.close()


def test_upsert_identity_never_regresses_last_seen():
    db = SessionLocal()
    try:
        upsert_identity(db, "u1", T0)
        upsert_identity(db, "u1", T0 - timedelta(hours=3))
        assert to_aware_utc(load_user(db, "u1").last_seen) == T0
    finally:
        db.close()


def test_upsert_identity_leaves_country_unless_asked():
    db = SessionLocal()
    try:
        upsert_identity(db, "u1", T0, country="JP", touch_country=True)
        upsert_identity(db, "u1", T0 + timedelta(seconds=1))
        assert load_user(db, "u1").country == "JP"

        # A heartbeat whose lookup missed overwrites the stored country
        upsert_identity(db, "u1", T0 + timedelta(seconds=2), country=None, touch_country=True)
        assert load_user(db, "u1").country is None
    finally:
        db.close()


def test_touch_session_advances_end_time_monotonically():
    db = SessionLocal()
    try:
        upsert_identity(db, "u1", T0)
        sid = open_session(db, "u1", T0, "2.0.0")

        previous = T0
        for minutes in (1, 2, 5):
            now = T0 + timedelta(minutes=minutes)
            assert touch_session(db, sid, "u1", now) == 1
            db.expire_all()
            row = db.query(LauncherSession).filter(LauncherSession.id == sid).one()
            assert to_aware_utc(row.end_time) == now
            assert to_aware_utc(row.end_time) > previous
            previous = now

        assert db.query(LauncherSession).count() == 1
    finally:
        db.close()


def test_touch_session_scoped_to_owner():
    db = SessionLocal()
    try:
        upsert_identity(db, "owner", T0)
        sid = open_session(db, "owner", T0)
        assert touch_session(db, sid, "someone-else", T0 + timedelta(minutes=1)) == 0
        assert touch_session(db, "no-such-session", "owner", T0 + timedelta(minutes=1)) == 0
        db.expire_all()
        assert to_aware_utc(db.query(LauncherSession).one().end_time) == T0
    finally:
        db.close()


def test_services_reject_empty_identity():
    db = SessionLocal()
    try:
        with pytest.raises(ValidationError):
            upsert_identity(db, "", T0)
        with pytest.raises(ValidationError):
            open_session(db, "  ", T0)
    finally:
        db.close()
