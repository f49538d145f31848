import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import case
from sqlalchemy.orm import Session

from telemetry_api.core.settings import settings
from telemetry_api.db.upsert import upsert
from telemetry_api.errors import ValidationError
from telemetry_api.models.identity import AnalyticsUser
from telemetry_api.models.session import LauncherSession


def require_user_id(user_id: Optional[str]) -> str:
    if not user_id or not user_id.strip():
        raise ValidationError("Missing userId")
    return user_id


def upsert_identity(
    db: Session,
    user_id: str,
    now: datetime,
    country: Optional[str] = None,
    touch_country: bool = False,
) -> None:
    """Create the identity or advance its ``last_seen``.

    ``last_seen`` only moves forward: a write carrying an older timestamp than
    the stored one leaves it untouched. ``country`` is overwritten only when
    ``touch_country`` is set (heartbeats), telemetry batches leave it alone.
    """
    require_user_id(user_id)
    table = AnalyticsUser.__table__

    def build_update(excluded):
        update = {
            "last_seen": case(
                (table.c.last_seen < excluded.last_seen, excluded.last_seen),
                else_=table.c.last_seen,
            )
        }
        if touch_country:
            update["country"] = excluded.country
        return update

    upsert(
        db,
        AnalyticsUser,
        values={"id": user_id, "last_seen": now, "first_seen": now, "country": country},
        index_elements=["id"],
        build_update=build_update,
    )
    db.commit()


def open_session(db: Session, user_id: str, now: datetime, app_version: Optional[str] = None) -> str:
    require_user_id(user_id)
    session = LauncherSession(
        id=str(uuid.uuid4()),
        user_id=user_id,
        start_time=now,
        end_time=now,
        app_version=app_version or settings.default_app_version,
    )
    db.add(session)
    db.commit()
    return session.id


def touch_session(db: Session, session_id: str, user_id: str, now: datetime) -> int:
    """Advance ``end_time`` of a session owned by ``user_id``.

    Returns the number of rows touched; a session id that belongs to another
    identity (or does not exist) touches nothing.
    """
    require_user_id(user_id)
    touched = (
        db.query(LauncherSession)
        .filter(LauncherSession.id == session_id, LauncherSession.user_id == user_id)
        .update({LauncherSession.end_time: now}, synchronize_session=False)
    )
    db.commit()
    return touched
