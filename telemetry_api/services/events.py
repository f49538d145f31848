import json
from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from telemetry_api.core.clock import to_aware_utc
from telemetry_api.models.event import Event
from telemetry_api.schemas.telemetry import TelemetryEventIn
from telemetry_api.services.identities import require_user_id


def materialize_events(user_id: str, events: List[TelemetryEventIn], now: datetime) -> List[Event]:
    return [
        Event(
            user_id=user_id,
            type=evt.type,
            payload=json.dumps(evt.metadata) if evt.metadata is not None else None,
            created_at=to_aware_utc(evt.timestamp) if evt.timestamp else now,
        )
        for evt in events
    ]


def insert_events(db: Session, user_id: str, events: List[TelemetryEventIn], now: datetime) -> int:
    """Insert a batch in one transaction: either every row lands or none does.

    Resubmitted events are stored again; nothing is deduplicated.
    """
    require_user_id(user_id)
    rows = materialize_events(user_id, events, now)
    if rows:
        db.add_all(rows)
        db.commit()
    return len(rows)


def count_events(db: Session, event_type: str) -> int:
    return db.query(Event).filter(Event.type == event_type).count()
