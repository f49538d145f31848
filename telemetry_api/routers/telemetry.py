from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from telemetry_api.core.clock import utcnow
from telemetry_api.core.logging import get_logger
from telemetry_api.db.session import get_db
from telemetry_api.errors import StorageFailure
from telemetry_api.schemas.telemetry import TelemetryBatch, TelemetryBatchResponse
from telemetry_api.services.events import insert_events
from telemetry_api.services.identities import upsert_identity


logger = get_logger("telemetry")

router = APIRouter()


@router.post("/telemetry", response_model=TelemetryBatchResponse)
def ingest_events(payload: TelemetryBatch, db: Session = Depends(get_db)) -> TelemetryBatchResponse:
    try:
        # Identity must exist before its events; country is left as the last heartbeat set it
        upsert_identity(db, payload.user_id, utcnow())
        count = insert_events(db, payload.user_id, payload.events, utcnow())
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Telemetry error for user {payload.user_id}", extra={"user_id": payload.user_id})
        raise StorageFailure()

    logger.info(f"[Telemetry] User {payload.user_id} logged {count} events", extra={"user_id": payload.user_id, "count": count})
    return TelemetryBatchResponse(count=count)
