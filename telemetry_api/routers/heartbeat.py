from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from telemetry_api.core.clock import utcnow
from telemetry_api.core.logging import get_logger
from telemetry_api.core.settings import settings
from telemetry_api.db.session import get_db
from telemetry_api.errors import StorageFailure
from telemetry_api.schemas.heartbeat import HeartbeatRequest, HeartbeatResponse
from telemetry_api.services.geo import CountryResolver, client_ip, get_country_resolver
from telemetry_api.services.identities import open_session, touch_session, upsert_identity


logger = get_logger("heartbeat")

router = APIRouter()


@router.post("/heartbeat", response_model=HeartbeatResponse)
def report_heartbeat(
    payload: HeartbeatRequest,
    request: Request,
    db: Session = Depends(get_db),
    resolver: CountryResolver = Depends(get_country_resolver),
) -> HeartbeatResponse:
    country = resolver.lookup(client_ip(request, settings.trust_proxy))

    try:
        upsert_identity(db, payload.user_id, utcnow(), country=country, touch_country=True)

        if payload.session_id:
            session_id = payload.session_id
            touch_session(db, session_id, payload.user_id, utcnow())
        else:
            session_id = open_session(db, payload.user_id, utcnow(), payload.app_version)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Heartbeat error for user {payload.user_id}", extra={"user_id": payload.user_id})
        raise StorageFailure()

    logger.info(
        f"[Heartbeat] User {payload.user_id} [{country or 'Unknown'}] "
        f"Session: {session_id} (v{payload.app_version or '??'})",
        extra={"user_id": payload.user_id, "session_id": session_id, "country": country},
    )
    return HeartbeatResponse(session_id=session_id)
