from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from telemetry_api.core.logging import get_logger
from telemetry_api.db.session import get_db
from telemetry_api.errors import StorageFailure
from telemetry_api.schemas.common import Ack
from telemetry_api.schemas.hardware import HardwareReport
from telemetry_api.services.hardware import upsert_hardware


logger = get_logger("hardware")

router = APIRouter()


@router.post("/hardware", response_model=Ack)
def report_hardware(payload: HardwareReport, db: Session = Depends(get_db)) -> Ack:
    try:
        upsert_hardware(
            db,
            payload.user_id,
            os=payload.os,
            os_version=payload.os_version,
            ram=payload.ram,
            gpu=payload.gpu,
            cpu=payload.cpu,
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Hardware error for user {payload.user_id}", extra={"user_id": payload.user_id})
        raise StorageFailure()

    logger.info(f"[Hardware] User {payload.user_id} - {payload.ram} RAM, {payload.gpu}", extra={"user_id": payload.user_id})
    return Ack()
