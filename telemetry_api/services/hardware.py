from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from telemetry_api.db.upsert import upsert
from telemetry_api.models.hardware import Hardware
from telemetry_api.services.identities import require_user_id


_PROFILE_FIELDS = ("os", "os_version", "ram", "gpu", "cpu")


def upsert_hardware(
    db: Session,
    user_id: str,
    os: Optional[str] = None,
    os_version: Optional[str] = None,
    ram: Optional[str] = None,
    gpu: Optional[str] = None,
    cpu: Optional[str] = None,
) -> None:
    # Full replace: fields missing from this report become NULL
    require_user_id(user_id)
    values = {"user_id": user_id, "os": os, "os_version": os_version, "ram": ram, "gpu": gpu, "cpu": cpu}
    upsert(
        db,
        Hardware,
        values=values,
        index_elements=["user_id"],
        build_update=lambda excluded: dict(
            {name: getattr(excluded, name) for name in _PROFILE_FIELDS},
            updated_at=func.now(),
        ),
    )
    db.commit()


def get_hardware(db: Session, user_id: str) -> Optional[Hardware]:
    return db.query(Hardware).filter(Hardware.user_id == user_id).first()
