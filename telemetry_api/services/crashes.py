import secrets
import shutil
import time
from pathlib import Path
from typing import BinaryIO, List, Optional

from sqlalchemy.orm import Session

from telemetry_api.models.crash import CrashReport


def dump_filename(original_name: Optional[str]) -> str:
    suffix = Path(original_name or "").suffix
    return f"crash-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"


def save_dump(stream: BinaryIO, original_name: Optional[str], dump_dir: str) -> str:
    target_dir = Path(dump_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / dump_filename(original_name)
    with target.open("wb") as out:
        shutil.copyfileobj(stream, out)
    return str(target)


def discard_dump(dump_path: str) -> None:
    Path(dump_path).unlink(missing_ok=True)


def record_crash(
    db: Session,
    report_id: Optional[str],
    platform: Optional[str],
    process_type: Optional[str],
    app_version: Optional[str],
    dump_path: str,
    ip: Optional[str],
    user_id: Optional[str] = None,
) -> CrashReport:
    report = CrashReport(
        report_id=report_id or f"unknown-{int(time.time() * 1000)}",
        platform=platform or "unknown",
        process_type=process_type or "unknown",
        app_version=app_version or "unknown",
        dump_path=dump_path,
        ip=ip or "",
        user_id=user_id or None,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    return report


def list_crashes(db: Session, limit: int) -> List[CrashReport]:
    return db.query(CrashReport).order_by(CrashReport.date.desc(), CrashReport.id.desc()).limit(limit).all()


def get_crash(db: Session, crash_id: int) -> Optional[CrashReport]:
    return db.query(CrashReport).filter(CrashReport.id == crash_id).first()
