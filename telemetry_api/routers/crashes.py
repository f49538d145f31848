import os
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import FileResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from telemetry_api.core.logging import get_logger
from telemetry_api.core.settings import settings
from telemetry_api.db.session import get_db
from telemetry_api.errors import NotFound, StorageFailure
from telemetry_api.schemas.crash import CrashReportOut
from telemetry_api.security.deps import require_stats_secret
from telemetry_api.services.crashes import discard_dump, get_crash, list_crashes, record_crash, save_dump
from telemetry_api.services.geo import client_ip


logger = get_logger("crashes")

router = APIRouter()


@router.post("/crash-report", response_class=PlainTextResponse)
def submit_crash_report(
    request: Request,
    upload_file_minidump: Optional[UploadFile] = File(default=None),
    guid: Optional[str] = Form(default=None),
    platform: Optional[str] = Form(default=None),
    process_type: Optional[str] = Form(default=None),
    ver: Optional[str] = Form(default=None),
    version: Optional[str] = Form(default=None, alias="_version"),
    user_id: Optional[str] = Form(default=None, alias="userId"),
    db: Session = Depends(get_db),
) -> str:
    # Field names are the ones Electron's crashReporter posts
    ip = client_ip(request, settings.trust_proxy)
    logger.info(f"[Crash] Received report from {ip}")

    dump_path = ""
    if upload_file_minidump is not None:
        try:
            dump_path = save_dump(upload_file_minidump.file, upload_file_minidump.filename, settings.crash_dump_dir)
        except OSError:
            logger.exception("Could not store crash dump")
            raise StorageFailure()

    try:
        report = record_crash(
            db,
            report_id=guid,
            platform=platform,
            process_type=process_type,
            app_version=ver or version,
            dump_path=dump_path,
            ip=ip,
            user_id=user_id,
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Crash report handling error")
        if dump_path:
            discard_dump(dump_path)
        raise StorageFailure()

    # crashReporter shows the response body as the report id
    return report.report_id


@router.get("/crashes", response_model=List[CrashReportOut])
def get_crashes(_: None = Depends(require_stats_secret), db: Session = Depends(get_db)) -> List[CrashReportOut]:
    try:
        return list_crashes(db, settings.crash_list_limit)
    except SQLAlchemyError:
        logger.exception("Get crashes error")
        raise StorageFailure()


@router.get("/crashes/{crash_id}/dump")
def download_crash_dump(
    crash_id: int,
    _: None = Depends(require_stats_secret),
    db: Session = Depends(get_db),
) -> FileResponse:
    try:
        crash = get_crash(db, crash_id)
    except SQLAlchemyError:
        logger.exception("Download dump error")
        raise StorageFailure()
    if not crash or not crash.dump_path or not os.path.exists(crash.dump_path):
        raise NotFound("Dump not found")
    return FileResponse(crash.dump_path, filename=os.path.basename(crash.dump_path))
