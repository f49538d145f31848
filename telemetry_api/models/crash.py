from sqlalchemy import Column, Integer, String, DateTime, func

from telemetry_api.db.session import Base


class CrashReport(Base):
    __tablename__ = "crash_reports"

    id = Column(Integer, primary_key=True)
    report_id = Column(String(128), nullable=False, index=True)
    user_id = Column(String(128), nullable=True, index=True)
    platform = Column(String(32), nullable=False, server_default="unknown")
    process_type = Column(String(32), nullable=False, server_default="unknown")
    app_version = Column(String(64), nullable=False, server_default="unknown")
    dump_path = Column(String(512), nullable=False, server_default="")
    ip = Column(String(45), nullable=False, server_default="")
    date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
