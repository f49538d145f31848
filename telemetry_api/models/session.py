from sqlalchemy import Column, String, DateTime, ForeignKey

from telemetry_api.db.session import Base


class LauncherSession(Base):
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(128), ForeignKey("analytics_users.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    # Advanced by every heartbeat; there is no explicit close
    end_time = Column(DateTime(timezone=True), nullable=False)
    app_version = Column(String(64), nullable=False, server_default="Unknown")
