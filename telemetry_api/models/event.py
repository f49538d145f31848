from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey

from telemetry_api.db.session import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(128), ForeignKey("analytics_users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(64), nullable=False, index=True)
    # "metadata" is reserved on declarative classes, so the attribute name differs from the column
    payload = Column("metadata", Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
