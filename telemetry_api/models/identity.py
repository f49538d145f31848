from sqlalchemy import Column, String, DateTime, func

from telemetry_api.db.session import Base


class AnalyticsUser(Base):
    __tablename__ = "analytics_users"

    # Client-generated installation id, trusted as-is
    id = Column(String(128), primary_key=True)
    first_seen = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_seen = Column(DateTime(timezone=True), nullable=False, index=True)
    # ISO 3166 alpha-2, NULL when the lookup missed
    country = Column(String(2), nullable=True)
