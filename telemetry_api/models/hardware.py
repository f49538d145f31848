from sqlalchemy import Column, Integer, String, DateTime, func

from telemetry_api.db.session import Base


class Hardware(Base):
    __tablename__ = "hardware"

    id = Column(Integer, primary_key=True)
    # No FK: a hardware report may arrive before the first heartbeat
    user_id = Column(String(128), unique=True, nullable=False, index=True)
    os = Column(String(64), nullable=True)
    os_version = Column(String(128), nullable=True)
    ram = Column(String(64), nullable=True)
    gpu = Column(String(255), nullable=True)
    cpu = Column(String(255), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
