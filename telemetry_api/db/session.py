from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from telemetry_api.core.settings import settings
from telemetry_api.db.upsert import ensure_supported_dialect


class Base(DeclarativeBase):
    pass


_is_sqlite = settings.database_url.startswith("sqlite")

engine = create_engine(
    settings.database_url,
    # Concurrent heartbeats contend for the SQLite write lock; wait instead of failing fast
    connect_args={"check_same_thread": False, "timeout": 30} if _is_sqlite else {},
    pool_pre_ping=True,
)
ensure_supported_dialect(engine.dialect.name)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
