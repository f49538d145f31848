from fastapi import FastAPI
from sqlalchemy import text, inspect

from telemetry_api.core.logging import get_logger
from telemetry_api.db.session import Base, engine
from telemetry_api.services.geo import get_country_resolver

# Imported for their side effect of registering tables on Base.metadata
from telemetry_api.models import crash, event, hardware, identity, session  # noqa: F401


logger = get_logger("startup")


def register_startup(app: FastAPI) -> None:
    @app.on_event("startup")
    def _create_tables() -> None:
        Base.metadata.create_all(bind=engine)

        # Lightweight migration: databases created before app versions were tracked
        with engine.begin() as conn:
            inspector = inspect(conn)
            if "sessions" in inspector.get_table_names():
                session_columns = {col["name"] for col in inspector.get_columns("sessions")}
                if "app_version" not in session_columns:
                    logger.info("Adding sessions.app_version column")
                    conn.execute(text("ALTER TABLE sessions ADD COLUMN app_version VARCHAR(64) NOT NULL DEFAULT 'Unknown'"))

    @app.on_event("shutdown")
    def _close_geoip() -> None:
        get_country_resolver().close()
