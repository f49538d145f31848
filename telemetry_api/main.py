from fastapi import FastAPI

from telemetry_api.core.settings import settings
from telemetry_api.errors import register_error_handlers
from telemetry_api.routers.crashes import router as crashes_router
from telemetry_api.routers.hardware import router as hardware_router
from telemetry_api.routers.heartbeat import router as heartbeat_router
from telemetry_api.routers.stats import router as stats_router
from telemetry_api.routers.telemetry import router as telemetry_router
from telemetry_api.startup import register_startup

app = FastAPI(title=settings.app_name, debug=settings.debug)

register_startup(app)
register_error_handlers(app)

app.include_router(heartbeat_router, prefix=settings.api_prefix, tags=["ingestion"])
app.include_router(hardware_router, prefix=settings.api_prefix, tags=["ingestion"])
app.include_router(telemetry_router, prefix=settings.api_prefix, tags=["ingestion"])
app.include_router(stats_router, prefix=settings.api_prefix, tags=["stats"])
app.include_router(crashes_router, prefix=settings.api_prefix, tags=["crashes"])


@app.get("/health")
def health_check():
    return {"status": "ok"}
