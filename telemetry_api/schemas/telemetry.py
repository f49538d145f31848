from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from telemetry_api.core.settings import settings
from telemetry_api.schemas.common import FreeText, UserId


class TelemetryEventIn(BaseModel):
    type: FreeText(64, min_length=1)
    metadata: Optional[Any] = None
    timestamp: Optional[datetime] = None


class TelemetryBatch(BaseModel):
    user_id: UserId = Field(alias="userId")
    events: List[TelemetryEventIn] = Field(max_length=settings.telemetry_max_batch_size)

    class Config:
        populate_by_name = True


class TelemetryBatchResponse(BaseModel):
    success: bool = True
    count: int
