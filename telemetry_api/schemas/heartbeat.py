from typing import Optional

from pydantic import BaseModel, Field

from telemetry_api.schemas.common import FreeText, UserId


class HeartbeatRequest(BaseModel):
    user_id: UserId = Field(alias="userId")
    session_id: Optional[str] = Field(default=None, alias="sessionId", max_length=36)
    app_version: Optional[FreeText(64)] = Field(default=None, alias="appVersion")

    class Config:
        populate_by_name = True


class HeartbeatResponse(BaseModel):
    success: bool = True
    session_id: str = Field(serialization_alias="sessionId")
