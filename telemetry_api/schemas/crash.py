from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CrashReportOut(BaseModel):
    id: int
    report_id: str
    user_id: Optional[str]
    platform: str
    process_type: str
    app_version: str
    ip: str
    date: datetime

    class Config:
        from_attributes = True
