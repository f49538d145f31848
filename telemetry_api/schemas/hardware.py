from typing import Optional

from pydantic import BaseModel, Field

from telemetry_api.schemas.common import FreeText, UserId


class HardwareReport(BaseModel):
    user_id: UserId = Field(alias="userId")
    os: Optional[FreeText(64)] = None
    os_version: Optional[FreeText(128)] = Field(default=None, alias="osVersion")
    # Launchers send RAM as a number of GB or as a preformatted string
    ram: Optional[FreeText(64)] = None
    gpu: Optional[FreeText(255)] = None
    cpu: Optional[FreeText(255)] = None

    class Config:
        populate_by_name = True
        coerce_numbers_to_str = True
