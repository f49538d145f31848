import datetime as dt
from typing import List

from pydantic import BaseModel


class DailyActiveUsers(BaseModel):
    date: dt.date
    count: int


class StatsOut(BaseModel):
    active_users_30d: int
    active_users_14d: int
    total_launches: int
    daily_active_users: List[DailyActiveUsers]
