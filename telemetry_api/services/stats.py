from datetime import date, datetime, timedelta
from typing import Dict, List

from sqlalchemy import text
from sqlalchemy.orm import Session

from telemetry_api.core.clock import to_aware_utc
from telemetry_api.errors import AggregationLimitExceeded
from telemetry_api.models.identity import AnalyticsUser
from telemetry_api.schemas.stats import DailyActiveUsers, StatsOut
from telemetry_api.services.events import count_events


def day_buckets(as_of: datetime, days: int) -> Dict[date, int]:
    """Zeroed buckets for the UTC calendar dates ``as_of - 0 .. days-1``."""
    today = to_aware_utc(as_of).date()
    return {today - timedelta(days=offset): 0 for offset in range(days)}


def _apply_statement_timeout(db: Session, timeout_ms: int) -> None:
    # SQLite has no per-statement timeout; the active-window bound caps it there
    if timeout_ms and db.get_bind().dialect.name == "postgresql":
        db.execute(text(f"SET LOCAL statement_timeout = {int(timeout_ms)}"))


def fetch_active_last_seen(
    db: Session, since: datetime, until: datetime, max_identities: int
) -> List[datetime]:
    rows = (
        db.query(AnalyticsUser.last_seen)
        .filter(AnalyticsUser.last_seen >= since, AnalyticsUser.last_seen <= until)
        .limit(max_identities + 1)
        .all()
    )
    if len(rows) > max_identities:
        raise AggregationLimitExceeded(
            f"More than {max_identities} identities active in the window"
        )
    return [to_aware_utc(last_seen) for (last_seen,) in rows]


def compute_stats(
    db: Session,
    as_of: datetime,
    launch_event_type: str,
    window_days: int = 30,
    short_window_days: int = 14,
    max_active_identities: int = 100_000,
    timeout_ms: int = 0,
) -> StatsOut:
    """Rolling active-user summary as of ``as_of``.

    Identities are counted once, on the UTC date of their ``last_seen``. The
    window is ``window_days`` of elapsed time while the series has
    ``window_days`` calendar dates, so a row near the lower edge can fall on a
    date with no bucket; such rows still count toward ``active_users_30d`` but
    are left out of the daily series. Launches are counted over all time.
    """
    as_of = to_aware_utc(as_of)
    since = as_of - timedelta(days=window_days)
    short_since = as_of - timedelta(days=short_window_days)

    _apply_statement_timeout(db, timeout_ms)
    active = fetch_active_last_seen(db, since, as_of, max_active_identities)

    buckets = day_buckets(as_of, window_days)
    for last_seen in active:
        day = last_seen.date()
        if day in buckets:
            buckets[day] += 1

    return StatsOut(
        active_users_30d=len(active),
        active_users_14d=sum(1 for last_seen in active if last_seen >= short_since),
        total_launches=count_events(db, launch_event_type),
        daily_active_users=[DailyActiveUsers(date=day, count=count) for day, count in sorted(buckets.items())],
    )
