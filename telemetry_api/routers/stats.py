from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from telemetry_api.core.clock import utcnow
from telemetry_api.core.logging import get_logger
from telemetry_api.core.settings import settings
from telemetry_api.db.session import get_db
from telemetry_api.errors import AggregationLimitExceeded, StorageFailure
from telemetry_api.schemas.stats import StatsOut
from telemetry_api.security.deps import require_stats_secret
from telemetry_api.services.stats import compute_stats


logger = get_logger("stats")

router = APIRouter()


@router.get("/stats", response_model=StatsOut)
def get_stats(_: None = Depends(require_stats_secret), db: Session = Depends(get_db)) -> StatsOut:
    try:
        return compute_stats(
            db,
            as_of=utcnow(),
            launch_event_type=settings.launch_event_type,
            window_days=settings.stats_window_days,
            short_window_days=settings.stats_short_window_days,
            max_active_identities=settings.stats_max_active_identities,
            timeout_ms=settings.stats_query_timeout_ms,
        )
    except AggregationLimitExceeded as e:
        logger.warning(f"Stats refused: {e}")
        raise
    except SQLAlchemyError:
        logger.exception("Stats error")
        raise StorageFailure()
