import hmac
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from telemetry_api.core.logging import get_logger
from telemetry_api.core.settings import settings
from telemetry_api.errors import Unauthorized


logger = get_logger("security")

_bearer_scheme = HTTPBearer(auto_error=False)


def require_stats_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> None:
    expected = settings.stats_secret
    if not expected:
        logger.warning("Stats secret is not configured; rejecting request")
        raise Unauthorized()
    if not credentials or credentials.scheme.lower() != "bearer":
        raise Unauthorized()
    if not hmac.compare_digest(credentials.credentials.encode("utf-8"), expected.encode("utf-8")):
        raise Unauthorized()
