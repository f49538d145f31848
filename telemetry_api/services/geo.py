from functools import lru_cache
from typing import Optional

import geoip2.database
import geoip2.errors
import maxminddb
from fastapi import Request

from telemetry_api.core.logging import get_logger
from telemetry_api.core.settings import settings


logger = get_logger("geo")


class CountryResolver:
    """Best-effort IP → ISO country code over a local MaxMind database.

    Every miss (no database configured, private or malformed address, address
    absent from the database) resolves to ``None`` instead of raising. The
    lookup is a memory-mapped file read, so it never waits on the network.
    """

    def __init__(self, database_path: Optional[str] = None):
        self._reader = None
        self._lookup = None
        self._failure_logged = False
        if not database_path:
            return
        try:
            self._reader = geoip2.database.Reader(database_path)
        except (OSError, maxminddb.InvalidDatabaseError) as e:
            logger.warning(f"GeoIP database unavailable at {database_path}: {e}")
            return
        # GeoLite2-City answers country questions too, but only through city()
        if "City" in self._reader.metadata().database_type:
            self._lookup = self._reader.city
        else:
            self._lookup = self._reader.country

    @property
    def enabled(self) -> bool:
        return self._lookup is not None

    def lookup(self, ip: Optional[str]) -> Optional[str]:
        if not self.enabled or not ip:
            return None
        try:
            return self._lookup(ip).country.iso_code
        except (geoip2.errors.AddressNotFoundError, ValueError):
            return None
        except (geoip2.errors.GeoIP2Error, maxminddb.InvalidDatabaseError, TypeError) as e:
            # Corrupt record or a database without country data (ASN, ISP)
            if not self._failure_logged:
                logger.warning(f"GeoIP lookup failed, resolving to unknown country: {e!r}")
                self._failure_logged = True
            return None

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()


@lru_cache(maxsize=1)
def get_country_resolver() -> CountryResolver:
    return CountryResolver(settings.geoip_database_path)


def client_ip(request: Request, trust_proxy: bool = True) -> Optional[str]:
    if trust_proxy:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first_hop = forwarded.split(",")[0].strip()
            if first_hop:
                return first_hop
    return request.client.host if request.client else None
