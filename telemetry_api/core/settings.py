from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, case_sensitive=False)

    # App
    app_name: str = "Launcher Telemetry API"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = ""

    # Database: sqlite or postgresql, the engine refuses anything else at startup
    database_url: str = "sqlite:///./telemetry.db"

    # Stats
    stats_secret: Optional[str] = None
    launch_event_type: str = "GAME_LAUNCH"
    stats_window_days: int = 30
    stats_short_window_days: int = 14
    # The daily series is bucketed in memory, so the active window must stay bounded
    stats_max_active_identities: int = 100_000
    stats_query_timeout_ms: int = 5000

    # Ingestion
    telemetry_max_batch_size: int = 1000
    default_app_version: str = "Unknown"
    geoip_database_path: Optional[str] = None
    trust_proxy: bool = True

    # Crash reports
    crash_dump_dir: str = "./uploads/crashes"
    crash_list_limit: int = 50


settings = Settings()
