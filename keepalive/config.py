from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Key-value store (urls / settings / logs blobs)
    kv_db_path: str = "data/keepalive.db"

    # Probing
    user_agent: str = "Keep-Alive-Engine/2.0"
    display_timezone: str = "Asia/Shanghai"  # used for LogEntry.timestamp

    # Scheduled trigger
    cron_enabled: bool = True
    cron_interval_seconds: int = 600  # 10 minutes

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"


settings = Settings()
