"""
config/settings.py
──────────────────
Application configuration loaded from environment variables.
"""
import os
from dataclasses import dataclass


@dataclass
class Settings:
    # Storage (":memory:" keeps everything in-process, a file path persists it)
    DATABASE_URL: str = os.getenv("DATABASE_URL", ":memory:")

    # Facility wall clock (IANA zone name, empty = system local time)
    FACILITY_TZ: str = os.getenv("FACILITY_TZ", "")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Trend analysis
    TREND_HISTORY_SIZE: int = int(os.getenv("TREND_HISTORY_SIZE", "10"))

    # Reporting
    WEEKLY_WINDOW_DAYS: int = int(os.getenv("WEEKLY_WINDOW_DAYS", "7"))
    EQUIPMENT_HISTORY_LIMIT: int = int(os.getenv("EQUIPMENT_HISTORY_LIMIT", "20"))

    # Demo simulation
    SIMULATION_SEED: int = int(os.getenv("SIMULATION_SEED", "42"))


settings = Settings()
