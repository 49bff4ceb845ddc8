from datetime import date

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "", "case_sensitive": False, "env_file": ".env"}

    # App
    environment: str = "development"
    debug: bool = True
    app_name: str = "GenWatch"
    log_json: bool = False

    # Tick intervals (seconds)
    generator_tick_seconds: float = 2.0
    grid_poll_seconds: float = 5.0

    # Generator
    initial_fuel_pct: float = 85.0
    fuel_consumption_pct_per_hour: float = 3.0
    last_maintenance_date: date = date(2025, 10, 15)
    next_maintenance_date: date = date(2026, 1, 15)

    # Grid feed
    grid_outage_probability: float = 0.05
    grid_seed: int | None = None

    # Notifications kept in memory for the dashboard
    notification_history: int = 100


settings = Settings()
