"""Engine configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Cosmic Planner"
    log_level: str = "INFO"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "cosmic-planner"
    # Visible grid of the day/week views.
    day_window_start_hour: int = 6
    day_window_end_hour: int = 24
    pixels_per_hour: float = 80
    # Default preferred hours for slot search.
    search_window_start_hour: int = 9
    search_window_end_hour: int = 21
    optimal_threshold: float = 0.5
    minimum_visible_hours: float = 0.5
    assistant_horizon_days: int = 3
    default_session_minutes: int = 30


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
