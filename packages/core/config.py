"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["*"]

    # Cost estimate
    cost_unit_rate: float = 150.0  # per square foot of pool surface
    led_lighting_cost: float = 1500.0
    spillover_spa_cost: float = 9000.0

    # Design session
    history_limit: int = 50
    ground_size: float = 100.0

    # Stub site analysis
    analysis_seed: int | None = None
    analysis_delay_scale: float = 0.0  # 1.0 replays the full staged delays

    model_config = SettingsConfigDict(
        env_prefix="POOLVIZ_", env_file=".env", env_file_encoding="utf-8"
    )


settings = Settings()
