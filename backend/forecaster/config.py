from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DEFAULT_ITERATIONS: int = 10_000
    DEFAULT_SEED: Optional[int] = 42
    MAX_LOOKAHEAD_DAYS: int = 3650
    MAX_HORIZON_DAYS: int = 3650
    VELOCITY_WINDOW: int = 30
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
