"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "clinical-risk-engine"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    # "json" for production, "console" for local development
    log_format: str = "json"

    host: str = "0.0.0.0"
    port: int = 8000

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}


settings = Settings()
