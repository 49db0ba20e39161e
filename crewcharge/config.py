"""
Centralized settings using Pydantic Settings (v2).
Reads environment variables (or a .env file) so API keys are NOT hard-coded.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # ---- Crewcharge API ----
    CREWCHARGE_ENDPOINT: str = Field(
        default="https://app.crewcharge.com",
        description="Base URL of the Crewcharge API",
    )
    CREWCHARGE_API_KEY: str | None = Field(default=None, description="Project API key")
    CREWCHARGE_ANALYTICS_TAG: str | None = None
    CREWCHARGE_PROJECT_KEY: str | None = Field(
        default=None,
        description="Namespace prefix used when hashing user identifiers",
    )
    CREWCHARGE_TIMEOUT_S: int = 20

    # ---- Logging ----
    SERVICE_NAME: str = Field(default="crewcharge-sdk")
    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: bool = Field(default=True)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
