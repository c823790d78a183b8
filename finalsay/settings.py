import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="FinalSay")
    ENV: str = Field(default=os.getenv("APP_ENV", "dev"))
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    # generation backend (mandatory at request time)
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")

    # search backend (optional; absence selects suggested sources)
    SERPAPI_API_KEY: str | None = None
    SOURCES_CONFIG: str | None = None

    # soft per-client throttle
    RATE_LIMIT_MAX: int = Field(default=12)
    RATE_LIMIT_WINDOW_SECONDS: float = Field(default=60.0)

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        extra="ignore",
    )

    @property
    def app_name(self) -> str:
        return self.APP_NAME


settings = Settings()
