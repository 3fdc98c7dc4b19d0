from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PollingSettings(BaseModel):
    quote_interval_seconds: float = 60.0
    market_status_interval_seconds: float = 300.0
    top_movers_interval_seconds: float = 300.0
    # Overview fetches once per symbol change.
    overview_interval_seconds: Optional[float] = None
    top_movers_limit: int = 10


class ProviderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOCKDASH_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )
    alphavantage_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ALPHAVANTAGE_API_KEY", "STOCKDASH_ALPHAVANTAGE_API_KEY"),
    )
    alphavantage_base_url: str = "https://www.alphavantage.co/query"
    request_timeout_seconds: float = 10.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOCKDASH_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "STOCKDASH_LOG_LEVEL"),
    )

    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    polling: PollingSettings = Field(default_factory=PollingSettings)


settings = Settings()
