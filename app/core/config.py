from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(alias="DATABASE_URL")

    # JWT verification (tokens are issued by the identity provider)
    secret_key: str = Field(alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=30, alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    # Principal seeded as the registry administrator
    administrator_principal: str = Field(alias="ADMINISTRATOR_PRINCIPAL")

    # Treasury (optional; without it every payout transfer fails)
    treasury_url: str | None = Field(default=None, alias="TREASURY_URL")
    treasury_api_key: str | None = Field(default=None, alias="TREASURY_API_KEY")
    treasury_timeout_seconds: float = Field(
        default=30.0, alias="TREASURY_TIMEOUT_SECONDS"
    )

    # Lifecycle event webhook (optional)
    event_webhook_url: str | None = Field(default=None, alias="EVENT_WEBHOOK_URL")

    # Frontend URL for CORS
    frontend_url: str | None = Field(default=None, alias="FRONTEND_URL")

    @field_validator(
        "treasury_url",
        "treasury_api_key",
        "event_webhook_url",
        "frontend_url",
        mode="before",
    )
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for optional string fields."""
        if v == "":
            return None
        return v

    @field_validator("treasury_timeout_seconds", mode="before")
    @classmethod
    def empty_str_to_default_timeout(cls, v: str | float | None) -> float:
        """Fall back to the default timeout when the variable is empty."""
        if v is None or v == "":
            return 30.0
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
