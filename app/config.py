from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, model_validator
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # CORS
    FRONTEND_URL: str = "http://localhost:5173"

    # API docs (forced off in production unless explicitly enabled)
    DOCS_ENABLED: bool | None = None

    # Audience builder
    AUDIENCE_PREVIEW_LIMIT: int = Field(10, ge=0, le=100)
    AUDIENCE_RECOMPUTE_DEBOUNCE_MS: int = Field(500, ge=0)

    # Mock data store
    MOCK_CUSTOMER_COUNT: int = Field(100, ge=0)
    MOCK_ORDER_COUNT: int = Field(200, ge=0)
    MOCK_DATA_SEED: int | None = None

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names (info, debug, ...)."""
        if isinstance(v, str):
            v = v.upper()
            if v not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
                raise ValueError(f"Unknown log level: {v}")
        return v

    @model_validator(mode='after')
    def check_production(self) -> "Settings":
        """Production must not run in debug mode; docs default to off there."""
        if self.ENVIRONMENT == "production":
            if self.DEBUG:
                raise ValueError("DEBUG must be disabled in production")
            if self.DOCS_ENABLED is None:
                self.DOCS_ENABLED = False
        elif self.DOCS_ENABLED is None:
            self.DOCS_ENABLED = True
        return self

    @property
    def debounce_seconds(self) -> float:
        return self.AUDIENCE_RECOMPUTE_DEBOUNCE_MS / 1000

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
