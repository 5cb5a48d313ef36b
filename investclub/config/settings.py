"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from decimal import Decimal

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Redis (for Dramatiq and the accrual lock)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "logs/investclub.log"
    health_check_port: int = Field(
        default=8081, ge=1, le=65535, description="Health check HTTP server port"
    )

    # Referral commissions, percent of each daily payout
    referral_level1_rate: Decimal = Field(
        default=Decimal("15"), ge=0, le=100,
        description="Commission percent for the direct referrer"
    )
    referral_level2_rate: Decimal = Field(
        default=Decimal("8"), ge=0, le=100,
        description="Commission percent for the second-level referrer"
    )
    referral_level3_rate: Decimal = Field(
        default=Decimal("5"), ge=0, le=100,
        description="Commission percent for the third-level referrer"
    )
    invalid_referral_code_fatal: bool = Field(
        default=False,
        description="Reject registration when the referral code is unknown"
    )

    # Daily accrual
    accrual_once_per_day: bool = Field(
        default=True,
        description="Credit each investment at most once per calendar day"
    )
    accrual_hour_utc: int = Field(
        default=0, ge=0, le=23, description="Hour (UTC) of the daily accrual run"
    )
    accrual_minute_utc: int = Field(
        default=5, ge=0, le=59, description="Minute of the daily accrual run"
    )
    accrual_lock_timeout: int = Field(
        default=600, gt=0, description="Accrual lock lifetime in seconds"
    )
    emergency_stop_accrual: bool = Field(
        default=False,
        description="Emergency stop for all daily return accruals"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )
            if self.database_url.startswith('sqlite'):
                logger.warning(
                    'DATABASE_URL points to SQLite in production. '
                    'Use PostgreSQL for concurrent accrual runs.'
                )
        return self

    @model_validator(mode='after')
    def validate_referral_rates(self) -> 'Settings':
        """Commission percentages may not exceed the payout they come from."""
        total = (
            self.referral_level1_rate
            + self.referral_level2_rate
            + self.referral_level3_rate
        )
        if total > 100:
            raise ValueError(
                f'Referral rates add up to {total}%, '
                'which exceeds the daily payout.'
            )
        return self

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        allowed = ('postgresql://', 'postgresql+asyncpg://', 'sqlite+aiosqlite://')
        if not v.startswith(allowed):
            raise ValueError(
                'DATABASE_URL must start with postgresql://, '
                'postgresql+asyncpg:// or sqlite+aiosqlite://'
            )
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level name."""
        level = v.upper()
        if level not in {'TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL'}:
            raise ValueError(f'Unknown log level: {v}')
        return level

    @property
    def async_database_url(self) -> str:
        """Database URL with the async driver selected."""
        if self.database_url.startswith('postgresql://'):
            return self.database_url.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return self.database_url

    @property
    def referral_rates(self) -> dict[int, Decimal]:
        """Commission percent per referral level."""
        return {
            1: self.referral_level1_rate,
            2: self.referral_level2_rate,
            3: self.referral_level3_rate,
        }


# Global settings instance
settings = Settings()
