from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Decimal engine: working precision must stay >= 20 significant digits
    DECIMAL_PRECISION: int = 20
    DECIMAL_ROUNDING: str = "ROUND_HALF_EVEN"  # name of a decimal rounding constant

    # Presentation defaults used by pa_money.currency
    DEFAULT_CURRENCY: str = "USD"
    DEFAULT_LOCALE: str = "en-US"

    # Rule templates whose account key cannot be resolved point here
    UNKNOWN_ACCOUNT_PREFIX: str = "unknown-account-for-"

    # App
    APP_NAME: str = "ProperAccount Ledger Core"
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev

    @field_validator("DECIMAL_PRECISION")
    @classmethod
    def precision_floor(cls, v: int) -> int:
        if v < 20:
            raise ValueError("DECIMAL_PRECISION must be at least 20 significant digits")
        return v

    @field_validator("DEFAULT_CURRENCY")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.strip().upper()


settings = Settings()
