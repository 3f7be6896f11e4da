from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from booking_quotes.domain.pricing.models import TenantContext


class Settings(BaseSettings):
    app_name: str = "booking-quotes"
    app_env: Literal["dev", "prod"] = Field("prod")
    log_level: str = Field("INFO")
    cors_origins_raw: str | None = Field(None, validation_alias="cors_origins")
    service_catalog_path: str = Field("pricing/catalog_v1.json")
    default_currency: str = Field("SEK", min_length=3, max_length=3)
    default_vat_rate_percent: float = Field(25.0)
    default_tax_deduction_enabled: bool = Field(False)
    tax_deduction_rate_percent: float = Field(50.0)

    model_config = SettingsConfigDict(env_file=".env", enable_decoding=False, extra="ignore")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log_level {value!r}")
        return normalized

    @field_validator("default_vat_rate_percent")
    @classmethod
    def validate_vat_rate(cls, value: float) -> float:
        if value < 0 or value > 100:
            raise ValueError("default_vat_rate_percent must be between 0 and 100")
        return value

    @field_validator("tax_deduction_rate_percent")
    @classmethod
    def validate_tax_deduction_rate(cls, value: float) -> float:
        if value <= 0 or value > 100:
            raise ValueError("tax_deduction_rate_percent must be in (0, 100]")
        return value

    @property
    def cors_origins(self) -> list[str]:
        if not self.cors_origins_raw:
            return []
        return [origin.strip() for origin in self.cors_origins_raw.split(",") if origin.strip()]

    def default_tenant(self) -> TenantContext:
        return TenantContext(
            currency=self.default_currency,
            vat_rate_percent=self.default_vat_rate_percent,
            tax_deduction_enabled=self.default_tax_deduction_enabled,
            tax_deduction_rate_percent=self.tax_deduction_rate_percent,
        )


settings = Settings()
