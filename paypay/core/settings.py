from typing import Literal

from dotenv import load_dotenv
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from paypay.errors import ConfigurationError
from paypay.payments.keys import load_private_key, load_public_key

# Load .env file automatically
load_dotenv()

DEFAULT_BASE_URL = "https://gateway.paypayafrica.com/recv.do"


class Settings(BaseSettings):
    """PayPay client settings loaded from environment variables."""

    # Merchant credentials
    PAYPAY_PARTNER_ID: str
    # Merchant private key: signs requests, decrypts gateway content
    PAYPAY_PRIVATE_KEY: str
    # Gateway public key: encrypts biz_content, verifies responses
    PAYPAY_PUBLIC_KEY: str

    # Gateway protocol
    PAYPAY_BASE_URL: str = DEFAULT_BASE_URL
    PAYPAY_VERSION: str = "1.0"
    PAYPAY_CHARSET: str = "UTF-8"
    PAYPAY_FORMAT: str = "JSON"
    PAYPAY_LANGUAGE: str = "pt"
    PAYPAY_TIMEOUT: float = 30.0

    # App settings
    ENVIRONMENT: Literal["development", "test", "production"] = "development"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, frozen=True, extra="ignore"
    )

    def __init__(self, **kwargs):
        try:
            super().__init__(**kwargs)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid PayPay configuration: {exc}") from exc

    @field_validator("PAYPAY_PARTNER_ID")
    @classmethod
    def _partner_id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("partner id must not be blank")
        return value.strip()

    @field_validator("PAYPAY_PRIVATE_KEY")
    @classmethod
    def _private_key_loads(cls, value: str) -> str:
        try:
            load_private_key(value)
        except ConfigurationError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @field_validator("PAYPAY_PUBLIC_KEY")
    @classmethod
    def _public_key_loads(cls, value: str) -> str:
        try:
            load_public_key(value)
        except ConfigurationError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @field_validator("PAYPAY_TIMEOUT")
    @classmethod
    def _timeout_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value
