"""
Application Configuration — Environment & Settings
Centralizes all config from .env with Pydantic Settings for validation.
"""
from dataclasses import dataclass
from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings

# Resolve paths relative to backend/ directory
BASE_DIR = Path(__file__).resolve().parent.parent

JAZZCASH_SANDBOX_URL = "https://sandbox.jazzcash.com.pk/CustomerPortal/transactionmanagement/merchantform/"
JAZZCASH_LIVE_URL = "https://payments.jazzcash.com.pk/CustomerPortal/transactionmanagement/merchantform/"


@dataclass(frozen=True)
class GatewayConfig:
    """Merchant credentials handed to the signer/verifier.

    The integrity salt is excluded from repr so it can't leak into logs.
    """

    merchant_id: str
    password: str
    integrity_salt: str
    environment: str = "sandbox"
    return_url: str = ""
    bill_reference_prefix: str = "CAMP_"

    def __repr__(self) -> str:
        return f"GatewayConfig(merchant_id={self.merchant_id!r}, environment={self.environment!r})"

    @property
    def post_url(self) -> str:
        return JAZZCASH_LIVE_URL if self.environment == "live" else JAZZCASH_SANDBOX_URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # --- Core ---
    APP_NAME: str = "Community Donations Payment API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # --- Database ---
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'data' / 'donations.db'}"

    # --- Security ---
    CORS_ORIGINS: list[str] = ["*"]

    # --- JazzCash ---
    JAZZCASH_MERCHANT_ID: str = "MC12345"
    JAZZCASH_PASSWORD: str = ""
    JAZZCASH_INTEGRITY_SALT: str = ""
    JAZZCASH_ENVIRONMENT: str = "sandbox"   # sandbox | live
    JAZZCASH_RETURN_URL: str = "http://localhost:8000/api/payment/callback"
    BILL_REFERENCE_PREFIX: str = "CAMP_"

    # --- Reconciliation ---
    RECONCILE_MAX_ATTEMPTS: int = 3
    RECONCILE_RETRY_WAIT_SECONDS: float = 0.5

    # --- Logging ---
    LOG_DIR: str = str(BASE_DIR / "logs")
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True

    def gateway_config(self) -> GatewayConfig:
        """Build the explicit gateway configuration injected into the core."""
        return GatewayConfig(
            merchant_id=self.JAZZCASH_MERCHANT_ID,
            password=self.JAZZCASH_PASSWORD,
            integrity_salt=self.JAZZCASH_INTEGRITY_SALT,
            environment=self.JAZZCASH_ENVIRONMENT,
            return_url=self.JAZZCASH_RETURN_URL,
            bill_reference_prefix=self.BILL_REFERENCE_PREFIX,
        )


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
