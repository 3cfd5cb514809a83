"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "restohub API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    database_url: str = getenv("DATABASE_URL", "sqlite:///./restohub.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "1440"))
    cors_allow_origins: list[str] = [origin.strip() for origin in getenv("CORS_ALLOW_ORIGINS", "*").split(",")]

    momo_partner_code: str = getenv("MOMO_PARTNER_CODE", "")
    momo_access_key: str = getenv("MOMO_ACCESS_KEY", "")
    momo_secret_key: str = getenv("MOMO_SECRET_KEY", "")
    momo_endpoint: str = getenv("MOMO_ENDPOINT", "https://test-payment.momo.vn/v2/gateway/api/create")
    momo_return_url: str = getenv("MOMO_RETURN_URL", "")
    momo_ipn_url: str = getenv("MOMO_IPN_URL", "")
    vcb_merchant_id: str = getenv("VCB_MERCHANT_ID", "")
    vcb_api_key: str = getenv("VCB_API_KEY", "")
    vcb_endpoint: str = getenv("VCB_ENDPOINT", "https://api.vietcombank.com.vn/payment/v1")
    vcb_return_url: str = getenv("VCB_RETURN_URL", "")
    vcb_cancel_url: str = getenv("VCB_CANCEL_URL", "")
    payment_timeout_seconds: float = float(getenv("PAYMENT_TIMEOUT_SECONDS", "15"))

    guest_auto_complete_seconds: int = int(getenv("GUEST_AUTO_COMPLETE_SECONDS", "15"))
    job_sweep_enabled: bool = getenv("JOB_SWEEP_ENABLED", "1") == "1"
    job_sweep_interval_seconds: float = float(getenv("JOB_SWEEP_INTERVAL_SECONDS", "5"))

    media_root: str = getenv("MEDIA_ROOT", "./media")
    media_url: str = getenv("MEDIA_URL", "/media")

    manager_email: str = getenv("MANAGER_EMAIL", "")
    manager_password: str = getenv("MANAGER_PASSWORD", "")
    manager_name: str = getenv("MANAGER_NAME", "Manager")

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() in {"prod", "production"}


settings: Settings = Settings()
