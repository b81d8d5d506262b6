from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import logging

from app.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings"""

    # API
    PORT: int = 3000
    API_VERSION: str = "1.0.0"

    # Environment
    NODE_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS, comma separated
    ALLOWED_ORIGINS: str = "*"

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    WAITLIST_TABLE: str = "WaitlistEntry"
    STORAGE_TIMEOUT_SECONDS: float = 10.0

    # Brevo
    BREVO_API_KEY: str = ""
    BREVO_BASE_URL: str = "https://api.brevo.com/v3"
    SENDER_EMAIL: str = "hello@marketplace.example.com"
    SENDER_NAME: str = "Marketplace"
    NOTIFICATION_TIMEOUT_SECONDS: float = 15.0

    # Notifications
    OPERATOR_EMAIL: str = "team@marketplace.example.com"
    NOTIFICATION_TEST_MODE: bool = False
    NOTIFICATION_TEST_EMAIL: str = "test@marketplace.example.com"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


def check_environment_variables(app_settings: Settings) -> bool:
    """Check that every credential needed to serve traffic is present.

    Raises ConfigurationError naming all missing variables.
    """
    logger.info("🔍 Checking environment configuration...")

    required_vars = {
        'BREVO_API_KEY': app_settings.BREVO_API_KEY,
        'SUPABASE_URL': app_settings.SUPABASE_URL,
        'SUPABASE_SERVICE_ROLE_KEY': app_settings.SUPABASE_SERVICE_ROLE_KEY,
    }

    missing_vars = []
    for var_name, var_value in required_vars.items():
        if not var_value:
            missing_vars.append(var_name)
        else:
            logger.info(f"✅ {var_name}: set")

    if missing_vars:
        error_msg = f"❌ Missing required environment variables: {', '.join(missing_vars)}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg)

    if app_settings.NOTIFICATION_TEST_MODE:
        logger.warning(
            f"⚠️ Notification test mode is ON, all emails go to {app_settings.NOTIFICATION_TEST_EMAIL}"
        )

    logger.info("✅ Environment configuration check passed")
    return True


settings = Settings()
