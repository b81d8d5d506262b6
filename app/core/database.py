from supabase import acreate_client, AsyncClient
from app.core.config import Settings
import logging

logger = logging.getLogger(__name__)


async def init_supabase(app_settings: Settings) -> AsyncClient:
    """Create the process-wide Supabase client used by the waitlist store"""
    logger.info("🔧 Initializing Supabase connection...")
    logger.info(f"🔗 Connecting to Supabase: {app_settings.SUPABASE_URL[:50]}...")

    client = await acreate_client(
        app_settings.SUPABASE_URL,
        app_settings.SUPABASE_SERVICE_ROLE_KEY
    )

    logger.info("✅ Supabase client initialized")
    return client
