"""Supabase client configuration."""
from typing import Optional
import logging
from app.config.settings import settings

# Global client instances
_supabase_client: Optional[object] = None
_supabase_service_client: Optional[object] = None

logger = logging.getLogger(__name__)


def get_supabase_client():
    """
    Get Supabase client for user-authenticated requests.
    This client uses the anon key and is only used to validate access tokens.
    """
    global _supabase_client

    if _supabase_client is None:
        try:
            from supabase import create_client

            SUPABASE_URL = settings.SUPABASE_URL
            SUPABASE_ANON_KEY = settings.SUPABASE_KEY

            if not SUPABASE_URL or not SUPABASE_ANON_KEY:
                raise ValueError("Supabase credentials missing in .env file")

            _supabase_client = create_client(SUPABASE_URL, SUPABASE_ANON_KEY)
            logger.info("Supabase client (anon) initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise

    return _supabase_client


def get_supabase_service_client():
    """
    Get Supabase client with service role for server-side table access.
    This bypasses RLS; every caller must already have passed an access guard.
    """
    global _supabase_service_client

    if _supabase_service_client is None:
        try:
            from supabase import create_client

            SUPABASE_URL = settings.SUPABASE_URL
            SUPABASE_SERVICE_KEY = settings.SUPABASE_SERVICE_ROLE_KEY

            if not SUPABASE_URL or not SUPABASE_SERVICE_KEY:
                raise ValueError("Supabase service role key missing in .env file")

            _supabase_service_client = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
            logger.info("Supabase service client initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize Supabase service client: {e}")
            raise

    return _supabase_service_client


def test_supabase_connection() -> bool:
    """
    Test Supabase connection.
    Returns True if connection is successful, False otherwise.
    """
    try:
        client = get_supabase_service_client()
        client.table("categories").select("id").limit(1).execute()
        logger.info("Supabase connection test successful")
        return True

    except Exception as e:
        logger.error(f"Supabase connection test failed: {e}")
        return False
