"""Service configuration read from environment variables."""

import os


class SwapStayConfig:
    """Environment-backed settings for the swap request service."""

    SWAP_REQUEST_TTL_DAYS = int(os.environ.get("SWAP_REQUEST_TTL_DAYS", "7"))
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "supabase").lower()

    SUPABASE_URL = os.environ.get("SUPABASE_URL")
    SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

    SWAP_REQUESTS_TABLE = os.environ.get("SWAP_REQUESTS_TABLE", "swap_requests")
    LISTINGS_TABLE = os.environ.get("LISTINGS_TABLE", "listings")
    USERS_TABLE = os.environ.get("USERS_TABLE", "users")
    CONVERSATIONS_TABLE = os.environ.get("CONVERSATIONS_TABLE", "conversations")

    # Upstream auth proxy sets this header; verifying identity happens there
    USER_ID_HEADER = os.environ.get("USER_ID_HEADER", "X-User-Id")
    # Bearer token expected on the cleanup cron endpoint when set
    CRON_SECRET = os.environ.get("CRON_SECRET")

    MAX_MESSAGE_LENGTH = 1000
