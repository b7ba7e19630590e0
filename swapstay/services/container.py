"""Builds the swap request service from configuration."""

from typing import Optional

from swapstay.config import SwapStayConfig
from swapstay.services.memory_store import (
    InMemoryConversationStore,
    InMemoryListingStore,
    InMemorySwapRequestStore,
    InMemoryUserStore,
)
from swapstay.services.swap_requests import SwapRequestService
from swapstay.utils.errors import StoreError
from swapstay.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


def build_memory_service(ttl_days: Optional[int] = None) -> SwapRequestService:
    """Service over empty in-memory stores."""
    return SwapRequestService(
        requests=InMemorySwapRequestStore(),
        listings=InMemoryListingStore(),
        users=InMemoryUserStore(),
        conversations=InMemoryConversationStore(),
        ttl_days=ttl_days if ttl_days is not None else SwapStayConfig.SWAP_REQUEST_TTL_DAYS,
    )


def build_supabase_service(config: type[SwapStayConfig] = SwapStayConfig) -> SwapRequestService:
    # Imported here so memory-only deployments never load the Supabase SDK
    from swapstay.services.supabase_client import (
        SupabaseConversationStore,
        SupabaseListingStore,
        SupabaseSwapRequestStore,
        SupabaseUserStore,
        create_supabase_client,
    )

    client = create_supabase_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE_KEY)
    return SwapRequestService(
        requests=SupabaseSwapRequestStore(client, config.SWAP_REQUESTS_TABLE),
        listings=SupabaseListingStore(client, config.LISTINGS_TABLE),
        users=SupabaseUserStore(client, config.USERS_TABLE),
        conversations=SupabaseConversationStore(client, config.CONVERSATIONS_TABLE),
        ttl_days=config.SWAP_REQUEST_TTL_DAYS,
    )


def build_swap_request_service(config: type[SwapStayConfig] = SwapStayConfig) -> SwapRequestService:
    """Wire stores for the configured backend."""
    backend = config.STORE_BACKEND
    logger.info("Building swap request service", store_backend=backend)

    if backend == "memory":
        return build_memory_service(config.SWAP_REQUEST_TTL_DAYS)
    if backend == "supabase":
        return build_supabase_service(config)
    raise StoreError(f"Unknown STORE_BACKEND: {backend}")


_service: Optional[SwapRequestService] = None


def get_service() -> SwapRequestService:
    """Process-wide service for HTTP handlers, built on first use."""
    global _service
    if _service is None:
        _service = build_swap_request_service()
    return _service


def set_service(service: Optional[SwapRequestService]) -> None:
    """Replace (or with None, reset) the handlers' service."""
    global _service
    _service = service
