"""Supabase-backed stores.

The swap_requests table is expected to carry a partial unique index on
(requester_id, target_listing_id) WHERE status = 'PENDING'; inserts that
violate it surface as DuplicatePendingRequestError.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel
from supabase import create_client, Client
from supabase.client import ClientOptions

from swapstay.models.conversation import Conversation
from swapstay.models.listing import Listing
from swapstay.models.swap_request import RequestStatus, SwapRequest
from swapstay.models.user import User
from swapstay.utils.errors import DuplicatePendingRequestError, StoreError
from swapstay.utils.ids import generate_id
from swapstay.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


def create_supabase_client(url: Optional[str], key: Optional[str]) -> Client:
    """Build a Supabase client with server-side session options."""
    if not url or not key:
        raise StoreError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

    options = ClientOptions(
        auto_refresh_token=False,
        persist_session=False,
    )
    client = create_client(url, key, options)
    logger.info("Supabase client initialized", supabase_url=url)
    return client


def to_db_value(value: Any) -> Any:
    """Convert models, enums and datetimes into JSON column values."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _first(result: Any) -> Optional[dict]:
    return result.data[0] if result.data else None


class SupabaseListingStore:
    def __init__(self, client: Client, table: str = "listings"):
        self.client = client
        self.table = table

    async def find_by_id(self, listing_id: str) -> Optional[Listing]:
        try:
            result = self.client.table(self.table).select("*").eq("listing_id", listing_id).execute()
        except Exception as e:
            raise StoreError(f"Failed to get listing: {e}") from e
        row = _first(result)
        return Listing.model_validate(row) if row else None

    async def find_owned_by(self, owner_id: str, listing_id: str) -> Optional[Listing]:
        try:
            result = (
                self.client.table(self.table)
                .select("*")
                .eq("listing_id", listing_id)
                .eq("owner_id", owner_id)
                .execute()
            )
        except Exception as e:
            raise StoreError(f"Failed to get owned listing: {e}") from e
        row = _first(result)
        return Listing.model_validate(row) if row else None


class SupabaseUserStore:
    def __init__(self, client: Client, table: str = "users"):
        self.client = client
        self.table = table

    async def find_by_id(self, user_id: str) -> Optional[User]:
        try:
            result = self.client.table(self.table).select("*").eq("user_id", user_id).execute()
        except Exception as e:
            raise StoreError(f"Failed to get user: {e}") from e
        row = _first(result)
        return User.model_validate(row) if row else None


class SupabaseConversationStore:
    def __init__(self, client: Client, table: str = "conversations"):
        self.client = client
        self.table = table

    async def find_by_participant_pair(self, user_a: str, user_b: str) -> Optional[Conversation]:
        try:
            result = (
                self.client.table(self.table)
                .select("*")
                .contains("participants", [user_a, user_b])
                .execute()
            )
        except Exception as e:
            raise StoreError(f"Failed to find conversation: {e}") from e

        for row in result.data or []:
            conversation = Conversation.model_validate(row)
            if conversation.has_participants(user_a, user_b):
                return conversation
        return None

    async def create(self, participants: list[str], listing_id: Optional[str] = None) -> Conversation:
        conversation = Conversation(
            conversation_id=generate_id(),
            participants=list(participants),
            listing_id=listing_id,
        )
        try:
            result = self.client.table(self.table).insert(conversation.model_dump(mode="json")).execute()
        except Exception as e:
            raise StoreError(f"Failed to create conversation: {e}") from e

        row = _first(result)
        if row is None:
            raise StoreError("Failed to create conversation: no data returned")
        return Conversation.model_validate(row)


class SupabaseSwapRequestStore:
    def __init__(self, client: Client, table: str = "swap_requests"):
        self.client = client
        self.table = table

    async def insert(self, request: SwapRequest) -> SwapRequest:
        try:
            result = self.client.table(self.table).insert(request.to_record()).execute()
        except Exception as e:
            if "duplicate key" in str(e).lower():
                raise DuplicatePendingRequestError(
                    "A pending request already exists for this listing"
                ) from e
            raise StoreError(f"Failed to create swap request: {e}") from e

        row = _first(result)
        if row is None:
            raise StoreError("Failed to create swap request: no data returned")
        return SwapRequest.model_validate(row)

    def _filtered_select(self, filters: dict[str, Any]):
        query = self.client.table(self.table).select("*")
        for field, value in filters.items():
            query = query.eq(field, to_db_value(value))
        return query

    async def find_by_id(self, request_id: str) -> Optional[SwapRequest]:
        return await self.find_one(request_id=request_id)

    async def find_one(self, **filters: Any) -> Optional[SwapRequest]:
        try:
            result = self._filtered_select(filters).limit(1).execute()
        except Exception as e:
            raise StoreError(f"Failed to get swap request: {e}") from e
        row = _first(result)
        return SwapRequest.model_validate(row) if row else None

    async def find_many(self, **filters: Any) -> list[SwapRequest]:
        try:
            result = self._filtered_select(filters).execute()
        except Exception as e:
            raise StoreError(f"Failed to list swap requests: {e}") from e
        return [SwapRequest.model_validate(row) for row in result.data or []]

    async def update_if_pending(
        self, request_id: str, updates: dict[str, Any], now: datetime
    ) -> Optional[SwapRequest]:
        payload = {field: to_db_value(value) for field, value in updates.items()}
        try:
            # The status/expiry filters make this a single conditional UPDATE.
            result = (
                self.client.table(self.table)
                .update(payload)
                .eq("request_id", request_id)
                .eq("status", RequestStatus.PENDING.value)
                .gt("expires_at", now.isoformat())
                .execute()
            )
        except Exception as e:
            raise StoreError(f"Failed to update swap request: {e}") from e
        row = _first(result)
        return SwapRequest.model_validate(row) if row else None

    async def attach_conversation(self, request_id: str, conversation_id: str) -> Optional[SwapRequest]:
        try:
            result = (
                self.client.table(self.table)
                .update({"conversation_id": conversation_id})
                .eq("request_id", request_id)
                .execute()
            )
        except Exception as e:
            raise StoreError(f"Failed to link conversation: {e}") from e
        row = _first(result)
        return SwapRequest.model_validate(row) if row else None

    async def expire_if_overdue(self, request_id: str, now: datetime) -> bool:
        try:
            result = (
                self.client.table(self.table)
                .update({"status": RequestStatus.EXPIRED.value, "updated_at": now.isoformat()})
                .eq("request_id", request_id)
                .eq("status", RequestStatus.PENDING.value)
                .lte("expires_at", now.isoformat())
                .execute()
            )
        except Exception as e:
            raise StoreError(f"Failed to expire swap request: {e}") from e
        return bool(result.data)

    async def expire_pending(self, now: datetime) -> int:
        try:
            result = (
                self.client.table(self.table)
                .update({"status": RequestStatus.EXPIRED.value, "updated_at": now.isoformat()})
                .eq("status", RequestStatus.PENDING.value)
                .lt("expires_at", now.isoformat())
                .execute()
            )
        except Exception as e:
            raise StoreError(f"Failed to expire swap requests: {e}") from e
        return len(result.data or [])
