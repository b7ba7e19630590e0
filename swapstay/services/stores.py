"""Storage interfaces the swap request service depends on.

Implementations live in ``memory_store`` (local runs, tests) and
``supabase_client`` (production).
"""

from datetime import datetime
from typing import Any, Optional, Protocol

from swapstay.models.conversation import Conversation
from swapstay.models.listing import Listing
from swapstay.models.swap_request import SwapRequest
from swapstay.models.user import User


class ListingStore(Protocol):
    async def find_by_id(self, listing_id: str) -> Optional[Listing]: ...

    async def find_owned_by(self, owner_id: str, listing_id: str) -> Optional[Listing]: ...


class UserStore(Protocol):
    async def find_by_id(self, user_id: str) -> Optional[User]: ...


class ConversationStore(Protocol):
    async def find_by_participant_pair(self, user_a: str, user_b: str) -> Optional[Conversation]: ...

    async def create(self, participants: list[str], listing_id: Optional[str] = None) -> Conversation: ...


class SwapRequestStore(Protocol):
    async def insert(self, request: SwapRequest) -> SwapRequest:
        """Persist a new request.

        Raises DuplicatePendingRequestError if a PENDING request already
        exists for the same requester and target listing.
        """
        ...

    async def find_by_id(self, request_id: str) -> Optional[SwapRequest]: ...

    async def find_one(self, **filters: Any) -> Optional[SwapRequest]: ...

    async def find_many(self, **filters: Any) -> list[SwapRequest]: ...

    async def update_if_pending(
        self, request_id: str, updates: dict[str, Any], now: datetime
    ) -> Optional[SwapRequest]:
        """Apply updates only if the request is PENDING and unexpired at ``now``.

        Returns the updated request, or None if the condition no longer held.
        """
        ...

    async def attach_conversation(self, request_id: str, conversation_id: str) -> Optional[SwapRequest]:
        """Set the conversation of a stored request; None if it is missing."""
        ...

    async def expire_if_overdue(self, request_id: str, now: datetime) -> bool:
        """Write EXPIRED to one request if it is PENDING with expires_at <= now."""
        ...

    async def expire_pending(self, now: datetime) -> int:
        """Mark every PENDING request with expires_at < now as EXPIRED."""
        ...
