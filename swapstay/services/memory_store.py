"""In-process stores for local development and tests.

Each store guards its data with a lock so that check-then-write sequences
(pending uniqueness, conditional transitions) are atomic.
"""

import threading
from datetime import datetime
from typing import Any, Iterable, Optional

from swapstay.models.conversation import Conversation
from swapstay.models.listing import Listing
from swapstay.models.swap_request import RequestStatus, SwapRequest
from swapstay.models.user import User
from swapstay.services.expiry import utcnow
from swapstay.utils.errors import DuplicatePendingRequestError
from swapstay.utils.ids import generate_id
from swapstay.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


def _matches(record: Any, filters: dict[str, Any]) -> bool:
    return all(getattr(record, field) == value for field, value in filters.items())


class InMemoryListingStore:
    def __init__(self, listings: Iterable[Listing] = ()):
        self._listings: dict[str, Listing] = {}
        for listing in listings:
            self.add(listing)

    def add(self, listing: Listing) -> None:
        self._listings[listing.listing_id] = listing

    async def find_by_id(self, listing_id: str) -> Optional[Listing]:
        return self._listings.get(listing_id)

    async def find_owned_by(self, owner_id: str, listing_id: str) -> Optional[Listing]:
        listing = self._listings.get(listing_id)
        if listing is None or listing.owner_id != owner_id:
            return None
        return listing


class InMemoryUserStore:
    def __init__(self, users: Iterable[User] = ()):
        self._users: dict[str, User] = {}
        for user in users:
            self.add(user)

    def add(self, user: User) -> None:
        self._users[user.user_id] = user

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)


class InMemoryConversationStore:
    def __init__(self):
        self._conversations: dict[str, Conversation] = {}
        self._lock = threading.Lock()

    async def find_by_participant_pair(self, user_a: str, user_b: str) -> Optional[Conversation]:
        with self._lock:
            for conversation in self._conversations.values():
                if conversation.has_participants(user_a, user_b):
                    return conversation
        return None

    async def create(self, participants: list[str], listing_id: Optional[str] = None) -> Conversation:
        conversation = Conversation(
            conversation_id=generate_id(),
            participants=list(participants),
            listing_id=listing_id,
        )
        with self._lock:
            self._conversations[conversation.conversation_id] = conversation
        return conversation

    def __len__(self) -> int:
        return len(self._conversations)


class InMemorySwapRequestStore:
    def __init__(self):
        self._requests: dict[str, SwapRequest] = {}
        self._lock = threading.Lock()

    async def insert(self, request: SwapRequest) -> SwapRequest:
        now = request.created_at or utcnow()
        with self._lock:
            for request_id, existing in list(self._requests.items()):
                if (
                    existing.status != RequestStatus.PENDING
                    or existing.requester_id != request.requester_id
                    or existing.target_listing_id != request.target_listing_id
                ):
                    continue
                if existing.expires_at <= now:
                    # Overdue but not yet swept
                    self._requests[request_id] = existing.model_copy(
                        update={"status": RequestStatus.EXPIRED, "updated_at": now}
                    )
                    continue
                raise DuplicatePendingRequestError(
                    f"Pending request {existing.request_id} already exists for this listing"
                )
            self._requests[request.request_id] = request.model_copy(deep=True)
        return request

    async def find_by_id(self, request_id: str) -> Optional[SwapRequest]:
        with self._lock:
            request = self._requests.get(request_id)
            return request.model_copy(deep=True) if request else None

    async def find_one(self, **filters: Any) -> Optional[SwapRequest]:
        with self._lock:
            for request in self._requests.values():
                if _matches(request, filters):
                    return request.model_copy(deep=True)
        return None

    async def find_many(self, **filters: Any) -> list[SwapRequest]:
        with self._lock:
            return [
                request.model_copy(deep=True)
                for request in self._requests.values()
                if _matches(request, filters)
            ]

    async def update_if_pending(
        self, request_id: str, updates: dict[str, Any], now: datetime
    ) -> Optional[SwapRequest]:
        with self._lock:
            current = self._requests.get(request_id)
            if current is None or current.status != RequestStatus.PENDING or now >= current.expires_at:
                return None
            updated = current.model_copy(update=updates, deep=True)
            self._requests[request_id] = updated
            return updated.model_copy(deep=True)

    async def attach_conversation(self, request_id: str, conversation_id: str) -> Optional[SwapRequest]:
        with self._lock:
            current = self._requests.get(request_id)
            if current is None:
                return None
            updated = current.model_copy(update={"conversation_id": conversation_id}, deep=True)
            self._requests[request_id] = updated
            return updated.model_copy(deep=True)

    async def expire_if_overdue(self, request_id: str, now: datetime) -> bool:
        with self._lock:
            current = self._requests.get(request_id)
            if current is None or current.status != RequestStatus.PENDING or current.expires_at > now:
                return False
            self._requests[request_id] = current.model_copy(
                update={"status": RequestStatus.EXPIRED, "updated_at": now}
            )
            return True

    async def expire_pending(self, now: datetime) -> int:
        expired = 0
        with self._lock:
            for request_id, request in self._requests.items():
                if request.status == RequestStatus.PENDING and request.expires_at < now:
                    self._requests[request_id] = request.model_copy(
                        update={"status": RequestStatus.EXPIRED, "updated_at": now}
                    )
                    expired += 1
        if expired:
            logger.debug("Expired pending requests in memory store", expired=expired)
        return expired

    def __len__(self) -> int:
        return len(self._requests)
