"""Swap request lifecycle: creation, owner responses, cancellation and expiry.

State machine::

    PENDING -> ACCEPTED | DECLINED   (listing owner, via respond)
    PENDING -> CANCELLED             (requester, via cancel)
    PENDING -> EXPIRED               (sweep_expired, or lazily once expires_at passes)

Every precondition is checked before anything is written, and transitions
are committed with a conditional update so two racing calls cannot both win.
"""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from swapstay.config import SwapStayConfig
from swapstay.models.conversation import Conversation
from swapstay.models.swap_request import (
    CounterOffer,
    CreateSwapRequestInput,
    OwnerResponse,
    RequestDirection,
    RequestStatistics,
    RequestStatus,
    RequestType,
    ResponseAction,
    SwapRequest,
    UserRequestsSummary,
)
from swapstay.services import expiry
from swapstay.services.matching import calculate_compatibility_score, generate_match_insights
from swapstay.services.stores import ConversationStore, ListingStore, SwapRequestStore, UserStore
from swapstay.utils.errors import (
    ConflictError,
    DuplicatePendingRequestError,
    NotFoundError,
    StateError,
    ValidationError,
)
from swapstay.utils.ids import generate_id
from swapstay.utils.logging import get_structured_logger, mask_user_id, sanitize_message_text, timed

logger = get_structured_logger(__name__)


def validate_create_input(payload: CreateSwapRequestInput) -> None:
    """Check field presence and shape for the payload's request type."""
    if (
        payload.request_type is None
        or not payload.target_listing_id
        or payload.requested_dates is None
        or not payload.message
        or not payload.message.strip()
    ):
        raise ValidationError("Missing required fields")

    if payload.request_type == RequestType.SWAP and not payload.requester_listing_id:
        raise ValidationError("SWAP requests require a requester listing")

    if payload.request_type == RequestType.RENT:
        if payload.proposed_price is None:
            raise ValidationError("RENT requests require a proposed price")
        if payload.proposed_price <= 0:
            raise ValidationError("Proposed price must be greater than zero")

    dates = payload.requested_dates
    if dates.start_date >= dates.end_date:
        raise ValidationError("Requested start date must be before the end date")

    if len(payload.message) > SwapStayConfig.MAX_MESSAGE_LENGTH:
        raise ValidationError(
            f"Message cannot exceed {SwapStayConfig.MAX_MESSAGE_LENGTH} characters"
        )


def _newest_first(requests: list[SwapRequest]) -> list[SwapRequest]:
    return sorted(requests, key=lambda r: r.created_at or r.expires_at, reverse=True)


class SwapRequestService:
    """Drives swap requests through their lifecycle using injected stores."""

    def __init__(
        self,
        requests: SwapRequestStore,
        listings: ListingStore,
        users: UserStore,
        conversations: ConversationStore,
        ttl_days: int = SwapStayConfig.SWAP_REQUEST_TTL_DAYS,
    ):
        self.requests = requests
        self.listings = listings
        self.users = users
        self.conversations = conversations
        self.ttl_days = ttl_days

    @timed("swap_requests.create")
    async def create(self, requester_id: str, payload: CreateSwapRequestInput) -> SwapRequest:
        """Validate, score and persist a new PENDING request."""
        validate_create_input(payload)

        target_listing = await self.listings.find_by_id(payload.target_listing_id)
        if target_listing is None:
            raise NotFoundError("Target listing not found")

        if target_listing.owner_id == requester_id:
            raise ConflictError("Cannot request your own listing")

        existing = await self.requests.find_one(
            requester_id=requester_id,
            target_listing_id=target_listing.listing_id,
            status=RequestStatus.PENDING,
        )
        if existing is not None:
            if not expiry.is_expired(existing):
                raise ConflictError("You already have a pending request for this listing")
            # Lazily expired: persist that before taking its place
            await self.requests.expire_if_overdue(existing.request_id, expiry.utcnow())
            logger.info("Overdue swap request expired on create", request_id=existing.request_id)

        requester_listing = None
        if payload.request_type == RequestType.SWAP:
            requester_listing = await self.listings.find_owned_by(
                requester_id, payload.requester_listing_id
            )
            if requester_listing is None:
                raise NotFoundError("Requester listing not found or not owned by you")

        requester = await self.users.find_by_id(requester_id)
        if requester is None:
            raise NotFoundError("Requester not found")

        match = calculate_compatibility_score(
            requester_listing,
            target_listing,
            requester,
            payload.requested_dates,
            payload.request_type,
        )

        now = expiry.utcnow()
        is_swap = payload.request_type == RequestType.SWAP
        request = SwapRequest(
            request_id=generate_id(),
            request_type=payload.request_type,
            requester_id=requester_id,
            listing_owner_id=target_listing.owner_id,
            target_listing_id=target_listing.listing_id,
            requester_listing_id=payload.requester_listing_id if is_swap else None,
            requested_dates=payload.requested_dates,
            message=payload.message,
            proposed_price=None if is_swap else payload.proposed_price,
            status=RequestStatus.PENDING,
            compatibility_score=match.score,
            matching_factors=match.factors,
            expires_at=expiry.compute_expires_at(now, self.ttl_days),
            created_at=now,
            updated_at=now,
        )

        try:
            stored = await self.requests.insert(request)
        except DuplicatePendingRequestError as e:
            raise ConflictError("You already have a pending request for this listing") from e

        # Only a stored request gets a conversation
        conversation = await self._find_or_create_conversation(
            requester_id, target_listing.owner_id, target_listing.listing_id
        )
        linked = await self.requests.attach_conversation(stored.request_id, conversation.conversation_id)
        stored = linked or stored.model_copy(update={"conversation_id": conversation.conversation_id})

        logger.info(
            "Swap request created",
            request_id=stored.request_id,
            request_type=stored.request_type.value,
            requester_id=mask_user_id(requester_id),
            listing_owner_id=mask_user_id(stored.listing_owner_id),
            target_listing_id=stored.target_listing_id,
            compatibility_score=stored.compatibility_score,
            message_preview=sanitize_message_text(stored.message, max_length=100),
        )
        return stored

    async def _find_or_create_conversation(
        self, requester_id: str, owner_id: str, listing_id: str
    ) -> Conversation:
        # Any thread between the pair is reused, whichever listing started it.
        conversation = await self.conversations.find_by_participant_pair(requester_id, owner_id)
        if conversation is None:
            conversation = await self.conversations.create([requester_id, owner_id], listing_id)
            logger.debug(
                "Conversation created for swap request",
                conversation_id=conversation.conversation_id,
                listing_id=listing_id,
            )
        return conversation

    async def _get_request(self, request_id: str) -> SwapRequest:
        request = await self.requests.find_by_id(request_id)
        if request is None:
            raise NotFoundError("Request not found")
        return request

    @staticmethod
    def _ensure_pending(request: SwapRequest, now: datetime) -> None:
        """Raise StateError unless the request can still transition.

        Expiry is checked first, so a stored PENDING past its deadline
        reports as expired.
        """
        status = expiry.effective_status(request, now)
        if status == RequestStatus.EXPIRED:
            raise StateError("Request has expired", reason=StateError.EXPIRED)
        if status == RequestStatus.CANCELLED:
            raise StateError("Request has been cancelled", reason=StateError.ALREADY_RESPONDED)
        if status != RequestStatus.PENDING:
            raise StateError(
                "Request has already been responded to", reason=StateError.ALREADY_RESPONDED
            )

    async def _transition(
        self, request: SwapRequest, updates: dict[str, Any], now: datetime
    ) -> SwapRequest:
        updated = await self.requests.update_if_pending(request.request_id, updates, now)
        if updated is None:
            # Lost a race with another transition or the sweep
            fresh = await self._get_request(request.request_id)
            self._ensure_pending(fresh, now)
            raise StateError(
                "Request has already been responded to", reason=StateError.ALREADY_RESPONDED
            )
        return updated

    @timed("swap_requests.respond")
    async def respond(
        self,
        request_id: str,
        acting_user_id: str,
        action: Union[ResponseAction, str],
        message: Optional[str] = None,
        counter_offer: Union[CounterOffer, dict, None] = None,
    ) -> SwapRequest:
        """Accept or decline a pending request as its listing owner."""
        try:
            action = ResponseAction(action)
        except ValueError as e:
            raise ValidationError("Invalid action. Must be ACCEPT or DECLINE") from e

        if counter_offer is not None and not isinstance(counter_offer, CounterOffer):
            try:
                counter_offer = CounterOffer.model_validate(counter_offer)
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid counter offer: {e.errors()[0]['msg']}") from e

        if message is not None and not isinstance(message, str):
            raise ValidationError("Message must be a string")
        if message and len(message) > SwapStayConfig.MAX_MESSAGE_LENGTH:
            raise ValidationError(
                f"Message cannot exceed {SwapStayConfig.MAX_MESSAGE_LENGTH} characters"
            )

        request = await self._get_request(request_id)
        if request.listing_owner_id != acting_user_id:
            raise ConflictError(
                "Only the listing owner can respond to this request", status_code=403
            )

        now = expiry.utcnow()
        self._ensure_pending(request, now)

        status = action.resulting_status
        updated = await self._transition(
            request,
            {
                "status": status,
                "owner_response": OwnerResponse(
                    message=message or "",
                    responded_at=now,
                    counter_offer=counter_offer,
                ),
                "updated_at": now,
            },
            now,
        )

        logger.info(
            "Swap request answered",
            request_id=request_id,
            status=status.value,
            listing_owner_id=mask_user_id(acting_user_id),
            has_counter_offer=counter_offer is not None,
        )
        return updated

    @timed("swap_requests.cancel")
    async def cancel(self, request_id: str, acting_user_id: str) -> SwapRequest:
        """Withdraw a pending request as its requester."""
        request = await self._get_request(request_id)
        if request.requester_id != acting_user_id:
            raise ConflictError("Only the requester can cancel this request", status_code=403)

        now = expiry.utcnow()
        self._ensure_pending(request, now)

        updated = await self._transition(
            request,
            {"status": RequestStatus.CANCELLED, "updated_at": now},
            now,
        )
        logger.info(
            "Swap request cancelled",
            request_id=request_id,
            requester_id=mask_user_id(acting_user_id),
        )
        return updated

    @timed("swap_requests.sweep_expired")
    async def sweep_expired(self) -> int:
        """Write EXPIRED to every PENDING request past its deadline."""
        now = expiry.utcnow()
        expired = await self.requests.expire_pending(now)
        logger.info("Expired swap requests swept", expired=expired, swept_at=now.isoformat())
        return expired

    def can_respond(self, request: SwapRequest) -> bool:
        return expiry.can_respond(request)

    async def get_request(self, request_id: str, acting_user_id: str) -> tuple[SwapRequest, list[str]]:
        """Fetch a request for one of its participants, with match insights."""
        request = await self._get_request(request_id)
        if not request.involves(acting_user_id):
            raise ConflictError("Unauthorized to view this request", status_code=403)
        return request, generate_match_insights(request.matching_factors)

    async def list_user_requests(
        self, user_id: str, direction: Union[RequestDirection, str] = RequestDirection.ALL
    ) -> UserRequestsSummary:
        try:
            direction = RequestDirection(direction)
        except ValueError as e:
            raise ValidationError("type must be one of: all, sent, received") from e

        sent = await self.requests.find_many(requester_id=user_id)
        received = await self.requests.find_many(listing_owner_id=user_id)
        now = expiry.utcnow()

        if direction == RequestDirection.SENT:
            selected = sent
        elif direction == RequestDirection.RECEIVED:
            selected = received
        else:
            selected = sent + received

        def pending(requests: list[SwapRequest]) -> int:
            return sum(1 for r in requests if expiry.can_respond(r, now))

        return UserRequestsSummary(
            requests=_newest_first(selected),
            sent_count=len(sent),
            received_count=len(received),
            pending_sent=pending(sent),
            pending_received=pending(received),
        )

    async def list_listing_requests(self, listing_id: str, acting_user_id: str) -> list[SwapRequest]:
        """Requests against one of the caller's listings, best matches first."""
        listing = await self.listings.find_owned_by(acting_user_id, listing_id)
        if listing is None:
            raise NotFoundError("Listing not found or not owned by you")

        requests = await self.requests.find_many(target_listing_id=listing_id)
        requests = _newest_first(requests)
        # Stable sort keeps newest-first among equal scores
        return sorted(requests, key=lambda r: r.compatibility_score, reverse=True)

    async def request_statistics(self, user_id: str) -> RequestStatistics:
        sent = await self.requests.find_many(requester_id=user_id)
        received = await self.requests.find_many(listing_owner_id=user_id)
        everything = sent + received
        now = expiry.utcnow()

        return RequestStatistics(
            total_requests=len(everything),
            sent_requests=len(sent),
            received_requests=len(received),
            accepted_requests=sum(1 for r in everything if r.status == RequestStatus.ACCEPTED),
            pending_requests=sum(1 for r in everything if expiry.can_respond(r, now)),
        )
