"""Swap request models."""

from enum import Enum
from typing import Any, Optional
from datetime import date, datetime
from pydantic import BaseModel, Field


class RequestType(str, Enum):
    """SWAP offers a listing in exchange; RENT offers money."""
    SWAP = "SWAP"
    RENT = "RENT"


class RequestStatus(str, Enum):
    """Swap request lifecycle states. Everything but PENDING is terminal."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"

    @property
    def is_terminal(self) -> bool:
        return self is not RequestStatus.PENDING


class ResponseAction(str, Enum):
    """Owner decisions on a pending request."""
    ACCEPT = "ACCEPT"
    DECLINE = "DECLINE"

    @property
    def resulting_status(self) -> RequestStatus:
        if self is ResponseAction.ACCEPT:
            return RequestStatus.ACCEPTED
        return RequestStatus.DECLINED


class RequestDirection(str, Enum):
    ALL = "all"
    SENT = "sent"
    RECEIVED = "received"


class DateRange(BaseModel):
    """Requested stay. Ordering is checked at request creation, not here."""
    start_date: date = Field(..., description="First night")
    end_date: date = Field(..., description="Departure day")

    @property
    def nights(self) -> int:
        return (self.end_date - self.start_date).days


class MatchingFactors(BaseModel):
    """Compatibility sub-scores, each 0-100."""
    date_overlap: int = Field(0, ge=0, le=100)
    distance_match: int = Field(0, ge=0, le=100)
    property_type_match: int = Field(0, ge=0, le=100)
    university_match: int = Field(0, ge=0, le=100)
    overall_score: int = Field(0, ge=0, le=100)


class CounterOffer(BaseModel):
    """Owner's alternative terms."""
    price: Optional[float] = Field(None, gt=0)
    dates: Optional[DateRange] = None


class OwnerResponse(BaseModel):
    """Owner's accept/decline reply, written once."""
    message: str = Field(default="", max_length=1000)
    responded_at: datetime = Field(..., description="When the owner responded")
    counter_offer: Optional[CounterOffer] = None


class SwapRequest(BaseModel):
    """A proposal from a requester to a listing owner."""
    request_id: str = Field(..., description="Swap request ID (text)")
    request_type: RequestType = Field(..., description="SWAP or RENT")
    requester_id: str = Field(..., description="Requesting user ID")
    listing_owner_id: str = Field(..., description="Owner of the target listing")
    target_listing_id: str = Field(..., description="Listing being requested")
    requester_listing_id: Optional[str] = Field(None, description="Listing offered in exchange (SWAP only)")
    requested_dates: DateRange
    message: str = Field(..., max_length=1000)
    proposed_price: Optional[float] = Field(None, gt=0, description="Offered price (RENT only)")
    status: RequestStatus = Field(default=RequestStatus.PENDING)
    compatibility_score: int = Field(..., ge=0, le=100)
    matching_factors: MatchingFactors
    owner_response: Optional[OwnerResponse] = None
    expires_at: datetime = Field(..., description="Creation time plus the request TTL")
    conversation_id: Optional[str] = Field(None, description="Requester/owner message thread")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def involves(self, user_id: str) -> bool:
        return user_id in (self.requester_id, self.listing_owner_id)

    def to_record(self) -> dict[str, Any]:
        """JSON-safe dict for storage and API responses."""
        return self.model_dump(mode="json")


class CreateSwapRequestInput(BaseModel):
    """Raw creation payload. Presence rules live in validate_create_input."""
    request_type: Optional[RequestType] = None
    target_listing_id: Optional[str] = None
    requester_listing_id: Optional[str] = None
    requested_dates: Optional[DateRange] = None
    message: Optional[str] = None
    proposed_price: Optional[float] = None


class UserRequestsSummary(BaseModel):
    """A user's sent and received requests with counters."""
    requests: list[SwapRequest] = Field(default_factory=list)
    sent_count: int = 0
    received_count: int = 0
    pending_sent: int = 0
    pending_received: int = 0


class RequestStatistics(BaseModel):
    total_requests: int = 0
    sent_requests: int = 0
    received_requests: int = 0
    accepted_requests: int = 0
    pending_requests: int = 0
