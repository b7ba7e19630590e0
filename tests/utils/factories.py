"""Test data factories using Faker."""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from faker import Faker

from swapstay.models.listing import Listing
from swapstay.models.swap_request import (
    DateRange,
    MatchingFactors,
    RequestStatus,
    RequestType,
    SwapRequest,
)
from swapstay.models.user import User

fake = Faker()


def create_user(user_id: Optional[str] = None, university: str = "Stanford University", **overrides) -> User:
    """Create a test user."""
    data = {
        "user_id": user_id or fake.uuid4().replace("-", ""),
        "full_name": fake.name(),
        "email": f"{fake.user_name()}@{fake.domain_word()}.edu",
        "university": university,
    }
    data.update(overrides)
    return User(**data)


def create_listing(owner_id: Optional[str] = None, **overrides) -> Listing:
    """Create a test listing available for the summer of 2025."""
    data = {
        "listing_id": fake.uuid4().replace("-", ""),
        "owner_id": owner_id or fake.uuid4().replace("-", ""),
        "title": fake.sentence(nb_words=5),
        "property_type": "APARTMENT",
        "bedrooms": 1,
        "bathrooms": 1,
        "near_university": "Stanford University",
        "amenities": {},
        "available_from": date(2025, 6, 1),
        "available_to": date(2025, 8, 31),
        "rent_price": fake.random_int(min=800, max=3000),
    }
    data.update(overrides)
    return Listing(**data)


def create_swap_request(
    requester_id: str = "user-requester",
    listing_owner_id: str = "user-owner",
    target_listing_id: str = "listing-target",
    status: RequestStatus = RequestStatus.PENDING,
    created_at: Optional[datetime] = None,
    compatibility_score: int = 75,
    **overrides,
) -> SwapRequest:
    """Create a stored-looking RENT request without going through the service."""
    created_at = created_at or datetime(2025, 5, 1, 12, 0, tzinfo=timezone.utc)
    data = {
        "request_id": fake.uuid4().replace("-", ""),
        "request_type": RequestType.RENT,
        "requester_id": requester_id,
        "listing_owner_id": listing_owner_id,
        "target_listing_id": target_listing_id,
        "requested_dates": DateRange(start_date=date(2025, 6, 1), end_date=date(2025, 7, 1)),
        "message": fake.sentence(),
        "proposed_price": 1000.0,
        "status": status,
        "compatibility_score": compatibility_score,
        "matching_factors": MatchingFactors(overall_score=compatibility_score),
        "expires_at": created_at + timedelta(days=7),
        "created_at": created_at,
        "updated_at": created_at,
    }
    data.update(overrides)
    return SwapRequest(**data)
