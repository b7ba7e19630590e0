"""Shared pytest fixtures and configuration."""

import os
import pytest
from datetime import date
from freezegun import freeze_time

# Set test environment variables before any swapstay config is read
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LOG_FORMAT", "text")

from swapstay.models.swap_request import CreateSwapRequestInput, DateRange, RequestType
from swapstay.services.container import set_service
from swapstay.services.memory_store import (
    InMemoryConversationStore,
    InMemoryListingStore,
    InMemorySwapRequestStore,
    InMemoryUserStore,
)
from swapstay.services.swap_requests import SwapRequestService
from tests.utils.factories import create_listing, create_user
from tests.utils.helpers import FROZEN_NOW


@pytest.fixture
def requester():
    """Stanford student making requests."""
    return create_user(user_id="user-requester", university="Stanford University")


@pytest.fixture
def owner():
    """Owner of the target listing."""
    return create_user(user_id="user-owner", university="UCLA")


@pytest.fixture
def other_user():
    return create_user(user_id="user-other", university="Texas Tech University")


@pytest.fixture
def requester_listing(requester):
    """L1: the listing the requester offers in a swap."""
    return create_listing(
        listing_id="listing-offered",
        owner_id=requester.user_id,
        property_type="APARTMENT",
        bedrooms=2,
        bathrooms=1,
        near_university="Stanford University",
        amenities={"wifi": True, "laundry": True, "pool": False},
    )


@pytest.fixture
def target_listing(owner):
    """L2: the listing being requested, available all summer."""
    return create_listing(
        listing_id="listing-target",
        owner_id=owner.user_id,
        property_type="APARTMENT",
        bedrooms=2,
        bathrooms=1,
        near_university="Stanford University",
        amenities={"wifi": True, "laundry": True, "gym": False},
        available_from=date(2025, 6, 1),
        available_to=date(2025, 8, 31),
    )


@pytest.fixture
def second_target_listing(owner):
    """Another listing from the same owner."""
    return create_listing(
        listing_id="listing-target-2",
        owner_id=owner.user_id,
        property_type="HOUSE",
        bedrooms=3,
        bathrooms=2,
        near_university="UCLA",
        available_from=date(2025, 6, 1),
        available_to=date(2025, 8, 31),
    )


@pytest.fixture
def listing_store(requester_listing, target_listing, second_target_listing):
    return InMemoryListingStore([requester_listing, target_listing, second_target_listing])


@pytest.fixture
def user_store(requester, owner, other_user):
    return InMemoryUserStore([requester, owner, other_user])


@pytest.fixture
def conversation_store():
    return InMemoryConversationStore()


@pytest.fixture
def request_store():
    return InMemorySwapRequestStore()


@pytest.fixture
def service(request_store, listing_store, user_store, conversation_store):
    """Swap request service over seeded in-memory stores."""
    return SwapRequestService(
        requests=request_store,
        listings=listing_store,
        users=user_store,
        conversations=conversation_store,
        ttl_days=7,
    )


@pytest.fixture
def installed_service(service):
    """Make the HTTP handlers use the in-memory service."""
    set_service(service)
    yield service
    set_service(None)


@pytest.fixture
def summer_dates():
    return DateRange(start_date=date(2025, 6, 1), end_date=date(2025, 7, 1))


@pytest.fixture
def swap_payload(requester_listing, target_listing, summer_dates):
    return CreateSwapRequestInput(
        request_type=RequestType.SWAP,
        target_listing_id=target_listing.listing_id,
        requester_listing_id=requester_listing.listing_id,
        requested_dates=summer_dates,
        message="Hi! I'd love to swap my Palo Alto place for yours this summer.",
    )


@pytest.fixture
def rent_payload(target_listing, summer_dates):
    return CreateSwapRequestInput(
        request_type=RequestType.RENT,
        target_listing_id=target_listing.listing_id,
        requested_dates=summer_dates,
        message="Could I rent your place for June?",
        proposed_price=1200.0,
    )


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time(FROZEN_NOW) as frozen_time:
        yield frozen_time
