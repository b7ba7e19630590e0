"""Tests for lazy expiry helpers."""

import pytest
from datetime import datetime, timedelta, timezone
from freezegun import freeze_time

from swapstay.models.swap_request import RequestStatus
from swapstay.services import expiry
from tests.utils.factories import create_swap_request


CREATED = datetime(2025, 5, 1, 12, 0, tzinfo=timezone.utc)
DEADLINE = CREATED + timedelta(days=7)


@pytest.mark.unit
def test_compute_expires_at_adds_ttl():
    assert expiry.compute_expires_at(CREATED, 7) == datetime(2025, 5, 8, 12, 0, tzinfo=timezone.utc)


@pytest.mark.unit
def test_pending_request_before_deadline_can_respond():
    request = create_swap_request(created_at=CREATED)
    now = DEADLINE - timedelta(seconds=1)

    assert not expiry.is_expired(request, now)
    assert expiry.effective_status(request, now) == RequestStatus.PENDING
    assert expiry.can_respond(request, now)


@pytest.mark.unit
def test_pending_request_at_deadline_is_expired():
    request = create_swap_request(created_at=CREATED)

    assert expiry.is_expired(request, DEADLINE)
    assert expiry.effective_status(request, DEADLINE) == RequestStatus.EXPIRED
    assert not expiry.can_respond(request, DEADLINE)


@pytest.mark.unit
@pytest.mark.parametrize("status", ["ACCEPTED", "DECLINED", "CANCELLED", "EXPIRED"])
def test_terminal_status_is_kept_after_deadline(status):
    request = create_swap_request(created_at=CREATED, status=status)
    later = DEADLINE + timedelta(days=30)

    assert expiry.effective_status(request, later) == RequestStatus(status)
    assert not expiry.can_respond(request, CREATED)


@pytest.mark.unit
@pytest.mark.parametrize("now,expected", [
    (CREATED, 7),
    (CREATED + timedelta(days=6, hours=1), 1),
    (DEADLINE - timedelta(seconds=1), 1),
    (DEADLINE, 0),
    (DEADLINE + timedelta(days=3), 0),
])
def test_days_until_expiry(now, expected):
    request = create_swap_request(created_at=CREATED)

    assert expiry.days_until_expiry(request, now) == expected


@pytest.mark.unit
def test_helpers_default_to_current_time():
    request = create_swap_request(created_at=CREATED)

    with freeze_time("2025-05-03 12:00:00"):
        assert expiry.can_respond(request)
        assert expiry.days_until_expiry(request) == 5

    with freeze_time("2025-05-09 00:00:00"):
        assert not expiry.can_respond(request)
        assert expiry.days_until_expiry(request) == 0
