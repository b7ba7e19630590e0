"""Time-based expiry rules for swap requests.

Requests expire lazily: once ``now >= expires_at`` a PENDING request is
treated as EXPIRED even if the periodic sweep has not written that yet.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

from swapstay.models.swap_request import RequestStatus, SwapRequest


SECONDS_PER_DAY = 24 * 60 * 60


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def compute_expires_at(created_at: datetime, ttl_days: int) -> datetime:
    return created_at + timedelta(days=ttl_days)


def is_expired(request: SwapRequest, now: Optional[datetime] = None) -> bool:
    """True once the deadline has passed, whatever the stored status says."""
    now = now or utcnow()
    return now >= request.expires_at


def effective_status(request: SwapRequest, now: Optional[datetime] = None) -> RequestStatus:
    """Stored status with lazy expiry applied to PENDING requests."""
    if request.status == RequestStatus.PENDING and is_expired(request, now):
        return RequestStatus.EXPIRED
    return request.status


def can_respond(request: SwapRequest, now: Optional[datetime] = None) -> bool:
    """Whether the request can still be accepted, declined or cancelled."""
    return effective_status(request, now) == RequestStatus.PENDING


def days_until_expiry(request: SwapRequest, now: Optional[datetime] = None) -> int:
    """Whole days left before expiry, rounded up; 0 once expired."""
    now = now or utcnow()
    remaining = (request.expires_at - now).total_seconds()
    return max(0, math.ceil(remaining / SECONDS_PER_DAY))
