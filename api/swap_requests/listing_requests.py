"""Requests received for one of the caller's listings (GET /api/swap_requests/listing/{listing_id})."""

from swapstay.models.swap_request import RequestStatus
from swapstay.services.container import get_service
from swapstay.utils.http import acting_user_id, endpoint, require_param, serialize_request


@endpoint("GET")
async def handler(request):
    user_id = acting_user_id(request)
    listing_id = require_param(request, "listing_id")

    requests = await get_service().list_listing_requests(listing_id, user_id)
    serialized = [serialize_request(r) for r in requests]

    return 200, {
        "success": True,
        "requests": serialized,
        "total_count": len(serialized),
        "pending_count": sum(1 for r in serialized if r["effective_status"] == RequestStatus.PENDING.value),
    }
