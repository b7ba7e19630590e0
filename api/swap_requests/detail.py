"""Fetch one request with its match insights (GET /api/swap_requests/{request_id})."""

from swapstay.services.container import get_service
from swapstay.utils.http import acting_user_id, endpoint, require_param, serialize_request


@endpoint("GET")
async def handler(request):
    user_id = acting_user_id(request)
    request_id = require_param(request, "request_id")

    swap_request, insights = await get_service().get_request(request_id, user_id)

    return 200, {
        "success": True,
        "request": serialize_request(swap_request),
        "match_insights": insights,
    }
