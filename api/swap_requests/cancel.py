"""Requester withdraws a pending request (PUT /api/swap_requests/{request_id}/cancel)."""

from swapstay.services.container import get_service
from swapstay.utils.http import acting_user_id, endpoint, require_param


@endpoint("PUT", "PATCH")
async def handler(request):
    user_id = acting_user_id(request)
    request_id = require_param(request, "request_id")

    await get_service().cancel(request_id, user_id)

    return 200, {"success": True, "message": "Request cancelled successfully"}
