"""List the caller's sent and/or received requests (GET /api/swap_requests?type=all|sent|received)."""

from swapstay.services.container import get_service
from swapstay.utils.http import acting_user_id, endpoint, serialize_request


@endpoint("GET")
async def handler(request):
    user_id = acting_user_id(request)
    direction = (request.get("query") or {}).get("type", "all")

    summary = await get_service().list_user_requests(user_id, direction)

    return 200, {
        "success": True,
        "requests": [serialize_request(r) for r in summary.requests],
        "sent_count": summary.sent_count,
        "received_count": summary.received_count,
        "pending_sent": summary.pending_sent,
        "pending_received": summary.pending_received,
    }
