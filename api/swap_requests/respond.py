"""Owner accepts or declines a request (PUT /api/swap_requests/{request_id}/respond).

Body: ``{"action": "ACCEPT" | "DECLINE", "message"?: str, "counter_offer"?: {...}}``
"""

from swapstay.models.swap_request import RequestStatus
from swapstay.services.container import get_service
from swapstay.utils.http import acting_user_id, endpoint, parse_json_body, require_param, serialize_request


@endpoint("PUT", "PATCH")
async def handler(request):
    user_id = acting_user_id(request)
    request_id = require_param(request, "request_id")
    body = parse_json_body(request)
    action = str(body.get("action") or "").upper()

    swap_request = await get_service().respond(
        request_id,
        user_id,
        action,
        message=body.get("message"),
        counter_offer=body.get("counter_offer"),
    )

    verb = "accepted" if swap_request.status == RequestStatus.ACCEPTED else "declined"
    return 200, {
        "success": True,
        "request": serialize_request(swap_request),
        "message": f"Request {verb} successfully",
    }
