"""Create a swap or rent request (POST /api/swap_requests)."""

from swapstay.models.swap_request import CreateSwapRequestInput
from swapstay.services.container import get_service
from swapstay.services.matching import generate_match_insights
from swapstay.utils.http import acting_user_id, endpoint, parse_json_body, serialize_request


@endpoint("POST")
async def handler(request):
    user_id = acting_user_id(request)
    payload = CreateSwapRequestInput.model_validate(parse_json_body(request))

    swap_request = await get_service().create(user_id, payload)

    return 201, {
        "success": True,
        "swap_request": serialize_request(swap_request),
        "match_insights": generate_match_insights(swap_request.matching_factors),
    }
