"""Request counters for the caller (GET /api/swap_requests/stats)."""

from swapstay.services.container import get_service
from swapstay.utils.http import acting_user_id, endpoint


@endpoint("GET")
async def handler(request):
    user_id = acting_user_id(request)
    statistics = await get_service().request_statistics(user_id)
    return 200, {"success": True, "statistics": statistics.model_dump()}
