"""Expire overdue pending requests (POST /api/swap_requests/cleanup_expired).

Meant for a scheduled cron trigger. When CRON_SECRET is set the caller must
send ``Authorization: Bearer <CRON_SECRET>``.
"""

import hmac

from swapstay.config import SwapStayConfig
from swapstay.services.container import get_service
from swapstay.utils.errors import AuthenticationError
from swapstay.utils.http import endpoint, get_header


def _check_cron_secret(request) -> None:
    secret = SwapStayConfig.CRON_SECRET
    if not secret:
        return
    provided = get_header(request, "Authorization") or ""
    if not hmac.compare_digest(provided, f"Bearer {secret}"):
        raise AuthenticationError("Invalid cron credentials")


@endpoint("GET", "POST")
async def handler(request):
    _check_cron_secret(request)
    expired = await get_service().sweep_expired()
    return 200, {
        "success": True,
        "expired": expired,
        "message": f"Cleaned up {expired} expired requests",
    }
