"""Test helper functions."""

import json
from typing import Any, Dict, Optional


FROZEN_NOW = "2025-05-01 12:00:00"


def create_handler_request(
    method: str = "GET",
    user_id: Optional[str] = None,
    body: Any = None,
    path_params: Optional[Dict[str, str]] = None,
    query: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Build the request dict the api/ handlers receive."""
    all_headers = {"content-type": "application/json"}
    if user_id is not None:
        all_headers["X-User-Id"] = user_id
    all_headers.update(headers or {})

    return {
        "method": method,
        "headers": all_headers,
        "body": json.dumps(body) if isinstance(body, dict) else body,
        "query": query or {},
        "path_params": path_params or {},
    }


def create_payload_body(
    request_type: str = "SWAP",
    target_listing_id: str = "listing-target",
    requester_listing_id: Optional[str] = "listing-offered",
    start_date: str = "2025-06-01",
    end_date: str = "2025-07-01",
    message: str = "Would love to swap for the summer!",
    proposed_price: Optional[float] = None,
) -> Dict[str, Any]:
    """JSON body for the create endpoint."""
    body: Dict[str, Any] = {
        "request_type": request_type,
        "target_listing_id": target_listing_id,
        "requested_dates": {"start_date": start_date, "end_date": end_date},
        "message": message,
    }
    if requester_listing_id is not None:
        body["requester_listing_id"] = requester_listing_id
    if proposed_price is not None:
        body["proposed_price"] = proposed_price
    return body
