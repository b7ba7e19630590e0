"""Helpers shared by the serverless HTTP handlers under ``api/``.

Handlers receive a request dict (``method``, ``headers``, ``body``,
``query``, ``path_params``) and return ``{"statusCode", "headers", "body"}``.
"""

import asyncio
import json
from functools import wraps
from typing import Any, Awaitable, Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from swapstay.config import SwapStayConfig
from swapstay.models.swap_request import SwapRequest
from swapstay.services import expiry
from swapstay.utils.errors import AuthenticationError, StoreError, SwapStayError, ValidationError
from swapstay.utils.logging import correlation_context, get_structured_logger, mask_user_id
from swapstay.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}

EndpointResult = tuple[int, dict[str, Any]]


def json_response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(body, default=str),
    }


def error_response(error: SwapStayError) -> dict[str, Any]:
    return json_response(error.status_code, error.to_dict())


def get_header(request: dict, name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    wanted = name.lower()
    for key, value in (request.get("headers") or {}).items():
        if key.lower() == wanted:
            return value
    return None


def parse_json_body(request: dict) -> dict[str, Any]:
    body = request.get("body")
    if body is None or body == "":
        return {}
    if isinstance(body, dict):
        return body
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as e:
        raise ValidationError("Request body is not valid JSON") from e
    if not isinstance(parsed, dict):
        raise ValidationError("Request body must be a JSON object")
    return parsed


def acting_user_id(request: dict) -> str:
    user_id = get_header(request, SwapStayConfig.USER_ID_HEADER)
    if not user_id:
        raise AuthenticationError("Authentication required")
    return user_id


def require_param(request: dict, name: str) -> str:
    """Path parameter, falling back to the query string for rewritten routes."""
    value = (request.get("path_params") or {}).get(name) or (request.get("query") or {}).get(name)
    if not value:
        raise ValidationError(f"Missing path parameter: {name}")
    return value


def serialize_request(request: SwapRequest) -> dict[str, Any]:
    """Stored record plus lazily derived expiry fields."""
    now = expiry.utcnow()
    record = request.to_record()
    record["effective_status"] = expiry.effective_status(request, now).value
    record["can_respond"] = expiry.can_respond(request, now)
    record["days_until_expiry"] = expiry.days_until_expiry(request, now)
    return record


def endpoint(*methods: str) -> Callable:
    """Turn an async ``(request) -> (status, body)`` function into a handler.

    Scopes a correlation ID per call and maps SwapStayError kinds to their
    status codes.
    """
    allowed = {m.upper() for m in methods}

    def decorator(func: Callable[[dict], Awaitable[EndpointResult]]) -> Callable[[dict], dict]:
        @wraps(func)
        def handler(request: dict) -> dict[str, Any]:
            LoggingConfig.setup_logging()
            correlation_id = get_header(request, LoggingConfig.LOG_CORRELATION_ID_HEADER)

            with correlation_context(correlation_id):
                method = (request.get("method") or "GET").upper()
                if method not in allowed:
                    return json_response(405, {
                        "success": False,
                        "error": "method_not_allowed",
                        "message": f"{method} not allowed",
                    })

                try:
                    status_code, body = asyncio.run(func(request))
                    return json_response(status_code, body)
                except StoreError as e:
                    logger.error(f"Store failure in {func.__module__}: {e}", exc_info=True)
                    return error_response(e)
                except SwapStayError as e:
                    logger.info(
                        "Request rejected",
                        endpoint=func.__module__,
                        error_code=e.code,
                        status_code=e.status_code,
                        user_id=mask_user_id(get_header(request, SwapStayConfig.USER_ID_HEADER)),
                    )
                    return error_response(e)
                except PydanticValidationError as e:
                    first = e.errors()[0]
                    field = ".".join(str(part) for part in first.get("loc", ()))
                    return error_response(ValidationError(f"Invalid {field}: {first['msg']}"))
                except Exception as e:
                    logger.error(f"Unhandled error in {func.__module__}: {e}", exc_info=True)
                    return json_response(500, {
                        "success": False,
                        "error": "internal_error",
                        "message": "An error occurred. Please try again later.",
                    })

        return handler

    return decorator
