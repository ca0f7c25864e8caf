"""Request/response logging middleware."""

import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from masterchef.core.request_id import REQUEST_ID_HEADER, generate_request_id, set_request_id

logger = logging.getLogger(__name__)

SENSITIVE_KEYS = ("password", "token", "secret", "api_key", "apikey", "authorization")
LONG_TEXT_KEYS = ("recipe", "recipecontent", "systemprompt", "notes")
LONG_TEXT_LIMIT = 200


def mask_sensitive_data(data: Any) -> Any:
    """Recursively mask credentials and shorten recipe bodies in logged params."""
    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            key_lower = str(key).lower()
            if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
                masked[key] = "***"
            elif key_lower in LONG_TEXT_KEYS and isinstance(value, str) and len(value) > LONG_TEXT_LIMIT:
                masked[key] = f"{value[:LONG_TEXT_LIMIT]}... ({len(value)} chars)"
            else:
                masked[key] = mask_sensitive_data(value)
        return masked
    if isinstance(data, list):
        return [mask_sensitive_data(item) for item in data]
    return data


async def get_request_params(request: Request) -> Tuple[Dict[str, Any], Optional[bytes]]:
    """
    Extract request parameters from query/path/JSON body.

    Returns both params and the raw body bytes (None when the body was not read).
    """
    params: Dict[str, Any] = {}
    body_bytes: Optional[bytes] = None

    if request.query_params:
        params["query"] = dict(request.query_params)

    if request.path_params:
        params["path"] = dict(request.path_params)

    content_type = request.headers.get("content-type", "").lower()
    if "application/json" in content_type:
        try:
            body_bytes = await request.body()
            if body_bytes:
                try:
                    params["body"] = json.loads(body_bytes)
                except json.JSONDecodeError:
                    params["body"] = body_bytes.decode("utf-8", errors="ignore")[:500]
        except Exception as e:
            logger.warning(f"Failed to read request body: {str(e)}")
            params["body_error"] = str(e)

    return params, body_bytes


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses with timing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = generate_request_id(request.headers.get(REQUEST_ID_HEADER))
        set_request_id(request_id)
        request.state.request_id = request_id

        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        # BaseHTTPMiddleware caches the body read here and replays it downstream
        request_params, _ = await get_request_params(request)

        masked_params = mask_sensitive_data(request_params)

        logger.info(
            f"API Request: {method} {path}",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "params": masked_params,
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent", "Unknown"),
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"API Error: {method} {path} - {str(e)}",
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "params": masked_params,
                    "process_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
                },
                exc_info=True,
            )
            raise

        logger.info(
            f"API Response: {method} {path} - {response.status_code}",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "process_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
