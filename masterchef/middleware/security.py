"""CORS, compression and response hardening."""

from typing import Dict, List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from masterchef.config import settings
from masterchef.core.request_id import REQUEST_ID_HEADER

SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    # Responses are per-user recipes and fresh generations
    "Cache-Control": "no-store",
}


def setup_cors(app: FastAPI, origins: Optional[List[str]] = None) -> None:
    """Let the browser client call the API with a bearer token."""
    origins = origins or settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Credentials cannot be combined with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER, "X-Response-Time"],
    )


def setup_compression(app: FastAPI, minimum_size: int = 1000) -> None:
    app.add_middleware(GZipMiddleware, minimum_size=minimum_size)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds SECURITY_HEADERS unless a route already set one."""

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response
