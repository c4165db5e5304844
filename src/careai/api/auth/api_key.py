"""
Shared-secret authentication via the 'X-API-Key' header.

Every route except the health probe and the OpenAPI documentation requires
the header to match the configured key. A server started without a usable
key answers 500 on protected routes instead of letting requests through.
"""

import hmac

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse
from loguru import logger

from careai.api.auth.base import AuthProvider

API_KEY_HEADER = "X-API-Key"
PLACEHOLDER_API_KEY = "your-secure-api-key"
PUBLIC_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")


class ApiKeyAuthProvider(AuthProvider):
    def __init__(self, api_key: str, public_paths: tuple[str, ...] = PUBLIC_PATHS) -> None:
        self.api_key = api_key
        self.public_paths = public_paths

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    def is_public(self, request: Request) -> bool:
        path = request.url.path
        return any(path == public or path.startswith(public + "/") for public in self.public_paths)

    def is_authorized(self, request: Request) -> bool:
        provided = request.headers.get(API_KEY_HEADER)
        if provided is None or not self.is_configured:
            return False
        return hmac.compare_digest(provided.encode(), self.api_key.encode())

    def bind_to_app(self, app: FastAPI) -> None:
        if not self.is_configured:
            logger.warning("API key is not configured; protected routes will answer 500")

        @app.middleware("http")
        async def api_key_middleware(request: Request, call_next):
            if request.method == "OPTIONS" or self.is_public(request):
                return await call_next(request)
            if API_KEY_HEADER.lower() not in request.headers:
                return PlainTextResponse("API Key was not provided", status_code=status.HTTP_401_UNAUTHORIZED)
            if not self.is_configured:
                return PlainTextResponse(
                    "Server configuration error: API Key not properly configured",
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                )
            if not self.is_authorized(request):
                return PlainTextResponse("Unauthorized client", status_code=status.HTTP_401_UNAUTHORIZED)
            return await call_next(request)
