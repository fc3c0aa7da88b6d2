"""
Request size limiting middleware for FastAPI.
Protects the generation and documentation endpoints from oversized payloads.
"""
from typing import Dict, Optional
import json
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from tfgen.core.config import config

logger = logging.getLogger(__name__)


MAX_REQUEST_BODY_SIZE = 10 * 1024 * 1024  # 10 MB

# path -> (JSON field, config attribute holding its character limit)
PROTECTED_ENDPOINTS: Dict[str, tuple] = {
    "/api/generate-terraform": ("description", "MAX_DESCRIPTION_LENGTH"),
    "/api/documentation": ("terraform", "MAX_TERRAFORM_LENGTH"),
}


def _too_large(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={
            "status": "error",
            "error": "request_too_large",
            "message": message,
        },
    )


class RequestSizeLimiterMiddleware(BaseHTTPMiddleware):
    """
    Rejects bodies over 10 MB and text fields over their configured length.

    Only the endpoints in PROTECTED_ENDPOINTS are checked.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path not in PROTECTED_ENDPOINTS:
            return await call_next(request)

        content_length = request.headers.get("Content-Length")
        if content_length and content_length.isdigit() and int(content_length) > MAX_REQUEST_BODY_SIZE:
            logger.info("Request body size exceeded for %s: %s bytes", path, content_length)
            return _too_large("Request body size exceeds allowed limit of 10 MB.")

        body_bytes = await request.body()
        if len(body_bytes) > MAX_REQUEST_BODY_SIZE:
            logger.info("Request body size exceeded for %s: %d bytes", path, len(body_bytes))
            return _too_large("Request body size exceeds allowed limit of 10 MB.")

        if body_bytes:
            try:
                payload = json.loads(body_bytes.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError):
                # Malformed bodies are rejected by request validation downstream
                payload = None
            error = self._validate_payload(path, payload)
            if error:
                logger.info("Payload validation failed for %s: %s", path, error)
                return _too_large(error)

        async def receive():
            return {"type": "http.request", "body": body_bytes}

        request._receive = receive
        return await call_next(request)

    @staticmethod
    def _validate_payload(path: str, payload) -> Optional[str]:
        """Return an error message if the protected field is too long."""
        if not isinstance(payload, dict):
            return None
        field_name, limit_name = PROTECTED_ENDPOINTS[path]
        value = payload.get(field_name)
        limit = getattr(config, limit_name)
        if isinstance(value, str) and len(value) > limit:
            return f"Field '{field_name}' is too long: {len(value)} characters (limit: {limit})"
        return None
